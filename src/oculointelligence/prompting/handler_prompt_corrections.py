# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Inject active prompt corrections into an analysis prompt.

Corrections are grouped by intent into up to three sections, each numbered
in priority order:

    correction  -> FEEDBACK-BASED CORRECTIONS
    exclusion   -> FALSE POSITIVE ALERTS
    emphasis    -> FINDINGS REQUIRING SPECIAL ATTENTION

The block is inserted just before the prompt's ``IMPORTANTE:`` section when
there is one, otherwise appended.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from oculointelligence.enums import EnumConfigType
from oculointelligence.models import ModelPromptCorrectionConfig

if TYPE_CHECKING:
    from oculointelligence.protocols import ProtocolCorrectionStore

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "IMPORTANTE:"


@dataclass(frozen=True)
class _Section:
    config_type: EnumConfigType
    heading: str
    intro: str | None
    guidance_label: str


_SECTIONS = (
    _Section(
        EnumConfigType.CORRECTION,
        "## FEEDBACK-BASED CORRECTIONS",
        "The following observations are based on feedback from specialist doctors:",
        "Guidance:",
    ),
    _Section(
        EnumConfigType.EXCLUSION,
        "## FALSE POSITIVE ALERTS",
        "The following diagnoses have produced frequent false positives:",
        "Required criteria:",
    ),
    _Section(
        EnumConfigType.EMPHASIS,
        "## FINDINGS REQUIRING SPECIAL ATTENTION",
        None,
        "Signs to look for:",
    ),
)


async def fetch_active_corrections(
    store: ProtocolCorrectionStore,
    exam_type: str,
    now: datetime | None = None,
) -> list[ModelPromptCorrectionConfig]:
    """Active, unexpired corrections for ``exam_type``, highest priority first."""
    configs = await store.fetch_active_corrections(exam_type, now or datetime.now(UTC))
    logger.debug(
        "Fetched active corrections",
        extra={"exam_type": exam_type, "corrections": len(configs)},
    )
    return configs


def _render_section(section: _Section, configs: list[ModelPromptCorrectionConfig]) -> list[str]:
    lines = [section.heading, ""]
    if section.intro:
        lines += [section.intro, ""]
    for number, config in enumerate(configs, start=1):
        lines.append(f"{number}. {config.content.message}")
        guidance = config.content.guidance()
        if guidance:
            lines.append(f"   {section.guidance_label}")
            lines.extend(f"   - {item}" for item in guidance)
        lines.append("")
    return lines


def render_corrections_block(configs: Sequence[ModelPromptCorrectionConfig]) -> str:
    """The correction sections as prompt text; empty when there is nothing to say."""
    ordered = sorted(configs, key=lambda c: -c.priority)
    lines: list[str] = []
    for section in _SECTIONS:
        selected = [c for c in ordered if c.config_type is section.config_type]
        if selected:
            lines += _render_section(section, selected)
    return "\n".join(lines)


def apply_dynamic_corrections(
    base_prompt: str,
    configs: Sequence[ModelPromptCorrectionConfig],
    *,
    marker: str = DEFAULT_MARKER,
) -> str:
    """Return ``base_prompt`` with the corrections block injected.

    Args:
        base_prompt: Exam-specific analysis prompt.
        configs: Corrections to inject, in any order.
        marker: Section header the block is inserted in front of (first
            occurrence only).

    Returns:
        The original prompt unchanged when ``configs`` is empty.
    """
    block = render_corrections_block(configs)
    if not block:
        return base_prompt
    if marker in base_prompt:
        return base_prompt.replace(marker, f"{block}\n{marker}", 1)
    return f"{base_prompt}\n\n{block}"


__all__ = [
    "DEFAULT_MARKER",
    "apply_dynamic_corrections",
    "fetch_active_corrections",
    "render_corrections_block",
]
