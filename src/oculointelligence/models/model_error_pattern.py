# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Error pattern detected in one exam category's feedback.

Patterns are recomputed on every run and never stored on their own; only the
corrections synthesized from them are persisted (and the run log keeps a
copy for audit).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from oculointelligence.enums import EnumErrorPatternType


class ModelErrorPattern(BaseModel):
    """Frequency statistics for one target within one family.

    Attributes:
        target: Diagnosis label, biomarker key, or ``quality_assessment``.
        type: Pattern family.
        count: Records exhibiting the error.
        rate: ``count`` over the family's denominator.
        examples: Up to ``max_examples`` exam identifiers, first seen first.
        breakdown: Family-specific sub-counts (biomarker ``missed`` and
            ``false_positive``).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    target: str = Field(..., min_length=1)
    type: EnumErrorPatternType
    count: int = Field(..., ge=0)
    rate: float = Field(..., ge=0.0, le=1.0)
    examples: list[str] = Field(default_factory=list)
    breakdown: dict[str, int] = Field(default_factory=dict)

    def to_summary(self) -> dict[str, Any]:
        """JSON-ready form used in run responses and run logs."""
        summary = self.model_dump(mode="json")
        if not self.breakdown:
            summary.pop("breakdown")
        return summary


__all__ = ["ModelErrorPattern"]
