# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Prompt assembly from active corrections."""

from oculointelligence.prompting.handler_prompt_corrections import (
    DEFAULT_MARKER,
    apply_dynamic_corrections,
    fetch_active_corrections,
    render_corrections_block,
)

__all__ = [
    "DEFAULT_MARKER",
    "apply_dynamic_corrections",
    "fetch_active_corrections",
    "render_corrections_block",
]
