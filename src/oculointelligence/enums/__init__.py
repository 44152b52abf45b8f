# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Enumerations shared across the oculointelligence package."""

from oculointelligence.enums.enum_correction import (
    EnumConfigType,
    EnumCorrectionSeverity,
    EnumErrorPatternType,
)
from oculointelligence.enums.enum_exam_type import EnumExamType
from oculointelligence.enums.enum_feedback import (
    EnumAccuracyRating,
    EnumQualityFeedback,
)

__all__ = [
    "EnumAccuracyRating",
    "EnumConfigType",
    "EnumCorrectionSeverity",
    "EnumErrorPatternType",
    "EnumExamType",
    "EnumQualityFeedback",
]
