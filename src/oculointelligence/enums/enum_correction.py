# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Enums for error patterns and the prompt corrections synthesized from them."""

from enum import Enum


class EnumErrorPatternType(str, Enum):
    """Families of AI error detected from doctor feedback.

    Attributes:
        MISSED_DIAGNOSIS: Doctor added a diagnosis the AI did not report.
        FALSE_POSITIVE: Doctor removed a diagnosis the AI reported.
        QUALITY_DISAGREEMENT: Doctor rejected the AI image-quality verdict.
        BIOMARKER_ERROR: Doctor marked a biomarker finding as incorrect.
    """

    MISSED_DIAGNOSIS = "missed_diagnosis"
    FALSE_POSITIVE = "false_positive"
    QUALITY_DISAGREEMENT = "quality_disagreement"
    BIOMARKER_ERROR = "biomarker_error"


class EnumConfigType(str, Enum):
    """Intent of a prompt correction config.

    Attributes:
        CORRECTION: Generic calibration adjustment.
        EXCLUSION: Stop over-calling a label.
        EMPHASIS: Pay more attention to a label.
    """

    CORRECTION = "correction"
    EXCLUSION = "exclusion"
    EMPHASIS = "emphasis"


class EnumCorrectionSeverity(str, Enum):
    """Severity attached to a correction's content."""

    MEDIUM = "medium"
    HIGH = "high"


__all__ = [
    "EnumConfigType",
    "EnumCorrectionSeverity",
    "EnumErrorPatternType",
]
