# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Enums for doctor feedback on AI analyses."""

from enum import Enum


class EnumAccuracyRating(str, Enum):
    """Doctor's coarse verdict on an AI analysis."""

    CORRECT = "correct"
    PARTIALLY_CORRECT = "partially_correct"
    INCORRECT = "incorrect"


class EnumQualityFeedback(str, Enum):
    """Doctor's verdict on the AI image-quality assessment.

    An absent verdict is represented as ``None`` on the feedback record, not
    as an enum member, so that "not reported" never counts toward a rate.
    """

    AGREE = "agree"
    DISAGREE = "disagree"


__all__ = ["EnumAccuracyRating", "EnumQualityFeedback"]
