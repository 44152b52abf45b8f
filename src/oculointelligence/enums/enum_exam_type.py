# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Exam modality enum.

Exam types are stored as plain strings on the ``exams`` table. Feedback for an
exam type not listed here is still processed (the correction set is keyed by
the raw string), but clinical guidance lookups fall back to generic text.
"""

from enum import Enum


class EnumExamType(str, Enum):
    """Ophthalmology exam modalities analysed by the AI."""

    OCT_MACULAR = "oct_macular"
    OCT_NERVE = "oct_nerve"
    RETINOGRAPHY = "retinography"


__all__ = ["EnumExamType"]
