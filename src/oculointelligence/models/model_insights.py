# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Read-side dashboard summaries computed from doctor feedback.

Percentages are on a 0-100 scale. None of these summaries is gated by a
sample-size threshold.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelFeedbackStats(BaseModel):
    """Overall accuracy distribution."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    total_feedbacks: int = Field(default=0, ge=0)
    avg_rating: float = 0.0
    correct_rate: float = 0.0
    partial_rate: float = 0.0
    incorrect_rate: float = 0.0
    reference_cases_count: int = Field(default=0, ge=0)


class ModelExamTypeAccuracy(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    exam_type: str
    correct: int = 0
    partial: int = 0
    incorrect: int = 0
    total: int = 0
    correct_rate: float = 0.0


class ModelDiagnosisAccuracy(BaseModel):
    """Confirmed vs removed counts for one diagnosis label."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    diagnosis: str
    correct_count: int = 0
    removed_count: int = 0
    accuracy: float = 0.0


class ModelLabelCount(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    label: str
    count: int = Field(..., ge=0)


class ModelLearningInsights(BaseModel):
    """What doctors keep correcting.

    Attributes:
        most_missed_diagnoses: Labels doctors removed (AI over-called them).
        most_added_diagnoses: Labels doctors added (AI missed them).
        quality_disagreement_rate: Disagreements over records with a
            quality verdict.
        difficulty_distribution: Case difficulty label -> count.
        top_pathology_tags: Most frequent pathology tags.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    most_missed_diagnoses: list[ModelLabelCount] = Field(default_factory=list)
    most_added_diagnoses: list[ModelLabelCount] = Field(default_factory=list)
    quality_disagreement_rate: float = 0.0
    difficulty_distribution: dict[str, int] = Field(default_factory=dict)
    top_pathology_tags: list[ModelLabelCount] = Field(default_factory=list)


class ModelValidationTrendPoint(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    date: str
    success_rate: float


class ModelValidationMetrics(BaseModel):
    """Validator outcomes recorded on analyses under ``raw_response._validation``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    total_validations: int = Field(default=0, ge=0)
    success_rate: float = 0.0
    common_warnings: list[ModelLabelCount] = Field(default_factory=list)
    validation_trend: list[ModelValidationTrendPoint] = Field(default_factory=list)


__all__ = [
    "ModelDiagnosisAccuracy",
    "ModelExamTypeAccuracy",
    "ModelFeedbackStats",
    "ModelLabelCount",
    "ModelLearningInsights",
    "ModelValidationMetrics",
    "ModelValidationTrendPoint",
]
