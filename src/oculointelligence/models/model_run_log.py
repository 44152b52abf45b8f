# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Append-only audit record of one pipeline execution."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from oculointelligence.models.model_error_pattern import ModelErrorPattern


class ModelExamTypeRunSummary(BaseModel):
    """Per-category counts stored in ``details_by_exam_type``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    total_feedback: int = Field(..., ge=0)
    patterns_count: int = Field(..., ge=0)
    corrections: int = Field(..., ge=0)
    failed_corrections: int = Field(default=0, ge=0)


class ModelAnalysisRunLog(BaseModel):
    """A ``feedback_analysis_log`` row.

    Attributes:
        run_id: Identifier shared with the run's log lines.
        analysis_period_start: Start of the scanned window.
        analysis_period_end: End of the scanned window.
        total_feedback_analyzed: Feedback rows read for the window.
        patterns_found: Exam category -> retained patterns.
        corrections_generated: Corrections successfully upserted.
        details_by_exam_type: Exam category -> summary counts.
        insufficient_data: The run stopped before pattern detection.
        created_at: When the run finished.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    run_id: UUID
    analysis_period_start: datetime
    analysis_period_end: datetime
    total_feedback_analyzed: int = Field(..., ge=0)
    patterns_found: dict[str, list[ModelErrorPattern]] = Field(default_factory=dict)
    corrections_generated: int = Field(default=0, ge=0)
    details_by_exam_type: dict[str, ModelExamTypeRunSummary] = Field(default_factory=dict)
    insufficient_data: bool = False
    created_at: datetime


__all__ = ["ModelAnalysisRunLog", "ModelExamTypeRunSummary"]
