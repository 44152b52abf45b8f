# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Outcome of a feedback analysis run and its HTTP response form."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from oculointelligence.models.model_error_pattern import ModelErrorPattern


class ModelExamTypeAnalysis(BaseModel):
    """What one exam category produced during a run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    exam_type: str
    total_feedback: int = Field(..., ge=0)
    patterns: list[ModelErrorPattern] = Field(default_factory=list)
    corrections_generated: int = Field(default=0, ge=0)
    failed_corrections: int = Field(default=0, ge=0)

    def to_response(self) -> dict[str, Any]:
        return {
            "exam_type": self.exam_type,
            "total_feedback": self.total_feedback,
            "patterns": [pattern.to_summary() for pattern in self.patterns],
            "corrections_generated": self.corrections_generated,
        }


class ModelFeedbackAnalysisResult(BaseModel):
    """Result of ``run_feedback_analysis``.

    An insufficient-data run is a success with ``insufficient_data=True``
    and no per-category results.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    run_id: UUID
    period_start: datetime
    period_end: datetime
    total_feedback_analyzed: int = Field(..., ge=0)
    results: list[ModelExamTypeAnalysis] = Field(default_factory=list)
    total_corrections_generated: int = Field(default=0, ge=0)
    failed_corrections: int = Field(default=0, ge=0)
    expired_cleaned: int = Field(default=0, ge=0)
    insufficient_data: bool = False
    message: str | None = None

    def to_response(self) -> dict[str, Any]:
        """JSON body returned by the trigger endpoint."""
        if self.insufficient_data:
            return {
                "success": True,
                "message": self.message,
                "analyzed": self.total_feedback_analyzed,
                "corrections_generated": 0,
            }
        return {
            "success": True,
            "period": {
                "start": self.period_start.isoformat(),
                "end": self.period_end.isoformat(),
            },
            "total_feedback_analyzed": self.total_feedback_analyzed,
            "results": [result.to_response() for result in self.results],
            "total_corrections_generated": self.total_corrections_generated,
            "expired_cleaned": self.expired_cleaned,
        }


__all__ = ["ModelExamTypeAnalysis", "ModelFeedbackAnalysisResult"]
