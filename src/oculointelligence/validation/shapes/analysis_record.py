# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Shape of a persisted ``ai_analysis`` row.

The analysis step flattens the AI response into columns. JSON columns stay
loosely typed here; the exam-family shapes in this package describe their
inner structure.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from oculointelligence.validation.shapes.common import AiShape


class AiAnalysisRecordShape(AiShape):
    id: UUID | None = None
    exam_id: UUID | None = None
    analyzed_at: datetime | None = None
    quality_score: str | None = None
    findings: dict[str, Any] | None = None
    biomarkers: dict[str, Any] | None = None
    measurements: dict[str, Any] | None = None
    diagnosis: list[str] | None = None
    recommendations: list[str] | None = None
    risk_classification: str | None = None
    optic_nerve_analysis: dict[str, Any] | None = None
    retinography_analysis: dict[str, Any] | None = None
    model_used: str | None = None
    raw_response: dict[str, Any] | None = None


__all__ = ["AiAnalysisRecordShape"]
