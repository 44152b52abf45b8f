# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Doctor feedback joined with its exam category and AI analysis.

Rows come from the feedback source already joined (feedback, exam type and
the analysis columns the pipeline needs). Free-form columns are normalized
on the way in: label arrays through ``to_string_array``, the biomarker map
through ``to_verdict``, and the analysis columns through partial parsing so
a garbled analysis never discards the feedback itself.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from oculointelligence.enums import EnumAccuracyRating, EnumQualityFeedback
from oculointelligence.validation import (
    decode_json_field,
    parse_partial,
    to_boolean,
    to_number,
    to_string_array,
    to_verdict,
)
from oculointelligence.validation.shapes import AiAnalysisRecordShape

logger = logging.getLogger(__name__)

# Joined row column -> analysis record field
_ANALYSIS_COLUMNS: dict[str, str] = {
    "analysis_quality_score": "quality_score",
    "analysis_diagnosis": "diagnosis",
    "analysis_biomarkers": "biomarkers",
}

# Analysis columns stored as JSON; the rest are plain text
_JSON_FIELDS = frozenset({"diagnosis", "biomarkers"})


def _decode_analysis_column(field: str, value: object) -> object:
    """Decode a JSON analysis column, keeping undecodable text for partial parsing."""
    if field not in _JSON_FIELDS:
        return value
    decoded = decode_json_field(value)
    return value if decoded is None else decoded


class ModelAnalysisSnapshot(BaseModel):
    """The parts of an AI analysis the pipeline compares feedback against."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    quality_score: str | None = None
    diagnosis: list[str] = Field(default_factory=list)
    biomarkers: dict[str, Any] = Field(default_factory=dict)
    invalid_fields: list[str] = Field(
        default_factory=list,
        description="Analysis fields dropped by partial parsing",
    )

    def reports_biomarker_present(self, biomarker: str) -> bool:
        """Whether the AI reported ``biomarker`` as present."""
        finding = self.biomarkers.get(biomarker)
        return isinstance(finding, Mapping) and finding.get("present") is True

    @classmethod
    def from_columns(cls, row: Mapping[str, Any]) -> ModelAnalysisSnapshot:
        raw = {
            field: _decode_analysis_column(field, row[column])
            for column, field in _ANALYSIS_COLUMNS.items()
            if column in row and row[column] is not None
        }
        parsed = parse_partial(AiAnalysisRecordShape, raw, context="feedback analysis")
        return cls(
            quality_score=parsed.data.get("quality_score"),
            diagnosis=to_string_array(parsed.data.get("diagnosis")),
            biomarkers=parsed.data.get("biomarkers") or {},
            invalid_fields=parsed.invalid_fields,
        )


class ModelFeedbackRecord(BaseModel):
    """A doctor's review of one AI analysis.

    Attributes:
        id: Feedback row identifier.
        exam_id: Exam the analysis belongs to.
        analysis_id: Reviewed analysis, when linked.
        doctor_id: Reviewing doctor.
        exam_type: Exam category the row is grouped under.
        accuracy_rating: Coarse verdict; unrecognised values become ``None``.
        quality_feedback: Verdict on the quality assessment; ``None`` when
            absent.
        diagnosis_correct: Labels the doctor confirmed.
        diagnosis_added: Labels the doctor added (AI missed them).
        diagnosis_removed: Labels the doctor removed (AI over-called them).
        biomarkers_feedback: Biomarker name -> whether the AI was right.
        pathology_tags: Free-text tags, deduplicated, first spelling kept.
        case_difficulty: Free-text difficulty label.
        is_reference_case: Marked as a teaching reference.
        overall_rating: 1-5, ``None`` when missing or out of range.
        analysis: Snapshot of the reviewed analysis.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: UUID
    exam_id: UUID
    analysis_id: UUID | None = None
    doctor_id: UUID | None = None
    exam_type: str = Field(..., min_length=1)
    accuracy_rating: EnumAccuracyRating | None = None
    quality_feedback: EnumQualityFeedback | None = None
    diagnosis_correct: list[str] = Field(default_factory=list)
    diagnosis_added: list[str] = Field(default_factory=list)
    diagnosis_removed: list[str] = Field(default_factory=list)
    biomarkers_feedback: dict[str, bool] = Field(default_factory=dict)
    pathology_tags: list[str] = Field(default_factory=list)
    case_difficulty: str | None = None
    is_reference_case: bool = False
    overall_rating: int | None = None
    created_at: datetime
    updated_at: datetime | None = None
    analysis: ModelAnalysisSnapshot = Field(default_factory=ModelAnalysisSnapshot)

    @field_validator("accuracy_rating", mode="before")
    @classmethod
    def _coerce_accuracy_rating(cls, value: object) -> EnumAccuracyRating | None:
        try:
            return EnumAccuracyRating(value) if value is not None else None
        except ValueError:
            return None

    @field_validator("quality_feedback", mode="before")
    @classmethod
    def _coerce_quality_feedback(cls, value: object) -> EnumQualityFeedback | None:
        try:
            return EnumQualityFeedback(value) if value is not None else None
        except ValueError:
            return None

    @field_validator(
        "diagnosis_correct",
        "diagnosis_added",
        "diagnosis_removed",
        mode="before",
    )
    @classmethod
    def _coerce_labels(cls, value: object) -> list[str]:
        return to_string_array(value)

    @field_validator("pathology_tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: object) -> list[str]:
        tags: list[str] = []
        for tag in to_string_array(value):
            if tag not in tags:
                tags.append(tag)
        return tags

    @field_validator("biomarkers_feedback", mode="before")
    @classmethod
    def _coerce_biomarkers(cls, value: object) -> dict[str, bool]:
        decoded = decode_json_field(value)
        if not isinstance(decoded, Mapping):
            return {}
        verdicts: dict[str, bool] = {}
        for name, raw_verdict in decoded.items():
            biomarker = str(name).strip()
            verdict = to_verdict(raw_verdict)
            if not biomarker or verdict is None:
                continue
            verdicts[biomarker] = verdict
        return verdicts

    @field_validator("is_reference_case", mode="before")
    @classmethod
    def _coerce_reference_case(cls, value: object) -> bool:
        return to_boolean(value)

    @field_validator("overall_rating", mode="before")
    @classmethod
    def _coerce_rating(cls, value: object) -> int | None:
        number = to_number(value)
        if number is None or not 1 <= number <= 5:
            return None
        return round(number)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ModelFeedbackRecord:
        """Build a record from a joined feedback row."""
        data = {key: row[key] for key in row.keys() if key not in _ANALYSIS_COLUMNS}
        if "ai_analysis_id" in data and "analysis_id" not in data:
            data["analysis_id"] = data.pop("ai_analysis_id")
        data["analysis"] = ModelAnalysisSnapshot.from_columns(row)
        return cls.model_validate(data)


__all__ = ["ModelAnalysisSnapshot", "ModelFeedbackRecord"]
