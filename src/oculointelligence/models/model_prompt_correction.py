# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Prompt correction configuration entries.

A correction is identified by its natural key ``(exam_type, config_type,
content.target)``; the store upserts on that triple so re-running the
pipeline overwrites rows in place instead of accumulating duplicates.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from oculointelligence.enums import EnumConfigType, EnumCorrectionSeverity
from oculointelligence.validation import decode_json_field


class ModelCorrectionContent(BaseModel):
    """Machine-readable instruction stored in ``prompt_configs.content``.

    ``suggestion``, ``criteria`` and ``characteristics`` are guidance bullets;
    which of them is set depends on the pattern family.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    target: str = Field(..., min_length=1)
    type: str
    message: str
    suggestion: list[str] | None = None
    criteria: list[str] | None = None
    characteristics: list[str] | None = None
    severity: EnumCorrectionSeverity | None = None
    feedback_count: int | None = Field(default=None, ge=0)
    error_rate: float | None = Field(default=None, ge=0.0, le=1.0)

    def guidance(self) -> list[str]:
        return [*(self.suggestion or []), *(self.criteria or []), *(self.characteristics or [])]

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


NaturalKey = tuple[str, str, str]


class ModelPromptCorrectionConfig(BaseModel):
    """A ``prompt_configs`` row.

    Attributes:
        id: Surrogate identifier; ``None`` before the first write.
        exam_type: Exam category the correction applies to.
        config_type: Intent of the correction.
        content: The instruction itself.
        priority: 0-100, higher is injected first.
        is_active: Cleared by expiration cleanup, never by the pipeline.
        source_feedback_count: Sample size behind the correction.
        error_rate: Observed rate behind the correction.
        created_at: First write.
        updated_at: Last write.
        expires_at: ``updated_at`` plus the validity period.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: UUID | None = None
    exam_type: str = Field(..., min_length=1)
    config_type: EnumConfigType
    content: ModelCorrectionContent
    priority: int = Field(..., ge=0, le=100)
    is_active: bool = True
    source_feedback_count: int = Field(default=0, ge=0)
    error_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    created_at: datetime
    updated_at: datetime
    expires_at: datetime

    @field_validator("content", mode="before")
    @classmethod
    def _decode_content(cls, value: object) -> object:
        return decode_json_field(value)

    @property
    def target(self) -> str:
        return self.content.target

    @property
    def natural_key(self) -> NaturalKey:
        return (self.exam_type, self.config_type.value, self.content.target)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ModelPromptCorrectionConfig:
        return cls.model_validate(dict(row.items()))


__all__ = [
    "ModelCorrectionContent",
    "ModelPromptCorrectionConfig",
    "NaturalKey",
]
