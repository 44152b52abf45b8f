# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Thresholds for the feedback correction pipeline.

``ModelCorrectionThresholds`` is the frozen value passed into the pipeline.
``FeedbackPipelineSettings`` loads the same values from the environment and
adds operational knobs that do not affect which corrections are produced.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ModelCorrectionThresholds(BaseModel):
    """Statistical gates and lifetimes for synthesized corrections.

    Attributes:
        analysis_period_days: Trailing window of feedback to analyse.
        min_feedback_count: Minimum sample for a group and for a pattern.
        min_error_rate: Minimum rate for a pattern to become a correction.
        min_false_positive_rate: Stricter minimum for the false-positive
            family.
        correction_validity_days: Lifetime of a correction after its last
            write.
        max_examples: Record identifiers kept per pattern for traceability.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    analysis_period_days: int = Field(
        default=30,
        ge=1,
        description="Trailing window of feedback to analyse, in days",
    )
    min_feedback_count: int = Field(
        default=5,
        ge=1,
        description="Minimum sample size for a group and for a pattern",
    )
    min_error_rate: float = Field(
        default=0.10,
        ge=0.0,
        le=1.0,
        description="Minimum error rate for a pattern to yield a correction",
    )
    min_false_positive_rate: float = Field(
        default=0.15,
        ge=0.0,
        le=1.0,
        description="Minimum rate for the false-positive family",
    )
    correction_validity_days: int = Field(
        default=90,
        ge=1,
        description="Days a correction stays active after its last write",
    )
    max_examples: int = Field(
        default=5,
        ge=0,
        description="Example record identifiers kept per pattern",
    )

    @model_validator(mode="after")
    def validate_false_positive_rate_is_stricter(self) -> ModelCorrectionThresholds:
        """The false-positive gate may never be looser than the general one."""
        if self.min_false_positive_rate < self.min_error_rate:
            raise ValueError(
                "min_false_positive_rate must be >= min_error_rate "
                f"(got {self.min_false_positive_rate} < {self.min_error_rate})"
            )
        return self


class FeedbackPipelineSettings(BaseSettings):
    """Pipeline settings loaded from ``FEEDBACK_PIPELINE_*`` environment variables.

    Environment variables:
        FEEDBACK_PIPELINE_ANALYSIS_PERIOD_DAYS: int (default 30)
        FEEDBACK_PIPELINE_MIN_FEEDBACK_COUNT: int (default 5)
        FEEDBACK_PIPELINE_MIN_ERROR_RATE: float (default 0.10)
        FEEDBACK_PIPELINE_MIN_FALSE_POSITIVE_RATE: float (default 0.15)
        FEEDBACK_PIPELINE_CORRECTION_VALIDITY_DAYS: int (default 90)
        FEEDBACK_PIPELINE_MAX_EXAMPLES: int (default 5)
        FEEDBACK_PIPELINE_READ_PAGE_SIZE: int (default 500)
        FEEDBACK_PIPELINE_RECORD_INSUFFICIENT_RUNS: bool (default false)
    """

    model_config = SettingsConfigDict(
        env_prefix="FEEDBACK_PIPELINE_",
        extra="ignore",
    )

    analysis_period_days: int = Field(default=30, ge=1)
    min_feedback_count: int = Field(default=5, ge=1)
    min_error_rate: float = Field(default=0.10, ge=0.0, le=1.0)
    min_false_positive_rate: float = Field(default=0.15, ge=0.0, le=1.0)
    correction_validity_days: int = Field(default=90, ge=1)
    max_examples: int = Field(default=5, ge=0)
    read_page_size: int = Field(
        default=500,
        ge=1,
        le=10000,
        description="Rows per keyset page when reading feedback",
    )
    record_insufficient_runs: bool = Field(
        default=False,
        description="Write a run log even when a run stops for insufficient data",
    )

    def to_thresholds(self) -> ModelCorrectionThresholds:
        """Convert settings to a frozen ModelCorrectionThresholds instance."""
        return ModelCorrectionThresholds(
            analysis_period_days=self.analysis_period_days,
            min_feedback_count=self.min_feedback_count,
            min_error_rate=self.min_error_rate,
            min_false_positive_rate=self.min_false_positive_rate,
            correction_validity_days=self.correction_validity_days,
            max_examples=self.max_examples,
        )


__all__ = ["FeedbackPipelineSettings", "ModelCorrectionThresholds"]
