# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Turn retained error patterns into prompt correction configs.

Family to intent:
    missed_diagnosis     -> emphasis   (pay more attention to the label)
    false_positive       -> exclusion  (stop over-calling the label)
    quality_disagreement -> correction (recalibrate quality grading)
    biomarker_error      -> correction (recalibrate the biomarker)

Priority:
    ``min(100, round(rate * 80) + min(count, 20))``. Non-decreasing in both
    rate and sample size, bounded to [0, 100]. The count term saturates
    at 20.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from oculointelligence.enums import (
    EnumConfigType,
    EnumCorrectionSeverity,
    EnumErrorPatternType,
)
from oculointelligence.models import (
    ModelCorrectionContent,
    ModelCorrectionThresholds,
    ModelErrorPattern,
    ModelPromptCorrectionConfig,
)
from oculointelligence.pipeline.clinical_guidance import (
    biomarker_characteristics,
    criteria_for_diagnosis,
    quality_criteria,
    suggestions_for_diagnosis,
)

MAX_PRIORITY = 100
RATE_WEIGHT = 80
COUNT_CAP = 20

HIGH_SEVERITY_RATE = 0.20
HIGH_SEVERITY_BIOMARKER_RATE = 0.15

CONFIG_TYPE_BY_PATTERN: dict[EnumErrorPatternType, EnumConfigType] = {
    EnumErrorPatternType.MISSED_DIAGNOSIS: EnumConfigType.EMPHASIS,
    EnumErrorPatternType.FALSE_POSITIVE: EnumConfigType.EXCLUSION,
    EnumErrorPatternType.QUALITY_DISAGREEMENT: EnumConfigType.CORRECTION,
    EnumErrorPatternType.BIOMARKER_ERROR: EnumConfigType.CORRECTION,
}


def compute_priority(rate: float, count: int) -> int:
    """Bounded priority for a correction observed at ``rate`` over ``count`` cases.

    >>> compute_priority(0.6, 6)
    54
    """
    rate = min(max(rate, 0.0), 1.0)
    count = max(count, 0)
    return min(MAX_PRIORITY, round(rate * RATE_WEIGHT) + min(count, COUNT_CAP))


def severity_for(pattern: ModelErrorPattern) -> EnumCorrectionSeverity:
    if pattern.type is EnumErrorPatternType.QUALITY_DISAGREEMENT:
        return EnumCorrectionSeverity.MEDIUM
    cutoff = (
        HIGH_SEVERITY_BIOMARKER_RATE
        if pattern.type is EnumErrorPatternType.BIOMARKER_ERROR
        else HIGH_SEVERITY_RATE
    )
    return EnumCorrectionSeverity.HIGH if pattern.rate > cutoff else EnumCorrectionSeverity.MEDIUM


def _observed(pattern: ModelErrorPattern) -> str:
    return f"{pattern.rate * 100:.1f}% of reviewed cases, {pattern.count} occurrences"


def _build_content(pattern: ModelErrorPattern, exam_type: str) -> ModelCorrectionContent:
    common = {
        "target": pattern.target,
        "severity": severity_for(pattern),
        "feedback_count": pattern.count,
        "error_rate": pattern.rate,
    }

    if pattern.type is EnumErrorPatternType.MISSED_DIAGNOSIS:
        return ModelCorrectionContent(
            type=pattern.type.value,
            message=(
                f'SPECIAL ATTENTION: the diagnosis "{pattern.target}" has frequently '
                f"gone undetected ({_observed(pattern)}). Look carefully for the "
                "characteristic signs of this condition."
            ),
            suggestion=suggestions_for_diagnosis(pattern.target, exam_type),
            **common,
        )

    if pattern.type is EnumErrorPatternType.FALSE_POSITIVE:
        return ModelCorrectionContent(
            type=pattern.type.value,
            message=(
                f'CAUTION: the diagnosis "{pattern.target}" has produced frequent '
                f"false positives ({_observed(pattern)}). Be stricter and require "
                "clear criteria before reporting this condition."
            ),
            criteria=criteria_for_diagnosis(pattern.target),
            **common,
        )

    if pattern.type is EnumErrorPatternType.QUALITY_DISAGREEMENT:
        return ModelCorrectionContent(
            type="quality_calibration",
            message=(
                "QUALITY CALIBRATION: the image quality assessment has disagreed "
                f"with doctors ({_observed(pattern)}). Review the quality criteria."
            ),
            criteria=quality_criteria(exam_type),
            **common,
        )

    return ModelCorrectionContent(
        type="biomarker_attention",
        message=(
            f'BIOMARKER: "{pattern.target}" has been reported inconsistently '
            f"({_observed(pattern)}). Pay special attention to this finding."
        ),
        characteristics=biomarker_characteristics(pattern.target),
        missed=pattern.breakdown.get("missed", 0),
        false_positive=pattern.breakdown.get("false_positive", 0),
        **common,
    )


def synthesize_correction(
    pattern: ModelErrorPattern,
    exam_type: str,
    thresholds: ModelCorrectionThresholds,
    now: datetime,
) -> ModelPromptCorrectionConfig:
    """Build the correction config for one retained pattern.

    ``created_at`` and ``updated_at`` are ``now``; the store keeps the
    original ``created_at`` when it overwrites an existing row.
    """
    return ModelPromptCorrectionConfig(
        exam_type=exam_type,
        config_type=CONFIG_TYPE_BY_PATTERN[pattern.type],
        content=_build_content(pattern, exam_type),
        priority=compute_priority(pattern.rate, pattern.count),
        is_active=True,
        source_feedback_count=pattern.count,
        error_rate=pattern.rate,
        created_at=now,
        updated_at=now,
        expires_at=now + timedelta(days=thresholds.correction_validity_days),
    )


__all__ = [
    "CONFIG_TYPE_BY_PATTERN",
    "compute_priority",
    "severity_for",
    "synthesize_correction",
]
