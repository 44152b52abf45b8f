# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Error pattern detection over one exam category's feedback.

Four independent families, each producing zero or more candidates:

    missed_diagnosis      records listing the label in diagnosis_added
                          / records in the group
    false_positive        records listing the label in diagnosis_removed
                          / records in the group
    quality_disagreement  records with quality_feedback == disagree
                          / records with any quality_feedback
    biomarker_error       records marking the biomarker incorrect
                          / records reporting that biomarker

A candidate is retained when ``count >= min_feedback_count`` and its rate
reaches the family threshold (``min_false_positive_rate`` for false
positives, ``min_error_rate`` otherwise).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from oculointelligence.enums import EnumErrorPatternType, EnumQualityFeedback
from oculointelligence.models import (
    ModelCorrectionThresholds,
    ModelErrorPattern,
    ModelFeedbackRecord,
)
from oculointelligence.pipeline.tally import tally_labels

logger = logging.getLogger(__name__)

QUALITY_TARGET = "quality_assessment"


def _diagnosis_patterns(
    records: Sequence[ModelFeedbackRecord],
    pattern_type: EnumErrorPatternType,
    max_examples: int,
) -> list[ModelErrorPattern]:
    if pattern_type is EnumErrorPatternType.MISSED_DIAGNOSIS:
        tallies = tally_labels(records, lambda r: r.diagnosis_added, max_examples=max_examples)
    else:
        tallies = tally_labels(records, lambda r: r.diagnosis_removed, max_examples=max_examples)

    return [
        ModelErrorPattern(
            target=tally.label,
            type=pattern_type,
            count=tally.count,
            rate=tally.count / len(records),
            examples=tally.examples,
        )
        for tally in tallies.values()
    ]


def _quality_pattern(
    records: Sequence[ModelFeedbackRecord],
    max_examples: int,
) -> ModelErrorPattern | None:
    reported = [r for r in records if r.quality_feedback is not None]
    disagreed = [r for r in reported if r.quality_feedback is EnumQualityFeedback.DISAGREE]
    if not disagreed:
        return None
    return ModelErrorPattern(
        target=QUALITY_TARGET,
        type=EnumErrorPatternType.QUALITY_DISAGREEMENT,
        count=len(disagreed),
        rate=len(disagreed) / len(reported),
        examples=[str(r.exam_id) for r in disagreed[:max_examples]],
    )


def _biomarker_patterns(
    records: Sequence[ModelFeedbackRecord],
    max_examples: int,
) -> list[ModelErrorPattern]:
    reported: dict[str, int] = {}
    missed: dict[str, int] = {}
    false_positive: dict[str, int] = {}
    examples: dict[str, list[str]] = {}

    for record in records:
        for biomarker, is_correct in record.biomarkers_feedback.items():
            reported[biomarker] = reported.get(biomarker, 0) + 1
            if is_correct:
                continue
            # AI reported it present: an over-call rather than a miss.
            if record.analysis.reports_biomarker_present(biomarker):
                false_positive[biomarker] = false_positive.get(biomarker, 0) + 1
            else:
                missed[biomarker] = missed.get(biomarker, 0) + 1
            kept = examples.setdefault(biomarker, [])
            if len(kept) < max_examples:
                kept.append(str(record.exam_id))

    patterns: list[ModelErrorPattern] = []
    for biomarker, total in reported.items():
        errors = missed.get(biomarker, 0) + false_positive.get(biomarker, 0)
        if errors == 0:
            continue
        patterns.append(
            ModelErrorPattern(
                target=biomarker,
                type=EnumErrorPatternType.BIOMARKER_ERROR,
                count=errors,
                rate=errors / total,
                examples=examples.get(biomarker, []),
                breakdown={
                    "missed": missed.get(biomarker, 0),
                    "false_positive": false_positive.get(biomarker, 0),
                },
            )
        )
    return patterns


def detect_error_patterns(
    records: Sequence[ModelFeedbackRecord],
    *,
    max_examples: int = 5,
) -> list[ModelErrorPattern]:
    """Compute every pattern candidate for one exam category, ungated."""
    if not records:
        return []

    candidates = [
        *_diagnosis_patterns(records, EnumErrorPatternType.MISSED_DIAGNOSIS, max_examples),
        *_diagnosis_patterns(records, EnumErrorPatternType.FALSE_POSITIVE, max_examples),
    ]
    quality = _quality_pattern(records, max_examples)
    if quality is not None:
        candidates.append(quality)
    candidates.extend(_biomarker_patterns(records, max_examples))
    return candidates


def rate_threshold_for(
    pattern_type: EnumErrorPatternType,
    thresholds: ModelCorrectionThresholds,
) -> float:
    if pattern_type is EnumErrorPatternType.FALSE_POSITIVE:
        return thresholds.min_false_positive_rate
    return thresholds.min_error_rate


def is_significant(pattern: ModelErrorPattern, thresholds: ModelCorrectionThresholds) -> bool:
    """Whether a candidate passes both the sample and the rate gate."""
    return (
        pattern.count >= thresholds.min_feedback_count
        and pattern.rate >= rate_threshold_for(pattern.type, thresholds)
    )


def select_significant_patterns(
    candidates: Sequence[ModelErrorPattern],
    thresholds: ModelCorrectionThresholds,
) -> list[ModelErrorPattern]:
    """Gate candidates and order them by rate, then count, then target."""
    retained = [p for p in candidates if is_significant(p, thresholds)]
    retained.sort(key=lambda p: (-p.rate, -p.count, p.target))
    return retained


__all__ = [
    "QUALITY_TARGET",
    "detect_error_patterns",
    "is_significant",
    "rate_threshold_for",
    "select_significant_patterns",
]
