# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Dashboard summaries over doctor feedback.

Read-only sibling of the correction pipeline. It uses the same label
normalization and per-record counting as pattern detection, but applies no
sample-size gate: every label is shown however rarely it occurs.

Usage:
    >>> records = await load_feedback_records(source)
    >>> compute_feedback_stats(records).correct_rate
    72.5
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from typing import TYPE_CHECKING

from oculointelligence.enums import EnumAccuracyRating, EnumQualityFeedback
from oculointelligence.models import (
    ModelDiagnosisAccuracy,
    ModelExamTypeAccuracy,
    ModelFeedbackRecord,
    ModelFeedbackStats,
    ModelLabelCount,
    ModelLearningInsights,
)
from oculointelligence.pipeline.handler_feedback_aggregation import load_feedback_window
from oculointelligence.pipeline.tally import (
    LabelTally,
    group_by_exam_type,
    tally_labels,
    top_labels,
)

if TYPE_CHECKING:
    from oculointelligence.protocols import ProtocolFeedbackSource

logger = logging.getLogger(__name__)

TOP_DIAGNOSES = 10
TOP_TAGS = 15


def _percent(part: int, whole: int) -> float:
    return part / whole * 100 if whole else 0.0


def _label_counts(tallies: dict[str, LabelTally], limit: int) -> list[ModelLabelCount]:
    return [
        ModelLabelCount(label=tally.label, count=tally.count)
        for tally in top_labels(tallies, limit)
    ]


# =============================================================================
# Accuracy
# =============================================================================


def compute_feedback_stats(records: Sequence[ModelFeedbackRecord]) -> ModelFeedbackStats:
    """Overall rating and accuracy distribution.

    The accuracy percentages are over all records, so records without a
    rating lower every share.
    """
    total = len(records)
    if total == 0:
        return ModelFeedbackStats()

    ratings = [r.overall_rating for r in records if r.overall_rating is not None]
    verdicts = Counter(r.accuracy_rating for r in records)
    return ModelFeedbackStats(
        total_feedbacks=total,
        avg_rating=sum(ratings) / len(ratings) if ratings else 0.0,
        correct_rate=_percent(verdicts[EnumAccuracyRating.CORRECT], total),
        partial_rate=_percent(verdicts[EnumAccuracyRating.PARTIALLY_CORRECT], total),
        incorrect_rate=_percent(verdicts[EnumAccuracyRating.INCORRECT], total),
        reference_cases_count=sum(1 for r in records if r.is_reference_case),
    )


def compute_accuracy_by_exam_type(
    records: Sequence[ModelFeedbackRecord],
) -> list[ModelExamTypeAccuracy]:
    """Accuracy verdict counts per exam category.

    ``total`` counts only rated records; unrated feedback does not dilute
    the category's correct rate.
    """
    results: list[ModelExamTypeAccuracy] = []
    for exam_type, group in group_by_exam_type(records).items():
        verdicts = Counter(r.accuracy_rating for r in group)
        correct = verdicts[EnumAccuracyRating.CORRECT]
        partial = verdicts[EnumAccuracyRating.PARTIALLY_CORRECT]
        incorrect = verdicts[EnumAccuracyRating.INCORRECT]
        total = correct + partial + incorrect
        results.append(
            ModelExamTypeAccuracy(
                exam_type=exam_type,
                correct=correct,
                partial=partial,
                incorrect=incorrect,
                total=total,
                correct_rate=_percent(correct, total),
            )
        )
    return results


def compute_diagnosis_accuracy(
    records: Sequence[ModelFeedbackRecord],
) -> list[ModelDiagnosisAccuracy]:
    """Confirmed vs removed counts per diagnosis, highest volume first."""
    confirmed = tally_labels(records, lambda r: r.diagnosis_correct)
    removed = tally_labels(records, lambda r: r.diagnosis_removed)

    results: list[ModelDiagnosisAccuracy] = []
    for key in dict.fromkeys([*confirmed, *removed]):
        spellings: Counter[str] = Counter()
        correct_count = removed_count = 0
        if key in confirmed:
            correct_count = confirmed[key].count
            spellings.update(confirmed[key].spellings)
        if key in removed:
            removed_count = removed[key].count
            spellings.update(removed[key].spellings)
        results.append(
            ModelDiagnosisAccuracy(
                diagnosis=spellings.most_common(1)[0][0],
                correct_count=correct_count,
                removed_count=removed_count,
                accuracy=_percent(correct_count, correct_count + removed_count),
            )
        )

    results.sort(key=lambda item: -(item.correct_count + item.removed_count))
    return results


# =============================================================================
# Learning
# =============================================================================


def compute_learning_insights(records: Sequence[ModelFeedbackRecord]) -> ModelLearningInsights:
    """Most corrected diagnoses, tag frequency and quality disagreement."""
    quality_reported = [r for r in records if r.quality_feedback is not None]
    disagreed = sum(
        1 for r in quality_reported if r.quality_feedback is EnumQualityFeedback.DISAGREE
    )

    difficulty: dict[str, int] = {}
    for record in records:
        if record.case_difficulty:
            difficulty[record.case_difficulty] = difficulty.get(record.case_difficulty, 0) + 1

    return ModelLearningInsights(
        most_missed_diagnoses=_label_counts(
            tally_labels(records, lambda r: r.diagnosis_removed), TOP_DIAGNOSES
        ),
        most_added_diagnoses=_label_counts(
            tally_labels(records, lambda r: r.diagnosis_added), TOP_DIAGNOSES
        ),
        quality_disagreement_rate=_percent(disagreed, len(quality_reported)),
        difficulty_distribution=difficulty,
        top_pathology_tags=_label_counts(
            tally_labels(records, lambda r: r.pathology_tags), TOP_TAGS
        ),
    )


# =============================================================================
# Suggestions
# =============================================================================

SUGGESTION_MIN_OCCURRENCES = 3
SUGGESTION_LABELS = 3
QUALITY_DISAGREEMENT_ALERT = 20.0
CORRECT_RATE_ALERT = 70.0
PARTIAL_RATE_ALERT = 30.0


def generate_improvement_suggestions(
    stats: ModelFeedbackStats,
    insights: ModelLearningInsights,
) -> list[str]:
    """Plain-language suggestions for improving the model.

    Accuracy-rate suggestions are only made once there is some feedback.
    """
    suggestions: list[str] = []

    for item in insights.most_missed_diagnoses[:SUGGESTION_LABELS]:
        if item.count >= SUGGESTION_MIN_OCCURRENCES:
            suggestions.append(
                f'Improve detection of "{item.label}": removed {item.count} times by doctors'
            )

    for item in insights.most_added_diagnoses[:SUGGESTION_LABELS]:
        if item.count >= SUGGESTION_MIN_OCCURRENCES:
            suggestions.append(
                f'AI did not detect "{item.label}" in {item.count} cases: '
                "consider adjusting sensitivity"
            )

    if insights.quality_disagreement_rate > QUALITY_DISAGREEMENT_ALERT:
        suggestions.append(
            f"Quality disagreement rate: {insights.quality_disagreement_rate:.1f}%: "
            "review the quality assessment criteria"
        )

    if stats.total_feedbacks:
        if stats.correct_rate < CORRECT_RATE_ALERT:
            suggestions.append(
                f"Overall correct rate: {stats.correct_rate:.1f}%: consider retraining the model"
            )
        if stats.partial_rate > PARTIAL_RATE_ALERT:
            suggestions.append(
                f"{stats.partial_rate:.1f}% of analyses are partially correct: "
                "refine detection details"
            )

    return suggestions


# =============================================================================
# Loaders
# =============================================================================


async def load_feedback_records(source: ProtocolFeedbackSource) -> list[ModelFeedbackRecord]:
    """All feedback with a resolvable exam and analysis, oldest first."""
    return await load_feedback_window(source, None, None)


async def fetch_improvement_suggestions(source: ProtocolFeedbackSource) -> list[str]:
    records = await load_feedback_records(source)
    return generate_improvement_suggestions(
        compute_feedback_stats(records),
        compute_learning_insights(records),
    )


__all__ = [
    "compute_accuracy_by_exam_type",
    "compute_diagnosis_accuracy",
    "compute_feedback_stats",
    "compute_learning_insights",
    "fetch_improvement_suggestions",
    "generate_improvement_suggestions",
    "load_feedback_records",
]
