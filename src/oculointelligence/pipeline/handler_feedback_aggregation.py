# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Load a feedback window and group it by exam category.

Groups smaller than ``min_feedback_count`` are dropped. When the whole window
is smaller than that, the run has insufficient data: not an error, just a
result with nothing to analyse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import ValidationError

from oculointelligence.models import ModelCorrectionThresholds, ModelFeedbackRecord
from oculointelligence.pipeline.tally import group_by_exam_type

if TYPE_CHECKING:
    from oculointelligence.protocols import ProtocolFeedbackSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelFeedbackAggregation:
    """Feedback of one window, grouped and gated.

    Attributes:
        total_feedback: Records in the window, across all categories.
        groups: Exam category -> records, for groups that passed the gate.
        dropped_groups: Exam category -> size, for groups below the gate.
        insufficient_data: The window as a whole is below the gate.
    """

    total_feedback: int
    groups: dict[str, list[ModelFeedbackRecord]] = field(default_factory=dict)
    dropped_groups: dict[str, int] = field(default_factory=dict)
    insufficient_data: bool = False


async def load_feedback_window(
    source: ProtocolFeedbackSource,
    start: datetime | None,
    end: datetime | None,
) -> list[ModelFeedbackRecord]:
    """Read and normalize every feedback row created within [start, end].

    ``None`` leaves that side of the window open.

    Rows that cannot be turned into a record (no exam category, malformed
    identifiers) are skipped with a warning. Source failures propagate.
    """
    rows = await source.fetch_all_feedback(start, end)

    records: list[ModelFeedbackRecord] = []
    skipped = 0
    for row in rows:
        try:
            records.append(ModelFeedbackRecord.from_row(row))
        except ValidationError as exc:
            skipped += 1
            logger.warning(
                "Skipping unusable feedback row: %d validation error(s)",
                exc.error_count(),
                extra={"feedback_id": str(row.get("id"))},
            )

    logger.info(
        "Loaded feedback window",
        extra={
            "start": start.isoformat() if start else None,
            "end": end.isoformat() if end else None,
            "rows": len(rows),
            "records": len(records),
            "skipped": skipped,
        },
    )
    return records


def aggregate_feedback(
    records: list[ModelFeedbackRecord],
    thresholds: ModelCorrectionThresholds,
) -> ModelFeedbackAggregation:
    """Group records by exam category and apply the minimum-sample gate."""
    total = len(records)
    if total < thresholds.min_feedback_count:
        return ModelFeedbackAggregation(total_feedback=total, insufficient_data=True)

    kept: dict[str, list[ModelFeedbackRecord]] = {}
    dropped: dict[str, int] = {}
    for exam_type, group in group_by_exam_type(records).items():
        if len(group) < thresholds.min_feedback_count:
            dropped[exam_type] = len(group)
            continue
        kept[exam_type] = group

    if dropped:
        logger.info(
            "Dropped exam categories below minimum sample",
            extra={"dropped_groups": dropped, "min_feedback_count": thresholds.min_feedback_count},
        )
    return ModelFeedbackAggregation(total_feedback=total, groups=kept, dropped_groups=dropped)


__all__ = [
    "ModelFeedbackAggregation",
    "aggregate_feedback",
    "load_feedback_window",
]
