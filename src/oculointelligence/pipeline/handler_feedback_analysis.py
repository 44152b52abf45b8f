# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Feedback analysis run: aggregate, detect, synthesize, persist, audit.

One sequential pass per trigger:

    1. Load the trailing feedback window (failure aborts the run).
    2. Group by exam category; stop early when there is too little data.
    3. Per category: detect patterns, gate them, upsert one correction per
       retained pattern. A failed upsert is logged and skipped.
    4. Append the run log. A failure here is logged; corrections stand.
    5. Deactivate expired corrections. A failure here is logged and
       reported as zero cleaned.

Concurrent runs over the same window converge on the same correction set
because every write is a natural-key upsert.

Usage:
    >>> result = await run_feedback_analysis(
    ...     feedback_source=source,
    ...     correction_store=store,
    ...     run_log_store=run_logs,
    ... )
    >>> result.to_response()["total_corrections_generated"]
    3
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from oculointelligence.models import (
    ModelAnalysisRunLog,
    ModelCorrectionThresholds,
    ModelErrorPattern,
    ModelExamTypeAnalysis,
    ModelExamTypeRunSummary,
    ModelFeedbackAnalysisResult,
    ModelFeedbackRecord,
)
from oculointelligence.pipeline.exceptions import FeedbackSourceError
from oculointelligence.pipeline.handler_correction_synthesis import (
    CONFIG_TYPE_BY_PATTERN,
    synthesize_correction,
)
from oculointelligence.pipeline.handler_error_patterns import (
    detect_error_patterns,
    select_significant_patterns,
)
from oculointelligence.pipeline.handler_feedback_aggregation import (
    aggregate_feedback,
    load_feedback_window,
)
from oculointelligence.pipeline.tally import normalize_label

if TYPE_CHECKING:
    from oculointelligence.protocols import (
        ProtocolCorrectionStore,
        ProtocolFeedbackSource,
        ProtocolRunLogStore,
    )

logger = logging.getLogger(__name__)


# =============================================================================
# Per-category processing
# =============================================================================


async def _resolve_stored_targets(
    patterns: list[ModelErrorPattern],
    exam_type: str,
    correction_store: ProtocolCorrectionStore,
    run_id: UUID,
) -> list[ModelErrorPattern]:
    """Reuse the stored spelling of a target so its natural key stays stable.

    The window's most frequent spelling can change between runs. A pattern
    whose normalized target matches an existing row takes that row's target.
    When the lookup fails the window spelling is kept.
    """
    spellings: dict[str, dict[str, str]] = {}
    resolved: list[ModelErrorPattern] = []
    for pattern in patterns:
        config_type = CONFIG_TYPE_BY_PATTERN[pattern.type].value
        if config_type not in spellings:
            spellings[config_type] = {}
            try:
                stored = await correction_store.fetch_stored_targets(exam_type, config_type)
            except Exception as exc:
                logger.warning(
                    "Failed to read stored targets, using window spelling",
                    extra={
                        "run_id": str(run_id),
                        "exam_type": exam_type,
                        "config_type": config_type,
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    },
                    exc_info=True,
                )
                stored = []
            for target in stored:
                spellings[config_type].setdefault(normalize_label(target), target)

        target = spellings[config_type].get(normalize_label(pattern.target))
        if target is not None and target != pattern.target:
            pattern = pattern.model_copy(update={"target": target})
        resolved.append(pattern)
    return resolved


async def _process_exam_type(
    exam_type: str,
    records: list[ModelFeedbackRecord],
    *,
    correction_store: ProtocolCorrectionStore,
    thresholds: ModelCorrectionThresholds,
    now: datetime,
    run_id: UUID,
) -> ModelExamTypeAnalysis:
    candidates = detect_error_patterns(records, max_examples=thresholds.max_examples)
    patterns = select_significant_patterns(candidates, thresholds)
    patterns = await _resolve_stored_targets(patterns, exam_type, correction_store, run_id)
    logger.info(
        "Analysed exam category",
        extra={
            "run_id": str(run_id),
            "exam_type": exam_type,
            "feedback": len(records),
            "candidates": len(candidates),
            "significant_patterns": len(patterns),
        },
    )

    generated = 0
    failed = 0
    for pattern in patterns:
        correction = synthesize_correction(pattern, exam_type, thresholds, now)
        try:
            await correction_store.upsert_correction(correction)
        except Exception as exc:
            failed += 1
            logger.error(
                "Failed to save correction, skipping",
                extra={
                    "run_id": str(run_id),
                    "exam_type": exam_type,
                    "config_type": correction.config_type.value,
                    "target": correction.target,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
                exc_info=True,
            )
            continue
        generated += 1
        logger.debug(
            "Correction saved",
            extra={
                "run_id": str(run_id),
                "exam_type": exam_type,
                "pattern_type": pattern.type.value,
                "target": pattern.target,
                "priority": correction.priority,
            },
        )

    return ModelExamTypeAnalysis(
        exam_type=exam_type,
        total_feedback=len(records),
        patterns=patterns,
        corrections_generated=generated,
        failed_corrections=failed,
    )


# =============================================================================
# Trailing steps (never fatal)
# =============================================================================


async def _record_run_log(
    run_log_store: ProtocolRunLogStore,
    run_log: ModelAnalysisRunLog,
) -> None:
    try:
        await run_log_store.insert_run_log(run_log)
    except Exception as exc:
        logger.error(
            "Failed to record run log",
            extra={
                "run_id": str(run_log.run_id),
                "error": str(exc),
                "error_type": type(exc).__name__,
            },
            exc_info=True,
        )


async def run_expiration_cleanup(
    correction_store: ProtocolCorrectionStore,
    *,
    now: datetime | None = None,
) -> int:
    """Deactivate corrections whose ``expires_at`` is before ``now``.

    Returns:
        Number of rows flipped to inactive. Store failures propagate.
    """
    now = now or datetime.now(UTC)
    cleaned = await correction_store.deactivate_expired(now)
    logger.info("Expired corrections deactivated", extra={"expired_cleaned": cleaned})
    return cleaned


async def _cleanup_after_run(
    correction_store: ProtocolCorrectionStore,
    now: datetime,
    run_id: UUID,
) -> int:
    try:
        return await run_expiration_cleanup(correction_store, now=now)
    except Exception as exc:
        logger.warning(
            "Expiration cleanup failed; corrections from this run remain valid",
            extra={
                "run_id": str(run_id),
                "error": str(exc),
                "error_type": type(exc).__name__,
            },
            exc_info=True,
        )
        return 0


# =============================================================================
# Entry point
# =============================================================================


async def run_feedback_analysis(
    *,
    feedback_source: ProtocolFeedbackSource,
    correction_store: ProtocolCorrectionStore,
    run_log_store: ProtocolRunLogStore,
    thresholds: ModelCorrectionThresholds | None = None,
    record_insufficient_runs: bool = False,
    now: datetime | None = None,
    run_id: UUID | None = None,
) -> ModelFeedbackAnalysisResult:
    """Run the feedback correction pipeline once.

    Args:
        feedback_source: Source of joined feedback rows.
        correction_store: Destination of correction upserts and cleanup.
        run_log_store: Destination of the run log.
        thresholds: Statistical gates; defaults apply when omitted.
        record_insufficient_runs: Also write a run log when the run stops
            for insufficient data. Off by default: such runs write nothing.
        now: End of the analysis window and write timestamp.
        run_id: Identifier for log context and the run log.

    Returns:
        The run outcome; ``to_response()`` gives the trigger endpoint body.

    Raises:
        FeedbackSourceError: The feedback window could not be read. Nothing
            has been written.
    """
    thresholds = thresholds or ModelCorrectionThresholds()
    now = now or datetime.now(UTC)
    run_id = run_id or uuid4()
    start = now - timedelta(days=thresholds.analysis_period_days)

    logger.info(
        "Starting feedback analysis",
        extra={"run_id": str(run_id), "start": start.isoformat(), "end": now.isoformat()},
    )

    try:
        records = await load_feedback_window(feedback_source, start, now)
    except Exception as exc:
        logger.exception(
            "Failed to read feedback, aborting run",
            extra={"run_id": str(run_id), "error_type": type(exc).__name__},
        )
        raise FeedbackSourceError(f"Failed to read feedback: {exc}") from exc

    aggregation = aggregate_feedback(records, thresholds)

    if aggregation.insufficient_data:
        message = (
            f"Insufficient feedback ({aggregation.total_feedback}/"
            f"{thresholds.min_feedback_count}). Waiting for more data."
        )
        logger.info(message, extra={"run_id": str(run_id)})
        if record_insufficient_runs:
            await _record_run_log(
                run_log_store,
                ModelAnalysisRunLog(
                    run_id=run_id,
                    analysis_period_start=start,
                    analysis_period_end=now,
                    total_feedback_analyzed=aggregation.total_feedback,
                    insufficient_data=True,
                    created_at=now,
                ),
            )
        return ModelFeedbackAnalysisResult(
            run_id=run_id,
            period_start=start,
            period_end=now,
            total_feedback_analyzed=aggregation.total_feedback,
            insufficient_data=True,
            message=message,
        )

    results: list[ModelExamTypeAnalysis] = []
    for exam_type, group in aggregation.groups.items():
        results.append(
            await _process_exam_type(
                exam_type,
                group,
                correction_store=correction_store,
                thresholds=thresholds,
                now=now,
                run_id=run_id,
            )
        )

    total_generated = sum(r.corrections_generated for r in results)
    total_failed = sum(r.failed_corrections for r in results)

    await _record_run_log(
        run_log_store,
        ModelAnalysisRunLog(
            run_id=run_id,
            analysis_period_start=start,
            analysis_period_end=now,
            total_feedback_analyzed=aggregation.total_feedback,
            patterns_found={r.exam_type: r.patterns for r in results},
            corrections_generated=total_generated,
            details_by_exam_type={
                r.exam_type: ModelExamTypeRunSummary(
                    total_feedback=r.total_feedback,
                    patterns_count=len(r.patterns),
                    corrections=r.corrections_generated,
                    failed_corrections=r.failed_corrections,
                )
                for r in results
            },
            created_at=now,
        ),
    )

    expired_cleaned = await _cleanup_after_run(correction_store, now, run_id)

    logger.info(
        "Feedback analysis complete",
        extra={
            "run_id": str(run_id),
            "total_feedback": aggregation.total_feedback,
            "corrections_generated": total_generated,
            "failed_corrections": total_failed,
            "expired_cleaned": expired_cleaned,
        },
    )
    return ModelFeedbackAnalysisResult(
        run_id=run_id,
        period_start=start,
        period_end=now,
        total_feedback_analyzed=aggregation.total_feedback,
        results=results,
        total_corrections_generated=total_generated,
        failed_corrections=total_failed,
        expired_cleaned=expired_cleaned,
    )


__all__ = ["run_expiration_cleanup", "run_feedback_analysis"]
