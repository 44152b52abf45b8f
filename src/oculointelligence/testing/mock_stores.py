# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""In-memory store implementations and row factories.

The stores implement the protocols in ``oculointelligence.protocols`` with
the same observable semantics as the asyncpg adapters: keyset-ordered
feedback pages, natural-key upserts that keep ``id`` and ``created_at``, and
soft expiration. Failure injection hooks let tests exercise the pipeline's
error isolation.

Usage:
    from oculointelligence.testing import (
        InMemoryCorrectionStore,
        InMemoryFeedbackSource,
        InMemoryRunLogStore,
        make_feedback_row,
    )

    source = InMemoryFeedbackSource([make_feedback_row(diagnosis_removed=["Drusen"])])
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from oculointelligence.models import (
    ModelAnalysisRunLog,
    ModelPromptCorrectionConfig,
    NaturalKey,
)
from oculointelligence.protocols import FeedbackCursor
from oculointelligence.testing.mock_record import MockRecord

# =============================================================================
# Row factories
# =============================================================================


def make_feedback_row(
    exam_type: str = "oct_macular",
    *,
    created_at: datetime | None = None,
    **overrides: Any,
) -> MockRecord:
    """A joined feedback row as returned by the feedback source.

    Every column is present; label columns default to empty arrays and the
    analysis columns to an analysis with no findings.
    """
    row: dict[str, Any] = {
        "id": uuid4(),
        "exam_id": uuid4(),
        "analysis_id": uuid4(),
        "doctor_id": uuid4(),
        "accuracy_rating": "correct",
        "quality_feedback": None,
        "diagnosis_correct": [],
        "diagnosis_added": [],
        "diagnosis_removed": [],
        "biomarkers_feedback": None,
        "pathology_tags": [],
        "case_difficulty": None,
        "is_reference_case": False,
        "overall_rating": None,
        "created_at": created_at or datetime.now(UTC),
        "updated_at": None,
        "exam_type": exam_type,
        "analysis_quality_score": "boa",
        "analysis_diagnosis": [],
        "analysis_biomarkers": {},
    }
    row.update(overrides)
    return MockRecord(row)


def make_analysis_row(
    *,
    analyzed_at: datetime | str | None = None,
    is_valid: bool | None = True,
    warnings: list[str] | None = None,
    **overrides: Any,
) -> MockRecord:
    """An ``ai_analysis`` row carrying a validation outcome.

    ``is_valid=None`` produces a row without any ``_validation`` entry.
    """
    raw: dict[str, Any] = {"quality": {"score": "boa"}}
    if is_valid is not None:
        raw["_validation"] = {"isValid": is_valid, "warnings": warnings or []}
    row: dict[str, Any] = {
        "id": uuid4(),
        "exam_id": uuid4(),
        "analyzed_at": analyzed_at or datetime.now(UTC),
        "raw_response": raw,
    }
    row.update(overrides)
    return MockRecord(row)


# =============================================================================
# Stores
# =============================================================================


class InMemoryFeedbackSource:
    """ProtocolFeedbackSource over a list of joined rows.

    Attributes:
        rows: Joined feedback rows, in any order.
        analyses: Analysis rows for ``fetch_recent_analyses``.
        page_size: Rows per page in ``fetch_all_feedback``.
        error: Raised by every read when set.
        pages_read: Number of pages served so far.
    """

    def __init__(
        self,
        rows: Iterable[Mapping[str, Any]] = (),
        *,
        analyses: Iterable[Mapping[str, Any]] = (),
        page_size: int = 500,
    ) -> None:
        self.rows = list(rows)
        self.analyses = list(analyses)
        self.page_size = page_size
        self.error: Exception | None = None
        self.pages_read = 0

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    async def fetch_feedback_page(
        self,
        start: datetime | None,
        end: datetime | None,
        *,
        after: FeedbackCursor | None = None,
        limit: int = 500,
    ) -> list[Mapping[str, Any]]:
        self._check()
        self.pages_read += 1
        selected = [
            row
            for row in self.rows
            if (start is None or row["created_at"] >= start)
            and (end is None or row["created_at"] <= end)
        ]
        selected.sort(key=lambda row: (row["created_at"], str(row["id"])))
        if after is not None:
            cursor = (after[0], str(after[1]))
            selected = [r for r in selected if (r["created_at"], str(r["id"])) > cursor]
        return selected[:limit]

    async def fetch_all_feedback(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Mapping[str, Any]]:
        rows: list[Mapping[str, Any]] = []
        cursor: FeedbackCursor | None = None
        while True:
            page = await self.fetch_feedback_page(start, end, after=cursor, limit=self.page_size)
            rows.extend(page)
            if len(page) < self.page_size:
                return rows
            cursor = (page[-1]["created_at"], page[-1]["id"])

    async def fetch_recent_analyses(self, limit: int = 500) -> list[Mapping[str, Any]]:
        self._check()
        return sorted(self.analyses, key=lambda row: str(row["analyzed_at"]), reverse=True)[:limit]


class InMemoryCorrectionStore:
    """ProtocolCorrectionStore keyed by natural key.

    Attributes:
        rows: Natural key -> stored correction.
        upserts: Number of successful upserts.
        fail_targets: Upserts for these targets raise ``RuntimeError``.
        cleanup_error: Raised by ``deactivate_expired`` when set.
    """

    def __init__(self, rows: Iterable[ModelPromptCorrectionConfig] = ()) -> None:
        self.rows: dict[NaturalKey, ModelPromptCorrectionConfig] = {}
        for row in rows:
            stored = row if row.id is not None else row.model_copy(update={"id": uuid4()})
            self.rows[stored.natural_key] = stored
        self.upserts = 0
        self.fail_targets: set[str] = set()
        self.cleanup_error: Exception | None = None

    async def upsert_correction(self, correction: ModelPromptCorrectionConfig) -> None:
        if correction.target in self.fail_targets:
            raise RuntimeError(f"simulated write failure for {correction.target!r}")
        existing = self.rows.get(correction.natural_key)
        keep: dict[str, Any] = {"is_active": True}
        if existing is not None:
            keep.update(id=existing.id, created_at=existing.created_at)
        else:
            keep["id"] = uuid4()
        self.rows[correction.natural_key] = correction.model_copy(update=keep)
        self.upserts += 1

    async def deactivate_expired(self, now: datetime) -> int:
        if self.cleanup_error is not None:
            raise self.cleanup_error
        flipped = 0
        for key, row in self.rows.items():
            if row.is_active and row.expires_at < now:
                self.rows[key] = row.model_copy(update={"is_active": False})
                flipped += 1
        return flipped

    async def fetch_stored_targets(self, exam_type: str, config_type: str) -> list[str]:
        stored = [
            row
            for row in self.rows.values()
            if row.exam_type == exam_type and row.config_type.value == config_type
        ]
        stored.sort(key=lambda row: (row.created_at, str(row.id)))
        return [row.target for row in stored]

    async def fetch_active_corrections(
        self,
        exam_type: str,
        now: datetime,
    ) -> list[ModelPromptCorrectionConfig]:
        active = [
            row
            for row in self.rows.values()
            if row.exam_type == exam_type and row.is_active and row.expires_at >= now
        ]
        active.sort(key=lambda row: (-row.priority, -row.updated_at.timestamp()))
        return active

    def active(self) -> list[ModelPromptCorrectionConfig]:
        return [row for row in self.rows.values() if row.is_active]

    def get(
        self, exam_type: str, config_type: str, target: str
    ) -> ModelPromptCorrectionConfig | None:
        return self.rows.get((exam_type, config_type, target))


class InMemoryRunLogStore:
    """ProtocolRunLogStore appending to a list."""

    def __init__(self) -> None:
        self.run_logs: list[ModelAnalysisRunLog] = []
        self.error: Exception | None = None

    async def insert_run_log(self, run_log: ModelAnalysisRunLog) -> None:
        if self.error is not None:
            raise self.error
        self.run_logs.append(run_log)

    def run_ids(self) -> list[UUID]:
        return [log.run_id for log in self.run_logs]


__all__ = [
    "InMemoryCorrectionStore",
    "InMemoryFeedbackSource",
    "InMemoryRunLogStore",
    "make_analysis_row",
    "make_feedback_row",
]
