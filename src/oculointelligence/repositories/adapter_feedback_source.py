# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""asyncpg implementation of ProtocolFeedbackSource.

Feedback is read with keyset pagination on ``(created_at, id)`` so a large
window never becomes one unbounded result set. The inner joins drop feedback
whose exam or analysis cannot be resolved.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from oculointelligence.protocols import FeedbackCursor, ProtocolDatabaseConnection

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 500

# =============================================================================
# SQL Constants
# =============================================================================

SQL_FETCH_FEEDBACK_PAGE = """\
SELECT
    f.id,
    f.exam_id,
    f.ai_analysis_id AS analysis_id,
    f.doctor_id,
    f.accuracy_rating,
    f.quality_feedback,
    f.diagnosis_correct,
    f.diagnosis_added,
    f.diagnosis_removed,
    f.biomarkers_feedback,
    f.pathology_tags,
    f.case_difficulty,
    f.is_reference_case,
    f.overall_rating,
    f.created_at,
    f.updated_at,
    e.exam_type,
    a.quality_score AS analysis_quality_score,
    a.diagnosis AS analysis_diagnosis,
    a.biomarkers AS analysis_biomarkers
FROM ai_feedback f
JOIN exams e ON e.id = f.exam_id
JOIN ai_analysis a ON a.id = f.ai_analysis_id
WHERE ($1::timestamptz IS NULL OR f.created_at >= $1::timestamptz)
  AND ($2::timestamptz IS NULL OR f.created_at <= $2::timestamptz)
  AND ($3::timestamptz IS NULL OR (f.created_at, f.id) > ($3::timestamptz, $4::uuid))
ORDER BY f.created_at, f.id
LIMIT $5;
"""

SQL_FETCH_RECENT_ANALYSES = """\
SELECT id, exam_id, analyzed_at, raw_response
FROM ai_analysis
ORDER BY analyzed_at DESC
LIMIT $1;
"""


class AdapterFeedbackSourcePostgres:
    """Reads joined feedback rows through a ProtocolDatabaseConnection.

    Attributes:
        page_size: Rows per keyset page in ``fetch_all_feedback``.
    """

    __slots__ = ("_conn", "page_size")

    def __init__(
        self,
        conn: ProtocolDatabaseConnection,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self._conn = conn
        self.page_size = page_size

    async def fetch_feedback_page(
        self,
        start: datetime | None,
        end: datetime | None,
        *,
        after: FeedbackCursor | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> list[Mapping[str, Any]]:
        after_created_at, after_id = after if after is not None else (None, None)
        return await self._conn.fetch(
            SQL_FETCH_FEEDBACK_PAGE,
            start,
            end,
            after_created_at,
            after_id,
            limit,
        )

    async def fetch_all_feedback(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Mapping[str, Any]]:
        rows: list[Mapping[str, Any]] = []
        cursor: FeedbackCursor | None = None
        pages = 0
        while True:
            page = await self.fetch_feedback_page(start, end, after=cursor, limit=self.page_size)
            pages += 1
            rows.extend(page)
            if len(page) < self.page_size:
                break
            last = page[-1]
            cursor = (last["created_at"], last["id"])

        logger.debug("Read feedback", extra={"rows": len(rows), "pages": pages})
        return rows

    async def fetch_recent_analyses(self, limit: int = 500) -> list[Mapping[str, Any]]:
        return await self._conn.fetch(SQL_FETCH_RECENT_ANALYSES, limit)


__all__ = ["AdapterFeedbackSourcePostgres", "SQL_FETCH_FEEDBACK_PAGE"]
