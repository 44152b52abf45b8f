# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""asyncpg implementation of ProtocolRunLogStore (append-only)."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from oculointelligence.models import ModelAnalysisRunLog

if TYPE_CHECKING:
    from oculointelligence.protocols import ProtocolDatabaseConnection

SQL_INSERT_RUN_LOG = """\
INSERT INTO feedback_analysis_log (
    run_id, analysis_period_start, analysis_period_end,
    total_feedback_analyzed, patterns_found, corrections_generated,
    details_by_exam_type, insufficient_data, created_at
)
VALUES ($1, $2, $3, $4, $5::jsonb, $6, $7::jsonb, $8, $9);
"""


class AdapterRunLogStorePostgres:
    """``feedback_analysis_log`` writer."""

    __slots__ = ("_conn",)

    def __init__(self, conn: ProtocolDatabaseConnection) -> None:
        self._conn = conn

    async def insert_run_log(self, run_log: ModelAnalysisRunLog) -> None:
        patterns_found = {
            exam_type: [pattern.to_summary() for pattern in patterns]
            for exam_type, patterns in run_log.patterns_found.items()
        }
        details = {
            exam_type: summary.model_dump(mode="json")
            for exam_type, summary in run_log.details_by_exam_type.items()
        }
        await self._conn.execute(
            SQL_INSERT_RUN_LOG,
            run_log.run_id,
            run_log.analysis_period_start,
            run_log.analysis_period_end,
            run_log.total_feedback_analyzed,
            json.dumps(patterns_found),
            run_log.corrections_generated,
            json.dumps(details),
            run_log.insufficient_data,
            run_log.created_at,
        )


__all__ = ["SQL_INSERT_RUN_LOG", "AdapterRunLogStorePostgres"]
