# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""asyncpg implementation of ProtocolCorrectionStore.

Upserts target the unique expression index on
``(exam_type, config_type, (content->>'target'))`` created by migration
001. On conflict the row is overwritten in place and re-activated; its
``created_at`` and surrogate ``id`` are kept.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import TYPE_CHECKING

from oculointelligence.models import ModelPromptCorrectionConfig

if TYPE_CHECKING:
    from oculointelligence.protocols import ProtocolDatabaseConnection

logger = logging.getLogger(__name__)

# =============================================================================
# SQL Constants
# =============================================================================

SQL_UPSERT_CORRECTION = """\
INSERT INTO prompt_configs (
    exam_type, config_type, content, priority, is_active,
    source_feedback_count, error_rate, created_at, updated_at, expires_at
)
VALUES ($1, $2, $3::jsonb, $4, TRUE, $5, $6, $7, $8, $9)
ON CONFLICT (exam_type, config_type, (content->>'target'))
DO UPDATE SET
    content = EXCLUDED.content,
    priority = EXCLUDED.priority,
    is_active = TRUE,
    source_feedback_count = EXCLUDED.source_feedback_count,
    error_rate = EXCLUDED.error_rate,
    updated_at = EXCLUDED.updated_at,
    expires_at = EXCLUDED.expires_at
RETURNING id;
"""

SQL_DEACTIVATE_EXPIRED = """\
UPDATE prompt_configs
SET is_active = FALSE
WHERE is_active = TRUE
  AND expires_at < $1;
"""

SQL_FETCH_ACTIVE_CORRECTIONS = """\
SELECT
    id, exam_type, config_type, content, priority, is_active,
    source_feedback_count, error_rate, created_at, updated_at, expires_at
FROM prompt_configs
WHERE exam_type = $1
  AND is_active = TRUE
  AND expires_at >= $2
ORDER BY priority DESC, updated_at DESC;
"""

SQL_FETCH_STORED_TARGETS = """\
SELECT content->>'target' AS target
FROM prompt_configs
WHERE exam_type = $1
  AND config_type = $2
ORDER BY created_at ASC, id ASC;
"""


def _affected_rows(status: str | None) -> int:
    """Row count from an asyncpg status string such as ``"UPDATE 3"``."""
    if not status:
        return 0
    tail = status.rsplit(maxsplit=1)[-1]
    return int(tail) if tail.isdigit() else 0


class AdapterCorrectionStorePostgres:
    """``prompt_configs`` access through a ProtocolDatabaseConnection."""

    __slots__ = ("_conn",)

    def __init__(self, conn: ProtocolDatabaseConnection) -> None:
        self._conn = conn

    async def upsert_correction(self, correction: ModelPromptCorrectionConfig) -> None:
        row = await self._conn.fetchrow(
            SQL_UPSERT_CORRECTION,
            correction.exam_type,
            correction.config_type.value,
            json.dumps(correction.content.to_json_dict()),
            correction.priority,
            correction.source_feedback_count,
            correction.error_rate,
            correction.created_at,
            correction.updated_at,
            correction.expires_at,
        )
        logger.debug(
            "Upserted correction",
            extra={
                "exam_type": correction.exam_type,
                "config_type": correction.config_type.value,
                "target": correction.target,
                "correction_id": str(row["id"]) if row is not None else None,
            },
        )

    async def deactivate_expired(self, now: datetime) -> int:
        status = await self._conn.execute(SQL_DEACTIVATE_EXPIRED, now)
        return _affected_rows(status)

    async def fetch_stored_targets(self, exam_type: str, config_type: str) -> list[str]:
        rows = await self._conn.fetch(SQL_FETCH_STORED_TARGETS, exam_type, config_type)
        return [row["target"] for row in rows if row["target"]]

    async def fetch_active_corrections(
        self,
        exam_type: str,
        now: datetime,
    ) -> list[ModelPromptCorrectionConfig]:
        rows = await self._conn.fetch(SQL_FETCH_ACTIVE_CORRECTIONS, exam_type, now)
        return [ModelPromptCorrectionConfig.from_row(row) for row in rows]


__all__ = [
    "SQL_DEACTIVATE_EXPIRED",
    "SQL_FETCH_ACTIVE_CORRECTIONS",
    "SQL_FETCH_STORED_TARGETS",
    "SQL_UPSERT_CORRECTION",
    "AdapterCorrectionStorePostgres",
]
