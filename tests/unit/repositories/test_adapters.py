# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Unit tests for the asyncpg-backed store adapters.

The connection is an AsyncMock, so these tests pin down the SQL parameter
order and the row mapping without a database.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from oculointelligence.enums import EnumConfigType, EnumErrorPatternType
from oculointelligence.models import (
    ModelAnalysisRunLog,
    ModelCorrectionContent,
    ModelErrorPattern,
    ModelExamTypeRunSummary,
    ModelPromptCorrectionConfig,
)
from oculointelligence.repositories import (
    AdapterCorrectionStorePostgres,
    AdapterFeedbackSourcePostgres,
    AdapterRunLogStorePostgres,
)
from oculointelligence.repositories.adapter_correction_store import (
    SQL_DEACTIVATE_EXPIRED,
    SQL_FETCH_ACTIVE_CORRECTIONS,
    SQL_FETCH_STORED_TARGETS,
    SQL_UPSERT_CORRECTION,
    _affected_rows,
)
from oculointelligence.repositories.adapter_feedback_source import SQL_FETCH_FEEDBACK_PAGE
from oculointelligence.repositories.adapter_run_log_store import SQL_INSERT_RUN_LOG
from oculointelligence.testing import MockRecord, make_feedback_row

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def conn() -> AsyncMock:
    return AsyncMock()


def _correction() -> ModelPromptCorrectionConfig:
    return ModelPromptCorrectionConfig(
        exam_type="oct_macular",
        config_type=EnumConfigType.EXCLUSION,
        content=ModelCorrectionContent(
            target="Drusen",
            type="false_positive",
            message="CAUTION",
            criteria=["Apply strict diagnostic criteria"],
        ),
        priority=54,
        source_feedback_count=6,
        error_rate=0.6,
        created_at=NOW,
        updated_at=NOW,
        expires_at=NOW + timedelta(days=90),
    )


# =========================================================================
# Feedback source
# =========================================================================


@pytest.mark.unit
class TestAdapterFeedbackSource:
    def test_rejects_non_positive_page_size(self, conn: AsyncMock) -> None:
        with pytest.raises(ValueError, match="page_size"):
            AdapterFeedbackSourcePostgres(conn, page_size=0)

    async def test_first_page_has_no_cursor(self, conn: AsyncMock) -> None:
        conn.fetch.return_value = []
        adapter = AdapterFeedbackSourcePostgres(conn)
        start = NOW - timedelta(days=30)

        await adapter.fetch_feedback_page(start, NOW, limit=50)

        conn.fetch.assert_awaited_once_with(SQL_FETCH_FEEDBACK_PAGE, start, NOW, None, None, 50)

    async def test_pages_follow_the_last_row(self, conn: AsyncMock) -> None:
        rows = [make_feedback_row(created_at=NOW - timedelta(minutes=i)) for i in range(5, 0, -1)]
        conn.fetch.side_effect = [rows[:2], rows[2:4], rows[4:]]
        adapter = AdapterFeedbackSourcePostgres(conn, page_size=2)

        result = await adapter.fetch_all_feedback(None, NOW)

        assert result == rows
        assert conn.fetch.await_count == 3
        second_call = conn.fetch.await_args_list[1].args
        assert second_call[3:] == (rows[1]["created_at"], rows[1]["id"], 2)
        third_call = conn.fetch.await_args_list[2].args
        assert third_call[3:] == (rows[3]["created_at"], rows[3]["id"], 2)

    async def test_full_last_page_needs_one_more_read(self, conn: AsyncMock) -> None:
        rows = [make_feedback_row(created_at=NOW - timedelta(minutes=i)) for i in range(2)]
        conn.fetch.side_effect = [rows, []]
        adapter = AdapterFeedbackSourcePostgres(conn, page_size=2)

        result = await adapter.fetch_all_feedback()

        assert result == rows
        assert conn.fetch.await_count == 2

    def test_keyset_query_orders_by_created_at_then_id(self) -> None:
        assert "ORDER BY f.created_at, f.id" in SQL_FETCH_FEEDBACK_PAGE
        assert "(f.created_at, f.id) >" in SQL_FETCH_FEEDBACK_PAGE

    async def test_recent_analyses_passes_limit(self, conn: AsyncMock) -> None:
        conn.fetch.return_value = []
        adapter = AdapterFeedbackSourcePostgres(conn)

        await adapter.fetch_recent_analyses(limit=25)

        assert conn.fetch.await_args.args[1] == 25


# =========================================================================
# Correction store
# =========================================================================


@pytest.mark.unit
class TestAdapterCorrectionStore:
    async def test_upsert_sends_natural_key_and_json_content(self, conn: AsyncMock) -> None:
        conn.fetchrow.return_value = MockRecord({"id": uuid4()})
        correction = _correction()

        await AdapterCorrectionStorePostgres(conn).upsert_correction(correction)

        args = conn.fetchrow.await_args.args
        assert args[0] == SQL_UPSERT_CORRECTION
        assert args[1:3] == ("oct_macular", "exclusion")
        content = json.loads(args[3])
        assert content["target"] == "Drusen"
        assert content["criteria"] == ["Apply strict diagnostic criteria"]
        assert "suggestion" not in content
        assert args[4:7] == (54, 6, 0.6)
        assert args[7:] == (NOW, NOW, NOW + timedelta(days=90))

    def test_upsert_conflicts_on_natural_key(self) -> None:
        assert "ON CONFLICT (exam_type, config_type, (content->>'target'))" in SQL_UPSERT_CORRECTION
        assert "created_at" not in SQL_UPSERT_CORRECTION.split("DO UPDATE", 1)[1]

    async def test_deactivate_expired_returns_row_count(self, conn: AsyncMock) -> None:
        conn.execute.return_value = "UPDATE 3"

        cleaned = await AdapterCorrectionStorePostgres(conn).deactivate_expired(NOW)

        assert cleaned == 3
        conn.execute.assert_awaited_once_with(SQL_DEACTIVATE_EXPIRED, NOW)

    async def test_fetch_active_maps_rows(self, conn: AsyncMock) -> None:
        row_id = uuid4()
        conn.fetch.return_value = [
            MockRecord(
                {
                    "id": row_id,
                    "exam_type": "oct_macular",
                    "config_type": "emphasis",
                    "content": json.dumps(
                        {"target": "Glaucoma", "type": "missed_diagnosis", "message": "m"}
                    ),
                    "priority": 40,
                    "is_active": True,
                    "source_feedback_count": 5,
                    "error_rate": 0.5,
                    "created_at": NOW,
                    "updated_at": NOW,
                    "expires_at": NOW + timedelta(days=90),
                }
            )
        ]

        [correction] = await AdapterCorrectionStorePostgres(conn).fetch_active_corrections(
            "oct_macular", NOW
        )

        conn.fetch.assert_awaited_once_with(SQL_FETCH_ACTIVE_CORRECTIONS, "oct_macular", NOW)
        assert correction.id == row_id
        assert correction.config_type is EnumConfigType.EMPHASIS
        assert correction.target == "Glaucoma"

    async def test_fetch_stored_targets_skips_blank_targets(self, conn: AsyncMock) -> None:
        conn.fetch.return_value = [
            MockRecord({"target": "Drusen"}),
            MockRecord({"target": None}),
            MockRecord({"target": "DMRI"}),
        ]

        targets = await AdapterCorrectionStorePostgres(conn).fetch_stored_targets(
            "oct_macular", "exclusion"
        )

        conn.fetch.assert_awaited_once_with(SQL_FETCH_STORED_TARGETS, "oct_macular", "exclusion")
        assert targets == ["Drusen", "DMRI"]

    def test_stored_targets_include_inactive_rows_oldest_first(self) -> None:
        assert "is_active" not in SQL_FETCH_STORED_TARGETS
        assert "ORDER BY created_at ASC" in SQL_FETCH_STORED_TARGETS

    @pytest.mark.parametrize(
        ("status", "expected"),
        [("UPDATE 3", 3), ("UPDATE 0", 0), ("", 0), (None, 0), ("UPDATE", 0)],
    )
    def test_affected_rows(self, status: str | None, expected: int) -> None:
        assert _affected_rows(status) == expected


# =========================================================================
# Run log store
# =========================================================================


@pytest.mark.unit
class TestAdapterRunLogStore:
    async def test_insert_serializes_json_columns(self, conn: AsyncMock) -> None:
        run_log = ModelAnalysisRunLog(
            run_id=uuid4(),
            analysis_period_start=NOW - timedelta(days=30),
            analysis_period_end=NOW,
            total_feedback_analyzed=10,
            patterns_found={
                "oct_macular": [
                    ModelErrorPattern(
                        target="Drusen",
                        type=EnumErrorPatternType.FALSE_POSITIVE,
                        count=6,
                        rate=0.6,
                    )
                ]
            },
            corrections_generated=1,
            details_by_exam_type={
                "oct_macular": ModelExamTypeRunSummary(
                    total_feedback=10, patterns_count=1, corrections=1
                )
            },
            created_at=NOW,
        )

        await AdapterRunLogStorePostgres(conn).insert_run_log(run_log)

        args = conn.execute.await_args.args
        assert args[0] == SQL_INSERT_RUN_LOG
        assert args[1] == run_log.run_id
        patterns = json.loads(args[5])
        assert patterns["oct_macular"][0]["target"] == "Drusen"
        details = json.loads(args[7])
        assert details["oct_macular"] == {
            "total_feedback": 10,
            "patterns_count": 1,
            "corrections": 1,
            "failed_corrections": 0,
        }
        assert args[8] is False
        assert args[9] == NOW
