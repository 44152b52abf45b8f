# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Unit tests for the ``python -m oculointelligence`` entry point."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from oculointelligence.__main__ import build_parser, main
from oculointelligence.api import ServiceStores
from oculointelligence.testing import (
    InMemoryCorrectionStore,
    InMemoryFeedbackSource,
    InMemoryRunLogStore,
    make_feedback_row,
)


@pytest.fixture
def pool() -> MagicMock:
    pool = MagicMock()
    pool.close = AsyncMock()
    return pool


@pytest.fixture
def stores() -> ServiceStores:
    recent = datetime.now(UTC) - timedelta(days=1)
    rows = [
        make_feedback_row(created_at=recent - timedelta(minutes=i)) for i in range(3)
    ]
    return ServiceStores(
        feedback_source=InMemoryFeedbackSource(rows),
        correction_store=InMemoryCorrectionStore(),
        run_log_store=InMemoryRunLogStore(),
    )


@pytest.mark.unit
class TestBuildParser:
    def test_run(self) -> None:
        parsed = build_parser().parse_args(["--database-url", "postgresql://x/db", "run"])

        assert parsed.command == "run"
        assert parsed.database_url == "postgresql://x/db"

    def test_serve_defaults(self) -> None:
        parsed = build_parser().parse_args(["serve"])

        assert (parsed.host, parsed.port) == ("127.0.0.1", 8000)

    def test_command_is_required(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args([])

        assert exc_info.value.code == 2


@pytest.mark.unit
class TestMain:
    def test_run_prints_response(
        self,
        pool: MagicMock,
        stores: ServiceStores,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with (
            patch("oculointelligence.__main__.create_pool", AsyncMock(return_value=pool)),
            patch("oculointelligence.__main__.create_service_stores", return_value=stores),
        ):
            code = main(["run"])

        assert code == 0
        body = json.loads(capsys.readouterr().out)
        assert body["success"] is True
        assert body["analyzed"] == 3
        pool.close.assert_awaited_once()

    def test_cleanup_prints_count(
        self,
        pool: MagicMock,
        stores: ServiceStores,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with (
            patch("oculointelligence.__main__.create_pool", AsyncMock(return_value=pool)),
            patch("oculointelligence.__main__.create_service_stores", return_value=stores),
        ):
            code = main(["cleanup"])

        assert code == 0
        assert json.loads(capsys.readouterr().out) == {"success": True, "expired_cleaned": 0}

    def test_failure_returns_one(self, pool: MagicMock, stores: ServiceStores) -> None:
        stores.feedback_source.error = ConnectionError("db down")

        with (
            patch("oculointelligence.__main__.create_pool", AsyncMock(return_value=pool)),
            patch("oculointelligence.__main__.create_service_stores", return_value=stores),
        ):
            code = main(["run"])

        assert code == 1
        pool.close.assert_awaited_once()
