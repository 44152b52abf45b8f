# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Unit tests for the feedback analysis trigger router.

Tests the FastAPI endpoint using httpx.AsyncClient over in-memory stores.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from oculointelligence.api import ServiceStores, create_feedback_analysis_router
from oculointelligence.models import FeedbackPipelineSettings
from oculointelligence.testing import (
    InMemoryCorrectionStore,
    InMemoryFeedbackSource,
    InMemoryRunLogStore,
    make_feedback_row,
)


@pytest.fixture
def stores() -> ServiceStores:
    recent = datetime.now(UTC) - timedelta(days=3)
    rows = [
        make_feedback_row(
            "oct_macular",
            created_at=recent - timedelta(minutes=i),
            diagnosis_removed=["Drusen"] if i < 6 else [],
        )
        for i in range(10)
    ]
    return ServiceStores(
        feedback_source=InMemoryFeedbackSource(rows),
        correction_store=InMemoryCorrectionStore(),
        run_log_store=InMemoryRunLogStore(),
    )


@pytest.fixture
def settings() -> FeedbackPipelineSettings:
    return FeedbackPipelineSettings()


@pytest.fixture
def app(stores: ServiceStores, settings: FeedbackPipelineSettings) -> FastAPI:
    test_app = FastAPI()

    async def get_stores() -> ServiceStores:
        return stores

    test_app.include_router(
        create_feedback_analysis_router(get_stores=get_stores, settings=settings)
    )
    return test_app


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.mark.unit
class TestRunEndpoint:
    """Tests for /api/v1/feedback-analysis/run."""

    async def test_post_runs_pipeline(self, client: AsyncClient, stores: ServiceStores) -> None:
        response = await client.post("/api/v1/feedback-analysis/run")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["total_feedback_analyzed"] == 10
        assert body["total_corrections_generated"] == 1
        assert set(body["period"]) == {"start", "end"}
        assert body["results"][0]["patterns"][0]["target"] == "Drusen"
        assert len(stores.correction_store.active()) == 1
        assert len(stores.run_log_store.run_logs) == 1

    async def test_get_is_accepted(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/feedback-analysis/run")

        assert response.status_code == 200
        assert response.json()["success"] is True

    async def test_request_body_is_ignored(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/feedback-analysis/run", json={"anything": "goes"}
        )

        assert response.status_code == 200

    async def test_insufficient_data_response(
        self, client: AsyncClient, stores: ServiceStores
    ) -> None:
        stores.feedback_source.rows = stores.feedback_source.rows[:3]

        response = await client.post("/api/v1/feedback-analysis/run")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Insufficient feedback (3/5). Waiting for more data.",
            "analyzed": 3,
            "corrections_generated": 0,
        }
        assert stores.run_log_store.run_logs == []

    async def test_source_failure_returns_500(
        self, client: AsyncClient, stores: ServiceStores
    ) -> None:
        stores.feedback_source.error = ConnectionError("db down")

        response = await client.post("/api/v1/feedback-analysis/run")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert "db down" in body["error"]

    async def test_settings_thresholds_apply(self, stores: ServiceStores) -> None:
        test_app = FastAPI()

        async def get_stores() -> ServiceStores:
            return stores

        test_app.include_router(
            create_feedback_analysis_router(
                get_stores=get_stores,
                settings=FeedbackPipelineSettings(min_feedback_count=50),
            )
        )
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            response = await c.post("/api/v1/feedback-analysis/run")

        assert response.json()["message"] == (
            "Insufficient feedback (10/50). Waiting for more data."
        )
