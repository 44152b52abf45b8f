# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""FastAPI application factory for the OculoIntelligence service.

Mounts the feedback analysis trigger and the insight endpoints. The asyncpg
pool is created and closed by the lifespan; CORS is open to every origin so
the dashboard and schedulers can call the trigger directly.

Usage:
    >>> app = create_app(database_url="postgresql://...")
    >>> # Run with uvicorn:
    >>> # uvicorn oculointelligence.api.app:create_app --factory
"""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import asyncpg
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from oculointelligence.api.router_feedback_analysis import create_feedback_analysis_router
from oculointelligence.api.router_insights import create_insights_router
from oculointelligence.api.service_stores import ServiceStores
from oculointelligence.models import FeedbackPipelineSettings
from oculointelligence.repositories import (
    AdapterCorrectionStorePostgres,
    AdapterFeedbackSourcePostgres,
    AdapterRunLogStorePostgres,
)
from oculointelligence.utils import safe_db_url_display

logger = logging.getLogger(__name__)

DB_URL_ENV = "OCULOINTELLIGENCE_DB_URL"

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


class DatabaseSettings(BaseSettings):
    """PostgreSQL connection settings loaded from POSTGRES_* environment variables.

    Required fields (host, password) raise ValidationError if not set.
    """

    model_config = SettingsConfigDict(env_prefix="POSTGRES_")

    host: str = Field(..., description="PostgreSQL host address")
    port: int = Field(default=5432, description="PostgreSQL port")
    database: str = Field(default="oculointelligence", description="PostgreSQL database name")
    user: str = Field(default="postgres", description="PostgreSQL user")
    password: str = Field(..., description="PostgreSQL password")


async def create_pool(database_url: str | None = None) -> asyncpg.Pool:
    """Create the asyncpg pool.

    Resolution order: *database_url*, then ``OCULOINTELLIGENCE_DB_URL``, then
    the discrete ``POSTGRES_*`` fields of ``DatabaseSettings``.

    Raises:
        ValidationError: No URL and incomplete ``POSTGRES_*`` settings.
        Exception: Re-raises any pool creation error after logging it.
    """
    try:
        dsn = database_url or os.getenv(DB_URL_ENV)
        if dsn:
            logger.info("Connecting to %s", safe_db_url_display(dsn))
            return await asyncpg.create_pool(dsn=dsn, min_size=1, max_size=10)

        settings = DatabaseSettings()  # type: ignore[call-arg]
        logger.info("Connecting to %s:%s/%s", settings.host, settings.port, settings.database)
        return await asyncpg.create_pool(
            host=settings.host,
            port=settings.port,
            user=settings.user,
            password=settings.password,
            database=settings.database,
            min_size=1,
            max_size=10,
        )
    except ValidationError:
        logger.exception(
            "Missing required database configuration. "
            "Set %s, or set POSTGRES_HOST, POSTGRES_PORT, "
            "POSTGRES_USER, POSTGRES_PASSWORD, POSTGRES_DATABASE environment variables.",
            DB_URL_ENV,
        )
        raise
    except Exception:
        logger.exception(
            "Failed to create database connection pool. "
            "Verify %s (or POSTGRES_HOST, POSTGRES_PORT and "
            "POSTGRES_PASSWORD) and that the database is reachable.",
            DB_URL_ENV,
        )
        raise


def create_service_stores(
    pool: asyncpg.Pool,
    settings: FeedbackPipelineSettings,
) -> ServiceStores:
    return ServiceStores(
        feedback_source=AdapterFeedbackSourcePostgres(pool, page_size=settings.read_page_size),
        correction_store=AdapterCorrectionStorePostgres(pool),
        run_log_store=AdapterRunLogStorePostgres(pool),
    )


@dataclasses.dataclass
class _AppState:
    """Shared state for the lifespan and dependency closures.

    The lifespan sets ``pool`` and ``stores`` before the server accepts
    requests and clears them after in-flight requests drain. Requests
    arriving outside that span get HTTP 503 from ``get_stores``.
    """

    database_url: str | None = None
    pool: asyncpg.Pool | None = None
    stores: ServiceStores | None = None


def create_app(
    *,
    database_url: str | None = None,
    settings: FeedbackPipelineSettings | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        database_url: PostgreSQL connection URL. If not provided, falls
            back to ``OCULOINTELLIGENCE_DB_URL`` and then ``POSTGRES_*``.
        settings: Pipeline settings; loaded from ``FEEDBACK_PIPELINE_*``
            environment variables when omitted.
    """
    settings = settings or FeedbackPipelineSettings()
    state = _AppState(database_url=database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:  # noqa: ARG001
        pool = await create_pool(state.database_url)
        state.pool = pool
        state.stores = create_service_stores(pool, settings)
        logger.info("Database connection pool established")

        yield

        logger.info("Closing database connection pool...")
        state.stores = None
        state.pool = None
        await pool.close()
        logger.info("Database connection pool closed")

    async def get_stores() -> ServiceStores:
        stores = state.stores
        if stores is None:
            raise HTTPException(
                status_code=503,
                detail="Service unavailable: database not initialized.",
            )
        return stores

    app = FastAPI(
        title="OculoIntelligence API",
        description="Feedback-driven prompt corrections for ophthalmology AI analyses",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=CORS_ALLOW_HEADERS,
    )

    app.include_router(create_feedback_analysis_router(get_stores=get_stores, settings=settings))
    app.include_router(create_insights_router(get_stores=get_stores))

    # Mounted at root (not under /api/v1) for load balancers and orchestrators.
    @app.get("/health", tags=["infrastructure"])
    async def health_check() -> JSONResponse:
        """Liveness/readiness check."""
        pool = state.pool
        if pool is None:
            return JSONResponse(status_code=503, content={"status": "starting"})
        try:
            await pool.fetchval("SELECT 1")
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError):
            logger.warning("Health check failed: database unreachable", exc_info=True)
            return JSONResponse(
                status_code=503,
                content={"status": "degraded", "detail": "database unreachable"},
            )
        return JSONResponse(content={"status": "healthy"})

    return app


__all__ = ["DatabaseSettings", "create_app", "create_pool", "create_service_stores"]
