# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""FastAPI router for the feedback analysis trigger.

``POST /api/v1/feedback-analysis/run`` (and ``GET``, for schedulers that can
only issue GETs) runs the pipeline once. No request body is read.

Response contract:
    success:            {success, period, total_feedback_analyzed, results,
                         total_corrections_generated, expired_cleaned}
    insufficient data:  {success, message, analyzed, corrections_generated}
    failure (500):      {success: false, error}
"""

# NOTE: Do NOT use `from __future__ import annotations` in this module.
# FastAPI requires runtime-accessible type annotations for dependency injection
# and query parameter extraction. PEP 563 (stringified annotations) would
# prevent FastAPI from recognizing Depends() and Query() at runtime.

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from oculointelligence.api.service_stores import ServiceStores
from oculointelligence.models import FeedbackPipelineSettings
from oculointelligence.pipeline import run_feedback_analysis

logger = logging.getLogger(__name__)


def create_feedback_analysis_router(
    *,
    get_stores: Any,
    settings: FeedbackPipelineSettings,
) -> APIRouter:
    """Create the router exposing the feedback analysis trigger.

    Args:
        get_stores: Dependency callable returning a ``ServiceStores``.
        settings: Thresholds and run options applied to every run.
    """
    router = APIRouter(
        prefix="/api/v1/feedback-analysis",
        tags=["feedback-analysis"],
    )
    thresholds = settings.to_thresholds()

    @router.api_route(
        "/run",
        methods=["POST", "GET"],
        summary="Run the feedback correction pipeline",
        description=(
            "Analyse recent doctor feedback, upsert prompt corrections for "
            "significant error patterns and deactivate expired ones."
        ),
    )
    async def run_analysis(
        stores: Annotated[ServiceStores, Depends(get_stores)],
    ) -> JSONResponse:
        try:
            result = await run_feedback_analysis(
                feedback_source=stores.feedback_source,
                correction_store=stores.correction_store,
                run_log_store=stores.run_log_store,
                thresholds=thresholds,
                record_insufficient_runs=settings.record_insufficient_runs,
            )
        except Exception as exc:
            logger.exception("Feedback analysis failed")
            return JSONResponse(
                status_code=500,
                content={"success": False, "error": str(exc)},
            )
        return JSONResponse(content=result.to_response())

    return router


__all__ = ["create_feedback_analysis_router"]
