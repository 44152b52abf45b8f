# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""FastAPI router for read-only feedback analytics.

Every endpoint recomputes its summary from the feedback source on each
request; nothing is cached and nothing is written.
"""

# NOTE: Do NOT use `from __future__ import annotations` in this module.
# FastAPI requires runtime-accessible type annotations for dependency injection
# and query parameter extraction. PEP 563 (stringified annotations) would
# prevent FastAPI from recognizing Depends() and Query() at runtime.

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from oculointelligence.api.service_stores import ServiceStores
from oculointelligence.insights import (
    compute_accuracy_by_exam_type,
    compute_diagnosis_accuracy,
    compute_feedback_stats,
    compute_learning_insights,
    fetch_improvement_suggestions,
    fetch_validation_metrics,
    load_feedback_records,
)
from oculointelligence.models import (
    ModelDiagnosisAccuracy,
    ModelExamTypeAccuracy,
    ModelFeedbackStats,
    ModelLearningInsights,
    ModelValidationMetrics,
)


def create_insights_router(*, get_stores: Any) -> APIRouter:
    """Create the router exposing dashboard analytics.

    Args:
        get_stores: Dependency callable returning a ``ServiceStores``.
    """
    router = APIRouter(
        prefix="/api/v1/insights",
        tags=["insights"],
    )

    @router.get("/stats", response_model=ModelFeedbackStats)
    async def get_feedback_stats(
        stores: Annotated[ServiceStores, Depends(get_stores)],
    ) -> ModelFeedbackStats:
        """Overall rating and accuracy distribution."""
        return compute_feedback_stats(await load_feedback_records(stores.feedback_source))

    @router.get("/accuracy-by-exam-type", response_model=list[ModelExamTypeAccuracy])
    async def get_accuracy_by_exam_type(
        stores: Annotated[ServiceStores, Depends(get_stores)],
    ) -> list[ModelExamTypeAccuracy]:
        return compute_accuracy_by_exam_type(
            await load_feedback_records(stores.feedback_source)
        )

    @router.get("/diagnosis-accuracy", response_model=list[ModelDiagnosisAccuracy])
    async def get_diagnosis_accuracy(
        stores: Annotated[ServiceStores, Depends(get_stores)],
    ) -> list[ModelDiagnosisAccuracy]:
        return compute_diagnosis_accuracy(await load_feedback_records(stores.feedback_source))

    @router.get("/learning", response_model=ModelLearningInsights)
    async def get_learning_insights(
        stores: Annotated[ServiceStores, Depends(get_stores)],
    ) -> ModelLearningInsights:
        """Most corrected diagnoses, tags, quality disagreement, difficulty."""
        return compute_learning_insights(await load_feedback_records(stores.feedback_source))

    @router.get("/validation-metrics", response_model=ModelValidationMetrics)
    async def get_validation_metrics(
        stores: Annotated[ServiceStores, Depends(get_stores)],
        limit: Annotated[
            int,
            Query(ge=1, le=5000, description="Most recent analyses to inspect"),
        ] = 500,
    ) -> ModelValidationMetrics:
        return await fetch_validation_metrics(stores.feedback_source, limit=limit)

    @router.get("/suggestions", response_model=list[str])
    async def get_improvement_suggestions(
        stores: Annotated[ServiceStores, Depends(get_stores)],
    ) -> list[str]:
        return await fetch_improvement_suggestions(stores.feedback_source)

    return router


__all__ = ["create_insights_router"]
