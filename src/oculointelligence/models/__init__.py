# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Pydantic models for the feedback correction pipeline."""

from oculointelligence.models.model_analysis_result import (
    ModelExamTypeAnalysis,
    ModelFeedbackAnalysisResult,
)
from oculointelligence.models.model_error_pattern import ModelErrorPattern
from oculointelligence.models.model_feedback_record import (
    ModelAnalysisSnapshot,
    ModelFeedbackRecord,
)
from oculointelligence.models.model_insights import (
    ModelDiagnosisAccuracy,
    ModelExamTypeAccuracy,
    ModelFeedbackStats,
    ModelLabelCount,
    ModelLearningInsights,
    ModelValidationMetrics,
    ModelValidationTrendPoint,
)
from oculointelligence.models.model_pipeline_config import (
    FeedbackPipelineSettings,
    ModelCorrectionThresholds,
)
from oculointelligence.models.model_prompt_correction import (
    ModelCorrectionContent,
    ModelPromptCorrectionConfig,
    NaturalKey,
)
from oculointelligence.models.model_run_log import (
    ModelAnalysisRunLog,
    ModelExamTypeRunSummary,
)

__all__ = [
    "FeedbackPipelineSettings",
    "ModelAnalysisRunLog",
    "ModelAnalysisSnapshot",
    "ModelCorrectionContent",
    "ModelCorrectionThresholds",
    "ModelDiagnosisAccuracy",
    "ModelErrorPattern",
    "ModelExamTypeAccuracy",
    "ModelExamTypeAnalysis",
    "ModelExamTypeRunSummary",
    "ModelFeedbackAnalysisResult",
    "ModelFeedbackRecord",
    "ModelFeedbackStats",
    "ModelLabelCount",
    "ModelLearningInsights",
    "ModelPromptCorrectionConfig",
    "ModelValidationMetrics",
    "ModelValidationTrendPoint",
    "NaturalKey",
]
