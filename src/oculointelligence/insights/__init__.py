# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Read-only feedback analytics for dashboards."""

from oculointelligence.insights.handler_feedback_insights import (
    compute_accuracy_by_exam_type,
    compute_diagnosis_accuracy,
    compute_feedback_stats,
    compute_learning_insights,
    fetch_improvement_suggestions,
    generate_improvement_suggestions,
    load_feedback_records,
)
from oculointelligence.insights.handler_validation_metrics import (
    compute_validation_metrics,
    fetch_validation_metrics,
    warning_field,
)

__all__ = [
    "compute_accuracy_by_exam_type",
    "compute_diagnosis_accuracy",
    "compute_feedback_stats",
    "compute_learning_insights",
    "compute_validation_metrics",
    "fetch_improvement_suggestions",
    "fetch_validation_metrics",
    "generate_improvement_suggestions",
    "load_feedback_records",
    "warning_field",
]
