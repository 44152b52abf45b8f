# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Feedback-driven prompt correction pipeline."""

from oculointelligence.pipeline.exceptions import FeedbackPipelineError, FeedbackSourceError
from oculointelligence.pipeline.handler_correction_synthesis import (
    compute_priority,
    severity_for,
    synthesize_correction,
)
from oculointelligence.pipeline.handler_error_patterns import (
    detect_error_patterns,
    is_significant,
    select_significant_patterns,
)
from oculointelligence.pipeline.handler_feedback_aggregation import (
    ModelFeedbackAggregation,
    aggregate_feedback,
    load_feedback_window,
)
from oculointelligence.pipeline.handler_feedback_analysis import (
    run_expiration_cleanup,
    run_feedback_analysis,
)
from oculointelligence.pipeline.tally import (
    LabelTally,
    group_by_exam_type,
    normalize_label,
    tally_labels,
)

__all__ = [
    "FeedbackPipelineError",
    "FeedbackSourceError",
    "LabelTally",
    "ModelFeedbackAggregation",
    "aggregate_feedback",
    "compute_priority",
    "detect_error_patterns",
    "group_by_exam_type",
    "is_significant",
    "load_feedback_window",
    "normalize_label",
    "run_expiration_cleanup",
    "run_feedback_analysis",
    "select_significant_patterns",
    "severity_for",
    "synthesize_correction",
    "tally_labels",
]
