# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""REST API for the feedback analysis trigger and dashboard insights.

Routers are mounted by ``create_app`` in ``oculointelligence.api.app``.
"""

from oculointelligence.api.router_feedback_analysis import create_feedback_analysis_router
from oculointelligence.api.router_insights import create_insights_router
from oculointelligence.api.service_stores import ServiceStores

__all__ = [
    "ServiceStores",
    "create_feedback_analysis_router",
    "create_insights_router",
]
