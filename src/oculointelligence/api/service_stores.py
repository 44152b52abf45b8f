# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Stores the HTTP routers operate on, bundled for dependency injection."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from oculointelligence.protocols import (
        ProtocolCorrectionStore,
        ProtocolFeedbackSource,
        ProtocolRunLogStore,
    )


@dataclasses.dataclass(frozen=True)
class ServiceStores:
    """Feedback source, correction store and run log store of one app."""

    feedback_source: ProtocolFeedbackSource
    correction_store: ProtocolCorrectionStore
    run_log_store: ProtocolRunLogStore


__all__ = ["ServiceStores"]
