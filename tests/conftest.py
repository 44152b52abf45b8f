# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""
Pytest configuration and fixtures for oculointelligence tests.

Shared fixtures: a fixed clock, default thresholds, in-memory stores and
feedback windows for the scenarios the pipeline is expected to handle.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from oculointelligence.models import ModelCorrectionThresholds
from oculointelligence.testing import (
    InMemoryCorrectionStore,
    InMemoryFeedbackSource,
    InMemoryRunLogStore,
    MockRecord,
    make_feedback_row,
)

# =========================================================================
# Clock and thresholds
# =========================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed run time used as the end of the analysis window."""
    return datetime(2026, 3, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def thresholds() -> ModelCorrectionThresholds:
    return ModelCorrectionThresholds()


# =========================================================================
# Stores
# =========================================================================


@pytest.fixture
def correction_store() -> InMemoryCorrectionStore:
    return InMemoryCorrectionStore()


@pytest.fixture
def run_log_store() -> InMemoryRunLogStore:
    return InMemoryRunLogStore()


# =========================================================================
# Feedback windows
# =========================================================================


def drusen_window(now: datetime, *, total: int = 10, removed: int = 6) -> list[MockRecord]:
    """``total`` macular OCT rows in the last week; ``removed`` of them drop "Drusen"."""
    return [
        make_feedback_row(
            "oct_macular",
            created_at=now - timedelta(days=7, minutes=i),
            diagnosis_removed=["Drusen"] if i < removed else [],
            accuracy_rating="partially_correct" if i < removed else "correct",
        )
        for i in range(total)
    ]


@pytest.fixture
def drusen_rows(now: datetime) -> list[MockRecord]:
    return drusen_window(now)


@pytest.fixture
def feedback_source(drusen_rows: list[MockRecord]) -> InMemoryFeedbackSource:
    return InMemoryFeedbackSource(drusen_rows)


@pytest.fixture
def make_drusen_window() -> Callable[..., list[MockRecord]]:
    """Factory for windows anchored at an arbitrary run time."""
    return drusen_window
