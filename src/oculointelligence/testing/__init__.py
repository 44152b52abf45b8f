# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Testing utilities for oculointelligence.

Importable from the test suite and from downstream projects that exercise
the pipeline without a database.

Modules:
    mock_record: Mock asyncpg.Record for database row testing
    mock_stores: In-memory store protocols and row factories
"""

from oculointelligence.testing.mock_record import MockRecord
from oculointelligence.testing.mock_stores import (
    InMemoryCorrectionStore,
    InMemoryFeedbackSource,
    InMemoryRunLogStore,
    make_analysis_row,
    make_feedback_row,
)

__all__ = [
    "InMemoryCorrectionStore",
    "InMemoryFeedbackSource",
    "InMemoryRunLogStore",
    "MockRecord",
    "make_analysis_row",
    "make_feedback_row",
]
