# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Store protocols for the feedback correction pipeline.

Handlers depend on these protocols, never on asyncpg directly. The asyncpg
adapters live in ``oculointelligence.repositories``; in-memory versions for
tests live in ``oculointelligence.testing``.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable
from uuid import UUID

if TYPE_CHECKING:
    from oculointelligence.models import (
        ModelAnalysisRunLog,
        ModelPromptCorrectionConfig,
    )

FeedbackCursor = tuple[datetime, UUID]
"""Keyset position ``(created_at, id)`` of the last row of a page."""


@runtime_checkable
class ProtocolDatabaseConnection(Protocol):
    """asyncpg-style connection (or pool).

    Note:
        Parameters use asyncpg-style positional placeholders ($1, $2, etc.)
        rather than named parameters.
    """

    # any-ok: asyncpg Record values are dynamically typed
    async def fetch(self, query: str, *args: object) -> list[Mapping[str, Any]]:
        """Execute a query and return all results as Records."""
        ...

    # any-ok: asyncpg Record values are dynamically typed
    async def fetchrow(self, query: str, *args: object) -> Mapping[str, Any] | None:
        """Execute a query and return first row, or None."""
        ...

    async def execute(self, query: str, *args: object) -> str:
        """Execute a query and return the status string."""
        ...


@runtime_checkable
class ProtocolFeedbackSource(Protocol):
    """Read access to feedback joined with exam category and analysis.

    Rows carry the feedback columns, ``exam_type``, and the analysis columns
    prefixed with ``analysis_``. Feedback without a resolvable exam and
    analysis is never returned.
    """

    async def fetch_feedback_page(
        self,
        start: datetime | None,
        end: datetime | None,
        *,
        after: FeedbackCursor | None = None,
        limit: int = 500,
    ) -> list[Mapping[str, Any]]:
        """Return up to ``limit`` rows after ``after``, ordered by (created_at, id)."""
        ...

    async def fetch_all_feedback(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Mapping[str, Any]]:
        """Return every row in the window, reading page by page."""
        ...

    async def fetch_recent_analyses(self, limit: int = 500) -> list[Mapping[str, Any]]:
        """Return the newest analysis rows (``id``, ``analyzed_at``, ``raw_response``)."""
        ...


@runtime_checkable
class ProtocolCorrectionStore(Protocol):
    """Read/write access to ``prompt_configs``."""

    async def upsert_correction(self, correction: ModelPromptCorrectionConfig) -> None:
        """Insert, or overwrite the row with the same natural key."""
        ...

    async def deactivate_expired(self, now: datetime) -> int:
        """Set ``is_active=false`` where ``expires_at < now``; return rows flipped."""
        ...

    async def fetch_stored_targets(self, exam_type: str, config_type: str) -> list[str]:
        """Targets of every row, active or not, for one category and type.

        Oldest row first, so the first spelling per label is the persisted one.
        """
        ...

    async def fetch_active_corrections(
        self,
        exam_type: str,
        now: datetime,
    ) -> list[ModelPromptCorrectionConfig]:
        """Active, unexpired corrections for ``exam_type``, priority descending."""
        ...


@runtime_checkable
class ProtocolRunLogStore(Protocol):
    """Append-only access to ``feedback_analysis_log``."""

    async def insert_run_log(self, run_log: ModelAnalysisRunLog) -> None:
        """Append one run log row."""
        ...


__all__ = [
    "FeedbackCursor",
    "ProtocolCorrectionStore",
    "ProtocolDatabaseConnection",
    "ProtocolFeedbackSource",
    "ProtocolRunLogStore",
]
