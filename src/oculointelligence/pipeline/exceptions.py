# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Exceptions raised by the feedback correction pipeline.

Only failures that abort a run are exceptions. Insufficient feedback is a
normal result, and failed upserts or cleanup are logged and counted.
"""

from __future__ import annotations


class FeedbackPipelineError(Exception):
    """Base exception for feedback pipeline errors.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class FeedbackSourceError(FeedbackPipelineError, RuntimeError):
    """Reading feedback rows failed; the run is aborted before any write."""


__all__ = ["FeedbackPipelineError", "FeedbackSourceError"]
