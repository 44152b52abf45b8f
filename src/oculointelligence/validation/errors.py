# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Validation error types and bounded error formatting.

AI responses can fail validation in dozens of places at once. Log lines and
error messages only ever carry a bounded summary: the first few violations as
``path: message`` plus a ``(+N more)`` suffix.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import ValidationError

ROOT_PATH = "[root]"
"""Path label used for a violation on the top-level value itself."""

DEFAULT_MAX_REPORTED_ERRORS = 5
"""Number of violations spelled out before the summary is truncated."""


def _format_loc(loc: Sequence[int | str]) -> str:
    if not loc:
        return ROOT_PATH
    return ".".join(str(part) for part in loc)


def get_error_paths(error: ValidationError) -> list[str]:
    """Return the dotted path of every violation, in reporting order.

    Duplicate paths (e.g. one per union member) are reported once.
    """
    paths: list[str] = []
    for issue in error.errors(include_url=False):
        path = _format_loc(issue["loc"])
        if path not in paths:
            paths.append(path)
    return paths


def format_validation_error(
    error: ValidationError,
    *,
    max_errors: int = DEFAULT_MAX_REPORTED_ERRORS,
) -> str:
    """Format a pydantic ``ValidationError`` as a bounded one-line summary.

    Args:
        error: The validation failure to summarise.
        max_errors: Violations listed before truncating.

    Returns:
        ``"path: message; path: message (+N more)"``. A failure on a
        top-level scalar is reported against ``[root]``.
    """
    issues = error.errors(include_url=False)
    parts = [f"{_format_loc(issue['loc'])}: {issue['msg']}" for issue in issues[:max_errors]]
    summary = "; ".join(parts)
    remaining = len(issues) - max_errors
    if remaining > 0:
        summary = f"{summary} (+{remaining} more)"
    return summary


class AiResponseValidationError(ValueError):
    """An AI payload failed strict validation.

    Attributes:
        context: Caller-supplied label for where the payload came from.
        raw_data: The offending payload, untouched.
        error_summary: Bounded human-readable summary of the violations.
        error_paths: Dotted paths of every violation.
        validation_error: The underlying pydantic error, if any.
    """

    def __init__(
        self,
        context: str,
        raw_data: object,
        error_summary: str,
        *,
        error_paths: list[str] | None = None,
        validation_error: ValidationError | None = None,
    ) -> None:
        super().__init__(
            f"[AI Analysis] Strict validation failed for {context}: {error_summary}"
        )
        self.context = context
        self.raw_data = raw_data
        self.error_summary = error_summary
        self.error_paths = error_paths or []
        self.validation_error = validation_error

    @classmethod
    def from_validation_error(
        cls,
        context: str,
        raw_data: object,
        error: ValidationError,
    ) -> AiResponseValidationError:
        """Build from a pydantic error, computing summary and paths."""
        return cls(
            context,
            raw_data,
            format_validation_error(error),
            error_paths=get_error_paths(error),
            validation_error=error,
        )


__all__ = [
    "DEFAULT_MAX_REPORTED_ERRORS",
    "ROOT_PATH",
    "AiResponseValidationError",
    "format_validation_error",
    "get_error_paths",
]
