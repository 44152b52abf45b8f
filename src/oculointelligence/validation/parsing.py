# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Parsing modes for untrusted AI output.

A "shape" is anything pydantic can build a ``TypeAdapter`` for: usually a
``BaseModel`` subclass, or a ``Union`` of them for responses that come in
bilateral and single-eye variants.

Modes:
    - ``parse_strict``: typed value or ``AiResponseValidationError``. Use where
      a malformed response must not silently proceed.
    - ``parse_with_fallback``: typed value, or the raw input unchanged plus a
      logged warning. Display paths only; never feed the result into
      statistics.
    - ``parse_partial``: validates each top-level field of an object on its
      own and keeps only the fields that pass. Never fails.
    - ``safe_parse_analysis``: result object describing success or failure,
      for callers that want to branch without exceptions.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any, TypeVar, cast

from pydantic import BaseModel, TypeAdapter, ValidationError

from oculointelligence.validation.errors import (
    AiResponseValidationError,
    format_validation_error,
    get_error_paths,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@functools.lru_cache(maxsize=256)
def _type_adapter(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


@functools.lru_cache(maxsize=256)
def _field_adapters(shape: type[BaseModel]) -> dict[str, TypeAdapter[Any]]:
    adapters: dict[str, TypeAdapter[Any]] = {}
    for name, info in shape.model_fields.items():
        annotation: Any = info.annotation
        if info.metadata:
            annotation = Annotated[(annotation, *info.metadata)]
        adapters[name] = TypeAdapter(annotation)
    return adapters


def _unexpected_field_warnings(shape: Any, data: object) -> list[str]:
    if not (isinstance(shape, type) and issubclass(shape, BaseModel)):
        return []
    if not isinstance(data, Mapping):
        return []
    return [
        f"[{key}] unexpected field ignored"
        for key in data
        if key not in shape.model_fields
    ]


@dataclass(frozen=True)
class ModelSafeParseResult:
    """Outcome of ``safe_parse_analysis``.

    Attributes:
        success: Whether the payload matched the shape.
        data: The typed value on success, ``None`` otherwise.
        warnings: Non-fatal notes, each tagged with ``[field]``.
        error_summary: Bounded violation summary on failure.
        error_paths: Dotted paths of each violation on failure.
        raw_data: The input payload, untouched.
    """

    success: bool
    data: Any = None
    warnings: list[str] = field(default_factory=list)
    error_summary: str = ""
    error_paths: list[str] = field(default_factory=list)
    raw_data: Any = None


@dataclass(frozen=True)
class ModelPartialParseResult:
    """Outcome of ``parse_partial``.

    ``valid_fields`` and ``invalid_fields`` together cover exactly the keys
    of the input object; ``data`` holds only the valid ones.
    """

    data: dict[str, Any] = field(default_factory=dict)
    valid_fields: list[str] = field(default_factory=list)
    invalid_fields: list[str] = field(default_factory=list)


def safe_parse_analysis(
    shape: Any,
    data: object,
    context: str = "analysis",
) -> ModelSafeParseResult:
    """Validate ``data`` against ``shape`` without raising."""
    try:
        parsed = _type_adapter(shape).validate_python(data)
    except ValidationError as exc:
        summary = format_validation_error(exc)
        logger.error(
            "AI analysis validation error",
            extra={"context": context, "error_summary": summary},
        )
        return ModelSafeParseResult(
            success=False,
            error_summary=summary,
            error_paths=get_error_paths(exc),
            raw_data=data,
        )
    return ModelSafeParseResult(
        success=True,
        data=parsed,
        warnings=_unexpected_field_warnings(shape, data),
        raw_data=data,
    )


def parse_strict(shape: type[T] | Any, data: object, context: str) -> T:
    """Validate ``data`` against ``shape`` or raise.

    Raises:
        AiResponseValidationError: Carrying ``raw_data`` and a bounded
            ``error_summary``.
    """
    try:
        return cast(T, _type_adapter(shape).validate_python(data))
    except ValidationError as exc:
        raise AiResponseValidationError.from_validation_error(context, data, exc) from exc


def parse_with_fallback(shape: type[T] | Any, data: object, context: str) -> T:
    """Validate ``data`` against ``shape``, degrading to the raw input.

    On failure the raw input is returned as-is (re-cast to the target type
    for the caller) and a warning with the error summary is logged. ``None``
    passes through without a warning.
    """
    if data is None:
        return cast(T, data)
    try:
        return cast(T, _type_adapter(shape).validate_python(data))
    except ValidationError as exc:
        logger.warning(
            "AI analysis validation failed, using raw data: %s",
            format_validation_error(exc),
            extra={"context": context, "error_paths": get_error_paths(exc)},
        )
        return cast(T, data)


def parse_partial(
    shape: type[BaseModel],
    data: object,
    context: str = "analysis",
) -> ModelPartialParseResult:
    """Keep the top-level fields of ``data`` that individually match ``shape``.

    Each key of the input object is validated against the declared field of
    the same name. Keys the shape does not declare are reported invalid.
    Non-object input yields an empty result.
    """
    if not isinstance(data, Mapping):
        return ModelPartialParseResult()

    adapters = _field_adapters(shape)
    parsed: dict[str, Any] = {}
    valid: list[str] = []
    invalid: list[str] = []

    for key, value in data.items():
        adapter = adapters.get(key) if isinstance(key, str) else None
        if adapter is None:
            invalid.append(str(key))
            continue
        try:
            parsed[key] = adapter.validate_python(value)
        except ValidationError:
            invalid.append(key)
            continue
        valid.append(key)

    if invalid:
        logger.debug(
            "Partial parse dropped invalid fields",
            extra={"context": context, "invalid_fields": invalid},
        )
    return ModelPartialParseResult(data=parsed, valid_fields=valid, invalid_fields=invalid)


__all__ = [
    "ModelPartialParseResult",
    "ModelSafeParseResult",
    "parse_partial",
    "parse_strict",
    "parse_with_fallback",
    "safe_parse_analysis",
]
