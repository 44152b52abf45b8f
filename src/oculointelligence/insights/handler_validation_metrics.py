# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Validator outcome metrics over recent analyses.

The analysis step stores its validation outcome under
``raw_response._validation`` as ``{"isValid": bool, "warnings": [str]}``.
Warnings name the offending field in square brackets, e.g.
``"[biomarkers.drusas] expected object"``.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

from oculointelligence.models import (
    ModelLabelCount,
    ModelValidationMetrics,
    ModelValidationTrendPoint,
)
from oculointelligence.validation import decode_json_field, to_boolean, to_string_array

if TYPE_CHECKING:
    from oculointelligence.protocols import ProtocolFeedbackSource

VALIDATION_KEY = "_validation"
UNKNOWN_FIELD = "unknown"
TOP_WARNINGS = 10
TREND_DAYS = 30
RECENT_ANALYSES = 500

_FIELD_MARKER = re.compile(r"\[([^\]]+)\]")


def warning_field(warning: str) -> str:
    """Field named by a validator warning.

    >>> warning_field("[quality.score] invalid enum")
    'quality.score'
    """
    match = _FIELD_MARKER.search(warning)
    return match.group(1) if match else UNKNOWN_FIELD


def _analysis_day(value: object) -> str | None:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, str) and value:
        return value.split("T", 1)[0]
    return None


def compute_validation_metrics(analyses: Sequence[Mapping[str, Any]]) -> ModelValidationMetrics:
    """Success rate, common warning fields and the daily success trend.

    Analyses without a validation outcome are ignored.
    """
    total = 0
    valid = 0
    warnings: Counter[str] = Counter()
    daily: dict[str, list[int]] = {}

    for analysis in analyses:
        raw = decode_json_field(analysis.get("raw_response"))
        outcome = raw.get(VALIDATION_KEY) if isinstance(raw, Mapping) else None
        if not isinstance(outcome, Mapping):
            continue

        total += 1
        is_valid = to_boolean(outcome.get("isValid"))
        valid += is_valid
        warnings.update(warning_field(w) for w in to_string_array(outcome.get("warnings")))

        day = _analysis_day(analysis.get("analyzed_at"))
        if day is not None:
            counts = daily.setdefault(day, [0, 0])
            counts[0] += is_valid
            counts[1] += 1

    trend = [
        ModelValidationTrendPoint(date=day, success_rate=day_valid / day_total * 100)
        for day, (day_valid, day_total) in sorted(daily.items())
    ][-TREND_DAYS:]

    return ModelValidationMetrics(
        total_validations=total,
        success_rate=valid / total * 100 if total else 0.0,
        common_warnings=[
            ModelLabelCount(label=field, count=count)
            for field, count in warnings.most_common(TOP_WARNINGS)
        ],
        validation_trend=trend,
    )


async def fetch_validation_metrics(
    source: ProtocolFeedbackSource,
    *,
    limit: int = RECENT_ANALYSES,
) -> ModelValidationMetrics:
    return compute_validation_metrics(await source.fetch_recent_analyses(limit))


__all__ = [
    "compute_validation_metrics",
    "fetch_validation_metrics",
    "warning_field",
]
