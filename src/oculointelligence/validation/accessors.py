# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Exam-family dispatch and tolerant accessors over AI responses.

The accessors work on raw dicts as well as on parsed shapes, since display
paths often hold the output of ``parse_with_fallback``. They never raise.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from oculointelligence.enums import EnumExamType
from oculointelligence.validation.parsing import ModelSafeParseResult, safe_parse_analysis
from oculointelligence.validation.shapes import (
    OctMacularResponse,
    OctNerveResponse,
    RetinographyResponse,
)

RESPONSE_SHAPES: dict[EnumExamType, Any] = {
    EnumExamType.OCT_MACULAR: OctMacularResponse,
    EnumExamType.OCT_NERVE: OctNerveResponse,
    EnumExamType.RETINOGRAPHY: RetinographyResponse,
}


def validate_ai_response(
    exam_type: EnumExamType | str,
    response: object,
) -> ModelSafeParseResult:
    """Validate a raw AI response against the shape of its exam family.

    Raises:
        ValueError: If ``exam_type`` is not a known exam family.
    """
    family = EnumExamType(exam_type)
    return safe_parse_analysis(RESPONSE_SHAPES[family], response, context=family.value)


def _as_mapping(response: object) -> Mapping[str, Any] | None:
    if isinstance(response, BaseModel):
        return response.model_dump()
    if isinstance(response, Mapping):
        return response
    return None


def _get(node: object, *path: str) -> Any:
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def is_bilateral_response(response: object) -> bool:
    data = _as_mapping(response)
    return data is not None and data.get("bilateral") is True


def get_quality_score_from_response(response: object) -> str | None:
    """Quality score of a response; bilateral scores collapse when equal.

    Unequal bilateral scores are reported as ``"OD: x, OE: y"``.
    """
    data = _as_mapping(response)
    if data is None:
        return None

    if data.get("bilateral") is True:
        od_score = _get(data, "od", "quality", "score") or None
        oe_score = _get(data, "oe", "quality", "score") or None
        if od_score and oe_score:
            return od_score if od_score == oe_score else f"OD: {od_score}, OE: {oe_score}"
        return od_score or oe_score

    return _get(data, "quality", "score") or None


def get_diagnosis_from_response(response: object) -> list[str]:
    """Primary diagnosis followed by the non-blank secondary ones."""
    diagnosis = _get(_as_mapping(response), "diagnosis")
    if not isinstance(diagnosis, Mapping):
        return []

    result: list[str] = []
    primary = diagnosis.get("primary")
    if isinstance(primary, str) and primary:
        result.append(primary)
    secondary = diagnosis.get("secondary")
    if isinstance(secondary, list):
        result.extend(item for item in secondary if isinstance(item, str) and item.strip())
    return result


def get_recommendations_from_response(response: object) -> list[str]:
    recommendations = _get(_as_mapping(response), "recommendations")
    if not isinstance(recommendations, list):
        return []
    return [item for item in recommendations if isinstance(item, str) and item.strip()]


__all__ = [
    "RESPONSE_SHAPES",
    "get_diagnosis_from_response",
    "get_quality_score_from_response",
    "get_recommendations_from_response",
    "is_bilateral_response",
    "validate_ai_response",
]
