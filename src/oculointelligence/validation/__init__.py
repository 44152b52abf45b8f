# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Structured-response validation for untrusted AI output.

Usage:
    >>> from oculointelligence.validation import parse_partial, to_string_array
    >>> result = parse_partial(AiAnalysisRecordShape, row)
    >>> result.valid_fields
    ['quality_score', 'diagnosis']
"""

from oculointelligence.validation.accessors import (
    get_diagnosis_from_response,
    get_quality_score_from_response,
    get_recommendations_from_response,
    is_bilateral_response,
    validate_ai_response,
)
from oculointelligence.validation.coercion import (
    decode_json_field,
    to_boolean,
    to_number,
    to_string_array,
    to_verdict,
)
from oculointelligence.validation.errors import (
    AiResponseValidationError,
    format_validation_error,
    get_error_paths,
)
from oculointelligence.validation.extraction import extract_json_from_response
from oculointelligence.validation.parsing import (
    ModelPartialParseResult,
    ModelSafeParseResult,
    parse_partial,
    parse_strict,
    parse_with_fallback,
    safe_parse_analysis,
)

__all__ = [
    "AiResponseValidationError",
    "ModelPartialParseResult",
    "ModelSafeParseResult",
    "decode_json_field",
    "extract_json_from_response",
    "format_validation_error",
    "get_diagnosis_from_response",
    "get_error_paths",
    "get_quality_score_from_response",
    "get_recommendations_from_response",
    "is_bilateral_response",
    "parse_partial",
    "parse_strict",
    "parse_with_fallback",
    "safe_parse_analysis",
    "to_boolean",
    "to_number",
    "to_string_array",
    "to_verdict",
]
