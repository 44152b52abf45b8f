# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Primitive coercion helpers for untrusted AI and form output.

Every function here is total: it never raises, whatever it is given. Values
that cannot be interpreted collapse to a neutral result (``None``, ``False``
or ``[]``) so callers can normalize garbled payloads without try/except.

Usage:
    >>> to_number("42")
    42
    >>> to_boolean("TRUE")
    True
    >>> to_string_array(["a", "", 123, "b"])
    ['a', 'b']
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

logger = logging.getLogger(__name__)

_TRUE_STRINGS = frozenset({"true", "1"})
_FALSE_STRINGS = frozenset({"false", "0"})

# Decimal or exponent notation only; Python extras such as "1_000" are rejected.
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def to_number(value: object) -> int | float | None:
    """Coerce a value to a number, or ``None`` when it is not numeric.

    Numbers pass through unchanged (NaN becomes ``None``). Strings are parsed
    after trimming; integral strings yield ``int``, others ``float``. Booleans
    are not numbers here, matching JSON semantics.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if isinstance(value, str):
        text = value.strip()
        if not _NUMBER_RE.fullmatch(text):
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def to_boolean(value: object) -> bool:
    """Coerce a value to a boolean; anything unrecognised is ``False``."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        if isinstance(value, float) and math.isnan(value):
            return False
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return False


def to_verdict(value: object) -> bool | None:
    """Strict boolean: only booleans, 0/1 and their string forms count.

    Anything else (``"n/a"``, ``{}``, ``2``) is ``None`` so callers can drop
    it instead of reading it as ``False``.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        if value == 1:
            return True
        if value == 0:
            return False
        return None
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return None


def to_string_array(value: object) -> list[str]:
    """Coerce a value to a list of non-empty, trimmed strings.

    Lists and tuples keep only their string entries that are non-blank after
    trimming. A lone string becomes a one-element list (or ``[]`` if blank).
    """
    if isinstance(value, list | tuple):
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]
    if isinstance(value, str):
        text = value.strip()
        return [text] if text else []
    return []


def decode_json_field(value: Any) -> Any:
    """Decode a JSON column that may arrive serialized as text.

    asyncpg returns ``json``/``jsonb`` columns as ``str`` unless a codec is
    registered. Text that is not valid JSON decodes to ``None``; any other
    value is returned unchanged.
    """
    if not isinstance(value, str | bytes):
        return value
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        logger.debug("Discarding undecodable JSON field", extra={"length": len(value)})
        return None


__all__ = [
    "decode_json_field",
    "to_boolean",
    "to_number",
    "to_string_array",
    "to_verdict",
]
