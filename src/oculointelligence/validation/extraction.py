# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Pull a JSON object out of free-form model text.

Models wrap their JSON in markdown fences or surround it with prose. The
first fenced block wins; otherwise the span from the first ``{`` to the last
``}`` is tried.
"""

from __future__ import annotations

import json
import re
from typing import Any

from oculointelligence.validation.errors import AiResponseValidationError

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")

_CONTEXT = "model text"


def extract_json_from_response(text: str) -> Any:
    """Decode the JSON payload embedded in ``text``.

    Raises:
        AiResponseValidationError: If no candidate span decodes as JSON.
    """
    candidates: list[str] = []
    match = _FENCED_BLOCK.search(text)
    if match:
        candidates.append(match.group(1).strip())
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])

    last_error = "no JSON object found"
    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError as exc:
            last_error = f"invalid JSON: {exc.msg} at line {exc.lineno} column {exc.colno}"

    raise AiResponseValidationError(_CONTEXT, text, last_error)


__all__ = ["extract_json_from_response"]
