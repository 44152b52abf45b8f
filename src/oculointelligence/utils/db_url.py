# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Credential-free rendering of database URLs for log lines."""

from __future__ import annotations

import urllib.parse

UNPARSEABLE = "(unparseable URL)"


def safe_db_url_display(url: str) -> str:
    """Render a PostgreSQL DSN as ``host:port/database``.

    User name and password are never included. Anything that is not a
    ``postgres``/``postgresql`` URL renders as ``(unparseable URL)``.

    >>> safe_db_url_display("postgresql://app:secret@db:5432/clinic")
    'db:5432/clinic'
    """
    try:
        parts = urllib.parse.urlsplit(url)
        port = parts.port
    except ValueError:
        return UNPARSEABLE
    if parts.scheme not in ("postgres", "postgresql"):
        return UNPARSEABLE

    display = parts.hostname or "unknown"
    if port:
        display = f"{display}:{port}"
    database = parts.path.lstrip("/")
    if database:
        display = f"{display}/{database}"
    return display


__all__ = ["safe_db_url_display"]
