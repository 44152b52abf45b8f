# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Small helpers shared by the API, CLI and repositories."""

from oculointelligence.utils.db_url import safe_db_url_display

__all__ = ["safe_db_url_display"]
