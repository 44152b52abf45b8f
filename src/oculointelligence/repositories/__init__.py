# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""asyncpg-backed store adapters.

Usage:
    >>> pool = await asyncpg.create_pool(dsn)
    >>> source = AdapterFeedbackSourcePostgres(pool, page_size=500)
    >>> store = AdapterCorrectionStorePostgres(pool)
"""

from oculointelligence.repositories.adapter_correction_store import (
    AdapterCorrectionStorePostgres,
)
from oculointelligence.repositories.adapter_feedback_source import (
    AdapterFeedbackSourcePostgres,
)
from oculointelligence.repositories.adapter_run_log_store import (
    AdapterRunLogStorePostgres,
)

__all__ = [
    "AdapterCorrectionStorePostgres",
    "AdapterFeedbackSourcePostgres",
    "AdapterRunLogStorePostgres",
]
