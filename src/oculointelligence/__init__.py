# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""OculoIntelligence - feedback-driven correction pipeline for ophthalmology AI.

Doctors review AI analyses of OCT and retinography exams. This package turns
that review feedback into prompt correction configs:

    feedback rows -> validation -> aggregation -> error patterns
        -> corrections (upsert by natural key) -> run log -> expiry cleanup

A read-only insight aggregator computes dashboard analytics from the same
feedback rows.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
