# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Command line entry point.

Usage:
    python -m oculointelligence run
    python -m oculointelligence run --database-url postgresql://...
    python -m oculointelligence cleanup
    python -m oculointelligence serve --host 0.0.0.0 --port 8000

Commands:
    run      Run the feedback correction pipeline once and print the
             trigger endpoint's JSON response.
    cleanup  Deactivate expired corrections and print how many were flipped.
    serve    Serve the HTTP API with uvicorn.

Exit Codes:
    0 - Success
    1 - The command failed (details are logged)
    2 - CLI usage error
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys

from oculointelligence.api.app import create_pool, create_service_stores
from oculointelligence.models import FeedbackPipelineSettings
from oculointelligence.pipeline import run_expiration_cleanup, run_feedback_analysis

logger = logging.getLogger("oculointelligence")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
JSON_INDENT_SPACES = 2


def _configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


async def _run(database_url: str | None, settings: FeedbackPipelineSettings) -> int:
    pool = await create_pool(database_url)
    try:
        stores = create_service_stores(pool, settings)
        result = await run_feedback_analysis(
            feedback_source=stores.feedback_source,
            correction_store=stores.correction_store,
            run_log_store=stores.run_log_store,
            thresholds=settings.to_thresholds(),
            record_insufficient_runs=settings.record_insufficient_runs,
        )
    finally:
        await pool.close()
    print(json.dumps(result.to_response(), indent=JSON_INDENT_SPACES))
    return 0


async def _cleanup(database_url: str | None, settings: FeedbackPipelineSettings) -> int:
    pool = await create_pool(database_url)
    try:
        cleaned = await run_expiration_cleanup(
            create_service_stores(pool, settings).correction_store
        )
    finally:
        await pool.close()
    print(json.dumps({"success": True, "expired_cleaned": cleaned}))
    return 0


def _serve(
    database_url: str | None,
    settings: FeedbackPipelineSettings,
    host: str,
    port: int,
) -> int:
    import uvicorn

    from oculointelligence.api.app import create_app

    uvicorn.run(create_app(database_url=database_url, settings=settings), host=host, port=port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oculointelligence",
        description="Feedback-driven prompt corrections for ophthalmology AI analyses",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="PostgreSQL DSN (default: OCULOINTELLIGENCE_DB_URL, then POSTGRES_*)",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("run", help="Run the feedback correction pipeline once")
    commands.add_parser("cleanup", help="Deactivate expired corrections")
    serve = commands.add_parser("serve", help="Serve the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def main(args: list[str] | None = None) -> int:
    """Parse arguments, run the command and return its exit code."""
    parsed = build_parser().parse_args(args)
    _configure_logging()
    settings = FeedbackPipelineSettings()

    try:
        if parsed.command == "run":
            return asyncio.run(_run(parsed.database_url, settings))
        if parsed.command == "cleanup":
            return asyncio.run(_cleanup(parsed.database_url, settings))
        return _serve(parsed.database_url, settings, parsed.host, parsed.port)
    except Exception:
        logger.exception("Command %r failed", parsed.command)
        return 1


if __name__ == "__main__":
    sys.exit(main())
