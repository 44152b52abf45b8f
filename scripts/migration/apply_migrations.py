#!/usr/bin/env python3
# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""
Apply the oculointelligence SQL migrations.

Migrations under deployment/database/migrations are applied in file name
order, each in its own transaction, and recorded in ``schema_migrations``.

Usage:
    python scripts/migration/apply_migrations.py --database-url postgresql://...
    python scripts/migration/apply_migrations.py --status
"""

import asyncio
import logging
import os
import sys
from argparse import ArgumentParser
from pathlib import Path

import asyncpg

logger = logging.getLogger("apply_migrations")

DEFAULT_MIGRATIONS_DIR = (
    Path(__file__).resolve().parent.parent.parent / "deployment" / "database" / "migrations"
)

SQL_CREATE_MIGRATIONS_TABLE = """\
CREATE TABLE IF NOT EXISTS schema_migrations (
    id SERIAL PRIMARY KEY,
    migration_name VARCHAR(255) NOT NULL UNIQUE,
    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

SQL_APPLIED_MIGRATIONS = "SELECT migration_name FROM schema_migrations ORDER BY migration_name;"

SQL_RECORD_MIGRATION = "INSERT INTO schema_migrations (migration_name) VALUES ($1);"


class MigrationRunner:
    """Applies pending ``*.sql`` files from one directory."""

    def __init__(self, database_url: str, migrations_dir: Path = DEFAULT_MIGRATIONS_DIR):
        self.database_url = database_url
        self.migrations_dir = migrations_dir

    def pending(self, applied: set[str]) -> list[Path]:
        """Migration files whose stem is not in ``applied``, in name order."""
        migrations = sorted(self.migrations_dir.glob("*.sql"))
        return [path for path in migrations if path.stem not in applied]

    async def _applied(self, conn: asyncpg.Connection) -> set[str]:
        await conn.execute(SQL_CREATE_MIGRATIONS_TABLE)
        return {row["migration_name"] for row in await conn.fetch(SQL_APPLIED_MIGRATIONS)}

    async def apply(self, conn: asyncpg.Connection, migration: Path) -> None:
        async with conn.transaction():
            await conn.execute(migration.read_text())
            await conn.execute(SQL_RECORD_MIGRATION, migration.stem)
        logger.info("Applied %s", migration.name)

    async def run(self, *, stop_on_error: bool = True) -> int:
        """Apply every pending migration; return how many were applied."""
        conn = await asyncpg.connect(self.database_url)
        try:
            pending = self.pending(await self._applied(conn))
            if not pending:
                logger.info("No pending migrations")
                return 0

            applied = 0
            for migration in pending:
                try:
                    await self.apply(conn, migration)
                except (asyncpg.PostgresError, OSError):
                    logger.exception("Failed to apply %s", migration.name)
                    if stop_on_error:
                        raise
                    continue
                applied += 1
            logger.info("Applied %d migration(s)", applied)
            return applied
        finally:
            await conn.close()

    async def status(self) -> tuple[list[str], list[str]]:
        """Applied migration names and pending file names."""
        conn = await asyncpg.connect(self.database_url)
        try:
            applied = await self._applied(conn)
        finally:
            await conn.close()
        return sorted(applied), [path.name for path in self.pending(applied)]


async def main() -> int:
    parser = ArgumentParser(description="Apply oculointelligence database migrations")
    parser.add_argument(
        "--database-url",
        default=os.getenv("OCULOINTELLIGENCE_DB_URL"),
        help="PostgreSQL connection URL (default: OCULOINTELLIGENCE_DB_URL)",
    )
    parser.add_argument("--status", action="store_true", help="Show migration status")
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Continue applying migrations even if one fails",
    )
    args = parser.parse_args()

    if not args.database_url:
        logger.error("No database URL: pass --database-url or set OCULOINTELLIGENCE_DB_URL")
        return 1

    runner = MigrationRunner(args.database_url)
    if args.status:
        applied, pending = await runner.status()
        print(f"Applied migrations: {len(applied)}")
        for name in applied:
            print(f"  + {name}")
        print(f"Pending migrations: {len(pending)}")
        for name in pending:
            print(f"  - {name}")
        return 0

    await runner.run(stop_on_error=not args.continue_on_error)
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(asyncio.run(main()))
