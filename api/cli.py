#!/usr/bin/env python3
"""CLI for Event Compilations API management tasks.

Usage:
    python -m cli <command>

Commands:
    migrate    Run database migrations
    check-db   Verify the configured database is reachable
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from core.logger import configure_logging

logger = logging.getLogger(__name__)


def cmd_migrate(target: str) -> int:
    """Run database migrations."""
    from alembic import command
    from alembic.config import Config

    logger.info("migrations.running", extra={"target": target})
    cfg = Config(str(Path(__file__).parent / "alembic.ini"))
    cfg.set_main_option("script_location", str(Path(__file__).parent / "alembic"))
    command.upgrade(cfg, target)
    logger.info("migrations.complete")
    return 0


def cmd_check_db() -> int:
    """Verify the configured database is reachable."""
    from core.database import check_db_connection, create_engine, dispose_engine

    async def _check() -> None:
        engine = create_engine()
        try:
            await check_db_connection(engine)
        finally:
            await dispose_engine(engine)

    try:
        asyncio.run(_check())
    except Exception as e:
        logger.error("db.check.failed", extra={"error": str(e)})
        return 1
    logger.info("db.check.ok")
    return 0


def main(argv: list[str] | None = None) -> int:
    configure_logging()

    parser = argparse.ArgumentParser(
        description="Event Compilations API CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    migrate = subparsers.add_parser("migrate", help="Run database migrations")
    migrate.add_argument(
        "target",
        nargs="?",
        default="head",
        help="Target revision (default: head)",
    )
    subparsers.add_parser("check-db", help="Verify the database is reachable")

    args = parser.parse_args(argv)

    if args.command == "migrate":
        return cmd_migrate(args.target)
    elif args.command == "check-db":
        return cmd_check_db()
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
