"""Alembic environment for the compilations schema.

Migrations run on a synchronous driver: asyncpg URLs are switched to
psycopg2, aiosqlite URLs to the built-in sqlite driver. On PostgreSQL a
session advisory lock makes concurrent workers migrate one at a time.
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import Connection, create_engine, text

# env.py is loaded by path; make api/ importable
sys.path.insert(0, str(Path(__file__).parent.parent))

import models  # noqa: F401,E402
from alembic import context  # noqa: E402
from core.config import get_settings  # noqa: E402
from core.database import Base  # noqa: E402

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata

MIGRATION_LOCK_KEY = 0x436F6D70  # "Comp"
LOCK_WAIT_SECONDS = 120
LOCK_POLL_SECONDS = 2

_SYNC_DRIVERS = {"+asyncpg": "+psycopg2", "+aiosqlite": ""}


def sync_url(url: str) -> str:
    """Swap an async driver in a SQLAlchemy URL for its synchronous twin."""
    for async_driver, sync_driver in _SYNC_DRIVERS.items():
        if async_driver in url:
            return url.replace(async_driver, sync_driver, 1)
    return url


@contextmanager
def migration_lock(connection: Connection) -> Iterator[None]:
    """Hold the PostgreSQL migration lock for the duration of the block."""
    if connection.dialect.name != "postgresql":
        yield
        return

    deadline = time.monotonic() + LOCK_WAIT_SECONDS
    params = {"key": MIGRATION_LOCK_KEY}
    while not connection.execute(
        text("SELECT pg_try_advisory_lock(:key)"), params
    ).scalar():
        if time.monotonic() >= deadline:
            raise RuntimeError(
                f"Migration lock not acquired within {LOCK_WAIT_SECONDS}s; "
                "another worker may be stuck migrating."
            )
        time.sleep(LOCK_POLL_SECONDS)
    # End the implicit transaction so Alembic opens its own
    connection.commit()
    logger.info("migrations.lock.acquired")

    try:
        yield
    finally:
        connection.execute(text("SELECT pg_advisory_unlock(:key)"), params)
        logger.info("migrations.lock.released")


def run_migrations_offline() -> None:
    """Emit SQL for the configured database without connecting."""
    context.configure(
        url=sync_url(get_settings().database_url),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(sync_url(get_settings().database_url))
    try:
        with engine.connect() as connection, migration_lock(connection):
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                compare_type=True,
                # SQLite needs table rebuilds for ALTERs
                render_as_batch=connection.dialect.name == "sqlite",
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
