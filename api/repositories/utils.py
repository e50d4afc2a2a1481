"""Query timing for repository methods."""

import time
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from core.logger import get_logger
from core.wide_event import set_wide_event_fields

logger = get_logger(__name__)

SLOW_QUERY_THRESHOLD_MS = 500

P = ParamSpec("P")
R = TypeVar("R")


def _report(operation: str, duration_ms: float, error: Exception | None) -> None:
    fields = {"db_operation": operation, "db_duration_ms": round(duration_ms, 2)}
    if error is not None:
        set_wide_event_fields(
            db_query_error=True, db_error_type=type(error).__name__, **fields
        )
    elif duration_ms > SLOW_QUERY_THRESHOLD_MS:
        logger.warning("db.query.slow", **fields)
        set_wide_event_fields(db_slow_query=True, **fields)


def timed_query(
    operation: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Time a repository coroutine and report it on the request's wide event.

    Failures are recorded and re-raised. Calls slower than
    SLOW_QUERY_THRESHOLD_MS are also logged as ``db.query.slow``.

    Usage:
        @timed_query("compilations.get_by_id")
        async def get_by_id(self, compilation_id: int) -> Compilation | None:
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            error: Exception | None = None
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                error = e
                raise
            finally:
                _report(operation, (time.perf_counter() - start) * 1000, error)

        return wrapper

    return decorator
