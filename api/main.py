"""FastAPI application for the Event Compilations API."""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from core.config import Settings, get_settings
from core.database import (
    create_engine,
    create_session_maker,
    dispose_engine,
    init_db,
)
from core.logger import configure_logging
from core.middleware import RequestContextMiddleware
from core.ratelimit import limiter, rate_limit_exceeded_handler
from routes import admin_compilations_router, compilations_router, health_router
from services.exceptions import (
    BadParameterError,
    ElementNotFoundError,
    PaginationParameterError,
    UnresolvedReferenceError,
)

configure_logging()
logger = logging.getLogger(__name__)

API_DIR = Path(__file__).parent
GENERIC_ERROR = "An unexpected error occurred. Please try again."

# Service exception -> HTTP status. Message is passed through as ``detail``.
CLIENT_ERRORS: dict[type[Exception], int] = {
    PaginationParameterError: 400,
    BadParameterError: 400,
    ElementNotFoundError: 404,
}


async def client_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map a service exception from CLIENT_ERRORS to its status code."""
    status_code = next(
        code for exc_type, code in CLIENT_ERRORS.items() if isinstance(exc, exc_type)
    )
    logger.info(
        "request.rejected",
        extra={
            "path": request.url.path,
            "status_code": status_code,
            "error": str(exc),
        },
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


async def unresolved_reference_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Inconsistent stored data: log it for operators, answer 500."""
    logger.error(
        "reference.unresolved",
        extra={"path": request.url.path, "error": str(exc)},
    )
    return JSONResponse(status_code=500, content={"detail": GENERIC_ERROR})


async def validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """422 with location, message and type of each invalid field."""
    if not isinstance(exc, RequestValidationError):
        return await global_exception_handler(request, exc)
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.warning(
        "request.validation_error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_count": len(errors),
        },
    )
    return JSONResponse(status_code=422, content={"detail": errors})


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything not mapped above: log with traceback, answer 500."""
    logger.exception(
        "unhandled.exception",
        extra={
            "exc_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(status_code=500, content={"detail": GENERIC_ERROR})


async def _migrate_to_head() -> None:
    """Upgrade the schema through ``cli migrate`` in a child process.

    Alembic's env.py drives a synchronous engine, so it stays out of the
    server's event loop.
    """
    proc = await asyncio.create_subprocess_exec(
        sys.executable,
        "-m",
        "cli",
        "migrate",
        "head",
        cwd=API_DIR,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    _, stderr = await proc.communicate()
    if proc.returncode != 0:
        output = stderr.decode(errors="replace").strip()
        logger.error("migrations.failed", extra={"stderr": output})
        raise RuntimeError(f"Schema migration failed:\n{output}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the engine, verify the database and migrate; dispose on shutdown.

    ``init_done``/``init_error`` on app.state drive the /ready probe.
    """
    engine = create_engine()
    app.state.engine = engine
    app.state.session_maker = create_session_maker(engine)
    app.state.init_done = False
    app.state.init_error = None

    try:
        async with asyncio.timeout(180):
            await init_db(engine)
            await _migrate_to_head()
    except TimeoutError:
        app.state.init_error = "startup timed out"
        logger.error("init.timeout")
        await dispose_engine(engine)
        raise RuntimeError("Application startup timed out")
    except Exception as e:
        app.state.init_error = str(e)
        logger.error("init.failed", extra={"error": str(e)}, exc_info=True)
        await dispose_engine(engine)
        raise

    app.state.init_done = True
    logger.info("init.complete")
    try:
        yield
    finally:
        await dispose_engine(engine)


def _register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    for exc_type in CLIENT_ERRORS:
        app.add_exception_handler(exc_type, client_error_handler)
    app.add_exception_handler(UnresolvedReferenceError, unresolved_reference_handler)
    app.add_exception_handler(Exception, global_exception_handler)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    show_docs = settings.enable_docs or settings.debug

    app = FastAPI(
        title="Event Compilations API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        openapi_url="/openapi.json" if show_docs else None,
    )
    app.state.limiter = limiter

    _register_exception_handlers(app)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health_router)
    app.include_router(compilations_router)
    app.include_router(admin_compilations_router)
    return app


app = create_app()
