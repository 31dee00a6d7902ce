"""
Leisure Catalog API — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   Factory pattern: create_app() is the composition root. It builds the
       Database (connection pool) and hands it to handlers through app.state.
Who:   Called by uvicorn (`uvicorn leisure.main:app`) or the `leisure-api`
       console script (`run()`).

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware Chain:                                   │
    │  ┌──────────┐ ┌──────────────┐ ┌──────────────────┐  │
    │  │  Req ID  │→│  Access Log  │→│  CORS (any)      │  │
    │  └──────────┘ └──────────────┘ └──────────────────┘  │
    │                                                      │
    │  Routes:                                             │
    │  GET /api/genres  GET /api/genre/{genre}             │
    │  GET /api/tvshow/{tvid}  GET /health                 │
    │                                                      │
    │  Exception Handlers:                                 │
    │  ShowNotFound→400 │ DatabaseError→500 │ other→500    │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Check out one connection, SELECT 1, release
    3. Ping failed → StartupError; uvicorn never binds the port
    4. Ping passed → log "Application started on port ..."

    Shutdown:
    1. Dispose the engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from uvicorn.main import STARTUP_FAILURE
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from leisure import __version__
from leisure.config import Settings, settings as default_settings
from leisure.database import Database
from leisure.exceptions import (
    DatabaseError,
    ShowNotFoundError,
    StartupError,
    describe_error,
)
from leisure.middleware.logging import RequestLoggingMiddleware
from leisure.middleware.request_id import RequestIDMiddleware, request_id_var
from leisure.routes import catalog, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s

    Access lines come from our own RequestLoggingMiddleware, so uvicorn's
    access logger is quieted to avoid logging each request twice.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup Health Check & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

async def check_database(database: Database) -> None:
    """
    Startup health check: one checkout, one ping, one release.

    Raises:
        StartupError: The connection could not be acquired or the ping failed.
    """
    try:
        await database.ping()
    except DatabaseError as e:
        logger.error("Database ping failed: %s", e.details.get("message"))
        raise StartupError(
            message="Cannot reach the database; refusing to serve traffic",
            context=e.details,
        ) from e
    except Exception as e:
        logger.error("Database ping failed: %s", str(e), exc_info=True)
        raise StartupError(
            message="Cannot reach the database; refusing to serve traffic",
            context=describe_error(e),
        ) from e


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Initializing → Serving when the ping succeeds,
    Initializing → Terminated when it fails. No retries.

    Uvicorn runs this before binding its socket, so a failed ping means
    the port is never opened.
    """
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("Leisure Catalog API %s starting up...", __version__)

    try:
        await check_database(database)
    except StartupError:
        await database.dispose()
        raise

    logger.info("Application started on port %d at %s", app_settings.port, datetime.now())

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Leisure Catalog API shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and {"error": ...} bodies.

    Handler hierarchy:
        ShowNotFoundError → 400 {"error": "tvid <id> is not found"}
        DatabaseError     → 500 {"error": <serialized driver error>}
        Exception         → 500 {"error": <serialized exception>}
    """

    @app.exception_handler(ShowNotFoundError)
    async def handle_show_not_found(request: Request, exc: ShowNotFoundError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] %s | Details: %s", rid, exc.message, exc.details)
        return JSONResponse(status_code=500, content={"error": exc.details})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        return JSONResponse(status_code=500, content={"error": describe_error(exc)})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; defaults to the environment-loaded singleton.
        database: Connection pool; built from `settings` when omitted.
                  Tests pass a Database bound to a throwaway SQLite file.
    """
    settings = settings or default_settings
    database = database or Database.from_settings(settings)

    app = FastAPI(
        title="Leisure Catalog API",
        description="Read-only catalog of TV shows and their genres.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in REVERSE order of addition: RequestID → AccessLog → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(catalog.router)
    app.include_router(health.router)

    return app


app = create_app()


def run(application: Optional[FastAPI] = None) -> None:
    """
    Console entry point: serve `application` (the module-level `app` by
    default) with uvicorn on the host and port from its settings.

    When the lifespan raises, uvicorn never binds the listening socket and
    the process exits with a non-zero status (uvicorn's startup-failure
    code, 3).
    """
    application = application or app
    app_settings: Settings = application.state.settings
    config = uvicorn.Config(
        application,
        host=app_settings.host,
        port=app_settings.port,
        lifespan="on",
        log_config=None,
        access_log=False,
    )
    server = uvicorn.Server(config)
    server.run()
    # Recent uvicorn releases exit from inside Server.run(); older ones return
    # with `started` unset and leave the exit to uvicorn.run().
    if not server.started:
        sys.exit(STARTUP_FAILURE)


if __name__ == "__main__":
    run()
