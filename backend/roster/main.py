"""
Campus Roster Backend — FastAPI Application Factory
====================================================

What:  Builds the roster FastAPI app and its startup/shutdown lifecycle.
How:   create_app() wires middleware, exception handlers and routers.
Who:   Run by uvicorn (`uvicorn roster.main:app`) or the `roster-api` script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /api/student │ │ /api/teacher │ │ /healthz    │  │
    │  │ /addstudent  │ │ /addteacher  │ │ /readyz     │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  StoreUnavailableError → 500 │ Exception → 500      │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Ping the database; abort startup if it is unreachable
    3. Log the listen address

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from roster import __version__
from roster.config import settings
from roster.database import dispose_engine, ping_database
from roster.exceptions import RosterError, StoreUnavailableError
from roster.middleware.logging import RequestLoggingMiddleware
from roster.middleware.request_id import RequestIDMiddleware, request_id_var
from roster.routes import health, landing, students, teachers

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by Docker)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Access lines come from RequestLoggingMiddleware instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if settings.log_level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: verify the database is reachable before serving.
    Shutdown: close the connection pool.

    An unreachable database at startup is fatal. The exception propagates out
    of the lifespan, uvicorn reports "Application startup failed" and exits
    with a non-zero status instead of serving in a degraded mode.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Campus Roster backend %s starting up...", __version__)

    try:
        await ping_database()
    except (SQLAlchemyError, OSError) as e:
        logger.critical("Database connection failed: %s", str(e))
        raise StoreUnavailableError(
            message="Database unreachable at startup",
            context={"error_type": type(e).__name__},
        ) from e

    logger.info("Database connected")
    logger.info(
        "Backend listening on http://%s:%d (collections under '%s')",
        settings.backend_host,
        settings.backend_port,
        settings.api_prefix or "/",
    )

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Campus Roster backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to uniform JSON error bodies.

    Handler hierarchy:
        StoreUnavailableError → 500 {"error": <operation message>}
        RosterError (base)    → 500 {"error": <message>}
        Exception (fallback)  → 500 {"error": "Internal server error"}

    Driver details (SQL, constraint names) are logged, never returned.
    """

    @app.exception_handler(StoreUnavailableError)
    async def handle_store_unavailable(request: Request, exc: StoreUnavailableError):
        rid = request_id_var.get("")
        logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": exc.message, "request_id": rid},
        )

    @app.exception_handler(RosterError)
    async def handle_roster_error(request: Request, exc: RosterError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={"error": exc.message, "request_id": rid},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: full traceback to the log, generic body to the client."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "request_id": rid},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Collection routers are mounted under settings.api_prefix; landing and
    probe routes always sit at the root.
    """
    app = FastAPI(
        title="Campus Roster API",
        description=(
            "Student and teacher records with dense sequential ids. "
            "Deleting a record renumbers the remaining records to 1..N."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(students.router, prefix=settings.api_prefix)
    app.include_router(teachers.router, prefix=settings.api_prefix)
    app.include_router(landing.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Entry point of the `roster-api` console script."""
    uvicorn.run(
        "roster.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
