"""
Wallit Users — FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the Database handle, registers middleware,
       exception handlers and routes, and returns the app.
Who:   uvicorn (uvicorn wallit.main:app) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:   Request ID → Logging → CORS          │
    │                                                     │
    │  Routes:                                            │
    │    POST /users   POST /users/authenticate           │
    │    GET  /users?email=...   GET /health              │
    │                                                     │
    │  Exception Handlers:                                │
    │    WallitError → status(code) + plain-text message  │
    │    Exception   → 500 + default message              │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging setup, config check, optional create_all
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from wallit import __version__
from wallit.config import settings
from wallit.database import Database
from wallit.exceptions import DEFAULT_MESSAGE, WallitError
from wallit.middleware.logging import RequestLoggingMiddleware
from wallit.middleware.request_id import RequestIDMiddleware, request_id_var
from wallit.routes import health, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Validate database configuration (logged, not fatal)
        3. Create tables if DB_CREATE_ALL is enabled
    Shutdown:
        1. Dispose the database engine
    """
    setup_logging()
    logger.info("Wallit Users %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    database: Database = app.state.database
    if settings.db_create_all:
        logger.info("DB_CREATE_ALL is enabled; creating missing tables")
        await database.create_all()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Wallit Users shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map errors to responses in one place.

    WallitError → its code, body = its message (text/plain)
    Exception   → 500, body = default message; traceback logged only
    """

    @app.exception_handler(WallitError)
    async def handle_wallit_error(request: Request, exc: WallitError):
        rid = request_id_var.get("")
        code = exc.code or 500
        message = exc.message or DEFAULT_MESSAGE
        if code >= 500:
            logger.error("[%s] Status Code %d: %s | Context: %s", rid, code, message, exc.context)
        else:
            logger.warning("[%s] Status Code %d: %s", rid, code, message)
        return PlainTextResponse(message, status_code=code)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return PlainTextResponse(DEFAULT_MESSAGE, status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Storage handle to use. Defaults to one built from settings;
            tests pass a handle bound to a temporary SQLite file.
    """
    app = FastAPI(
        title="Wallit Users API",
        description="Register users, authenticate by email and password, and look users up by email.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = database or Database.from_settings(settings)

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(health.router)

    return app


app = create_app()
