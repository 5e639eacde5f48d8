"""
CatTrack Backend — FastAPI Application Factory
===============================================

What:  Builds the CatTrack ASGI app: middleware, error mapping, routers.
How:   create_app() assembles everything; the module-level `app` is what uvicorn loads.
Who:   Called by uvicorn to start the server (uvicorn cattrack.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  Req ID      │→│ RateLim  │→│  Access Log     │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌──────────┐ ┌─────────┐ ┌─────────┐  │
    │  │ /auth    │ │ /users   │ │ /cats   │ │ /health │  │
    │  └──────────┘ └──────────┘ └─────────┘ └─────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Validation→400 │ Auth→401 │ Forbidden→403 │   │  │
    │  │ NotFound→404 │ RateLimit→429 │ Failed→500     │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Ensure store indexes
    4. Bootstrap the admin account if configured

    Shutdown:
    1. Close the Mongo client and its pool
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from cattrack import __version__
from cattrack.config import settings
from cattrack.database import (
    CATS_COLLECTION,
    USERS_COLLECTION,
    close_client,
    ensure_indexes,
    get_database,
)
from cattrack.dependencies import get_password_hasher
from cattrack.exceptions import (
    CatTrackError,
    ForbiddenError,
    OperationFailedError,
    ValidationError,
)
from cattrack.middleware.logging import RequestLoggingMiddleware
from cattrack.middleware.rate_limit import RateLimitMiddleware
from cattrack.middleware.request_id import RequestIDMiddleware, request_id_var
from cattrack.routes import auth, cats, health, users
from cattrack.services.mongo_store import MongoDocumentStore
from cattrack.services.user_service import UserService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    When:   Called once during app startup, before other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: logging, config check, indexes, admin bootstrap. Shutdown: close client."""
    setup_logging()
    logger.info("=" * 60)
    logger.info("CatTrack Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    # The store may still be coming up; keep serving so /health can say so.
    db = get_database()
    try:
        await ensure_indexes(db)
        if settings.admin_bootstrap_enabled:
            bootstrap = UserService(
                store=MongoDocumentStore(db[USERS_COLLECTION]),
                hasher=get_password_hasher(),
            )
            await bootstrap.ensure_admin(
                email=settings.admin_email,
                user_name=settings.admin_user_name,
                password=settings.admin_password,
            )
    except CatTrackError as e:
        logger.error("Admin bootstrap failed: %s", e.message)
    except Exception as e:
        logger.error("Store setup failed: %s", str(e), exc_info=True)

    logger.info("Collections: %s, %s in '%s'", USERS_COLLECTION, CATS_COLLECTION, settings.mongodb_database)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("CatTrack Backend shutting down...")
    await close_client()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def format_validation_errors(errors: List[dict]) -> str:
    """
    Join per-field problems into one message.

    "Input should be greater than 0: weight, Field required: birthdate"
    """
    parts = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        # Drop the leading "body"/"query"/"path" segment
        field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        parts.append(f"{error.get('msg', 'Invalid value')}: {field}")
    return ", ".join(parts)


def _error_body(exc: CatTrackError, rid: str) -> dict:
    body = {"error": exc.error_code, "message": exc.message, "request_id": rid}
    details = exc.public_details()
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        RequestValidationError  → 400 (per-field messages joined)
        ForbiddenError          → 403 (reason in details)
        OperationFailedError    → 500 (fixed message, cause logged only)
        CatTrackError (base)    → exc.status_code
        Exception (fallback)    → 500
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        error = ValidationError(format_validation_errors(exc.errors()))
        logger.warning("[%s] Validation error: %s", rid, error.message)
        return JSONResponse(status_code=error.status_code, content=_error_body(error, rid))

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        rid = request_id_var.get("")
        logger.warning("[%s] Forbidden: %s (%s)", rid, exc.message, exc.reason)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc, rid))

    @app.exception_handler(OperationFailedError)
    async def handle_operation_failed(request: Request, exc: OperationFailedError):
        rid = request_id_var.get("")
        logger.error("[%s] %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc, rid))

    @app.exception_handler(CatTrackError)
    async def handle_app_error(request: Request, exc: CatTrackError):
        rid = request_id_var.get("")
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc, rid))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500, stack trace in the server log only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "Internal server error",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers."""
    app = FastAPI(
        title="CatTrack API",
        description=(
            "Users and their geotagged cats. Owners edit and delete their own cats, "
            "admins can delete any cat or move it to another owner."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → RateLimit → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(cats.router)
    app.include_router(health.router)

    return app


app = create_app()
