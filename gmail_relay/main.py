"""
Gmail Relay — FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(provider_factory) returns a configured app
       whose routes reach a MailService built around that factory.
Who:   Called by uvicorn (`gmail_relay.main:app`), the `gmail-relay` console
       script, and tests (with a stub provider factory).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │  Req ID  │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  GET /health   POST /api/archive   GET /contacts    │
    │  POST /api/send   POST /api/signatures              │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ Auth→401 │ Upstream→500           │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gmail_relay import __version__
from gmail_relay.config import settings
from gmail_relay.exceptions import (
    AuthenticationError,
    RelayError,
    UpstreamError,
    ValidationError,
)
from gmail_relay.middleware.logging import RequestLoggingMiddleware
from gmail_relay.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from gmail_relay.routes import contacts, health, messages, signatures
from gmail_relay.services.gmail_provider import GmailProvider
from gmail_relay.services.mail_service import MailService
from gmail_relay.services.provider_base import ProviderFactory

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every call
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("googleapiclient.discovery").setLevel(logging.WARNING)
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Gmail API service running on port %d", settings.port)
    logger.info("Health check: http://localhost:%d/health", settings.port)

    yield

    logger.info("Gmail API service shutting down")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError         → 400 {error}
        RequestValidationError  → 400 {error, details}  (body not a JSON object)
        AuthenticationError     → 401 {error}
        UpstreamError           → 500 {error, details}
        RelayError (base)       → 500 {error}
        Exception (fallback)    → 500 {error, details}
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        logger.warning("[%s] Malformed request body: %s", request_id_var.get(""), exc.errors())
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        logger.warning("[%s] Authentication error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=401, content={"error": exc.message})

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        logger.error(
            "[%s] %s: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.details,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content={"error": exc.message, "details": exc.details},
        )

    @app.exception_handler(RelayError)
    async def handle_relay_error(request: Request, exc: RelayError):
        logger.error("[%s] %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": str(exc)},
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(provider_factory: Optional[ProviderFactory] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        provider_factory: Turns a caller's access token into a MailProvider.
            Defaults to GmailProvider; tests pass a stub.
    """
    app = FastAPI(
        title="Gmail Relay API",
        description=(
            "Relays archive, send, contacts and signature operations to the Gmail and "
            "Google People APIs using the caller's OAuth access token."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.state.mail_service = MailService(provider_factory or GmailProvider)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added executes first: RequestID → Logging → CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(messages.router)
    app.include_router(contacts.router)
    app.include_router(signatures.router)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    uvicorn.run(
        "gmail_relay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()


if __name__ == "__main__":
    run()
