"""
Journal backend.

FastAPI application factory with security hardening. Configuration is
loaded once and injected; the process refuses to start without
DATABASE_URL and JWT_SECRET.
"""

import logging
import os
import secrets
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.v1.api import api_router
from app.api.v1.endpoints.auth import LOGIN_PAGE, ENTRY_PAGE
from app.api.v1.endpoints.journal import PROTECTED_PAGE
from app.auth.dependencies import get_optional_identity
from app.auth.jwt import SessionClaims, TokenCodec
from app.auth.password import PasswordHasher
from app.core.config import Settings, load_settings
from app.core.database import Database

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


# =============================================================================
# Security Middleware
# =============================================================================

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    def __init__(self, app, enable_hsts: bool = False):
        super().__init__(app)
        self.enable_hsts = enable_hsts

    async def dispatch(self, request: Request, call_next: Callable):
        response = await call_next(request)

        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"

        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"

        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Pages are plain HTML forms served from our own origin
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; frame-ancestors 'none'; form-action 'self'"
        )

        # HSTS (only in production behind HTTPS)
        if self.enable_hsts:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add unique request ID for tracing."""

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = request.headers.get("X-Request-ID") or secrets.token_urlsafe(8)
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response


class PublicStaticFiles(StaticFiles):
    """
    Static pages that never serve a protected file.

    Protected pages live in the same directory but are only reachable
    through their gated routes; any spelling of their path that falls
    through to this mount is a 404.
    """

    def __init__(self, *args, protected: Iterable[str] = (), **kwargs):
        super().__init__(*args, **kwargs)
        self.protected = {self._normalize(p) for p in protected}

    @staticmethod
    def _normalize(path: str) -> str:
        return os.path.normpath(path).strip("/\\").lower()

    def lookup_path(self, path: str):
        if self._normalize(path) in self.protected:
            return "", None
        return super().lookup_path(path)


# =============================================================================
# Application Factory
# =============================================================================

def create_app(
    settings: Optional[Settings] = None,
    password_hasher: Optional[PasswordHasher] = None,
) -> FastAPI:
    """
    Build the application.

    Raises:
        ConfigError: If settings are not given and the environment lacks
            DATABASE_URL or JWT_SECRET.
    """
    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_level)

    database = Database(settings.database_url, echo=settings.sql_debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager for startup/shutdown events."""
        logger.info("Starting journal backend (%s)", settings.environment)
        await database.init()
        logger.info("Database initialized")

        yield

        logger.info("Shutting down journal backend")
        await database.close()

    app = FastAPI(
        title="Journal API",
        version="1.0.0",
        description="Personal journal backend with cookie-based JWT sessions",
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.password_hasher = password_hasher or PasswordHasher()
    app.state.token_codec = TokenCodec(
        settings.jwt_secret,
        ttl=timedelta(minutes=settings.token_ttl_minutes),
    )

    # Order matters: last added runs first
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.is_production)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/", include_in_schema=False)
    async def home(identity: Optional[SessionClaims] = Depends(get_optional_identity)):
        target = ENTRY_PAGE if identity else LOGIN_PAGE
        return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)

    @app.get("/health", tags=["health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        db_status = "healthy"
        try:
            await database.ping()
        except Exception as e:
            logger.warning("Health check failed: %s", e)
            db_status = "unhealthy"

        return {
            "status": "healthy" if db_status == "healthy" else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": db_status,
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler to prevent information leakage."""
        request_id = getattr(request.state, "request_id", "unknown")
        logger.exception("[%s] Unhandled exception: %s", request_id, exc)

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An internal error occurred",
                "request_id": request_id,
            },
        )

    app.include_router(api_router)

    # Public pages; mounted last so the routes above take precedence
    if settings.static_dir.is_dir():
        app.mount(
            "/",
            PublicStaticFiles(
                directory=settings.static_dir,
                html=True,
                protected=[PROTECTED_PAGE],
            ),
            name="static",
        )

    return app


# =============================================================================
# Development Server
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
        reload=not settings.is_production,
        log_level=settings.log_level.lower(),
    )
