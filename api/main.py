"""
api/main.py -- FastAPI application factory for the contact list API.

Run with:      uvicorn asgi:app --reload
               python main.py serve

create_app(settings) builds a complete application from one Settings object.
Nothing in here reads the environment; asgi.py and main.py call get_settings()
and pass the result in, tests pass their own.

Middleware stack (outermost to innermost):
  1. log_requests          -- one log line per request with status and latency
  2. TrustedHostMiddleware -- rejects requests with unexpected Host headers
  3. CORSMiddleware        -- adds CORS headers for allowed browser origins

Interceptor pipelines (core/pipeline.py), built in lifespan startup:
  protected_pipeline -- AuthGate; every contact route and /users/me
  login_pipeline     -- LoginThrottle; POST /users/login

Lifespan handles startup (stores, hasher, token issuer, pipelines) and
shutdown (close both stores) symmetrically.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from api.limiter import LoginThrottle
from api.models import ErrorDetail, ErrorResponse, HealthResponse, MessageResponse
from api.routes.v1.auth import router as auth_router
from api.routes.v1.contacts import router as contacts_router
from auth.gate import AuthGate
from auth.passwords import PasswordHasher
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenIssuer
from contacts.store import ContactStore
from core.config import Settings, get_settings
from core.errors import ContactListError, RateLimitedError, UnauthenticatedError
from core.pipeline import Pipeline

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("contactlist.api")


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build every component from app.state.settings; tear down on shutdown.

    Startup order matters:
      1. Stores first -- the auth gate and the auth service both read users.
      2. Hasher and token issuer -- pure objects configured from settings.
      3. Pipelines last -- they wire the pieces above together.
    """
    settings: Settings = app.state.settings
    logger.info("Contact list API starting up")

    app.state.user_store = UserStore(settings.database_url)
    app.state.contact_store = ContactStore(settings.database_url)
    logger.info("Database initialized")

    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    tokens = TokenIssuer(settings.secret_key, expire_days=settings.token_expire_days)
    app.state.token_issuer = tokens
    app.state.auth_service = AuthService(app.state.user_store, hasher, tokens)

    app.state.login_throttle = LoginThrottle(
        rate=settings.login_rate_limit,
        storage_uri=settings.rate_limit_storage_uri,
    )
    app.state.protected_pipeline = Pipeline(AuthGate(tokens, app.state.user_store))
    app.state.login_pipeline = Pipeline(app.state.login_throttle)
    logger.info("Auth initialized (bcrypt_rounds=%d, login_rate_limit=%s)", settings.bcrypt_rounds, settings.login_rate_limit)

    yield

    app.state.contact_store.close()
    app.state.user_store.close()
    logger.info("Contact list API shutdown complete")


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def _error_response(status_code: int, code: str, message: str, detail: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump(),
    )


async def contact_list_error_handler(request: Request, exc: ContactListError) -> JSONResponse:
    """Translate a domain error into its status, code and headers."""
    response = _error_response(exc.status_code, exc.code, exc.message, exc.detail)
    if isinstance(exc, UnauthenticatedError):
        response.headers["WWW-Authenticate"] = "Bearer"
    if isinstance(exc, RateLimitedError):
        response.headers["Retry-After"] = str(exc.retry_after)
    return response


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 listing each failing field and why.

    Only location and message are reported. exc.errors() also carries the
    submitted value, which for a login or registration body is a password.
    """
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else str(err.get("msg", "invalid")))
    return _error_response(422, "validation_error", "Request validation failed.", "; ".join(problems))


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Structured error for Starlette HTTP exceptions (unknown routes, bad methods)."""
    response = _error_response(exc.status_code, f"http_{exc.status_code}", str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The traceback goes to the log only. The client receives a generic message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(500, "internal_error", "An unexpected error occurred.")


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application for the given settings."""
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Contact List API",
        description="Multi-tenant contact list with bearer-token authentication.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # add_middleware() wraps the existing stack, so the last one added is
    # outermost. Register innermost first: CORS, then TrustedHost.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=3600,
    )
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms %s",
            request.method,
            request.url.path,
            response.status_code,
            ms,
            request.client.host if request.client else "unknown",
        )
        return response

    app.add_exception_handler(ContactListError, contact_list_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(auth_router, prefix="/api/v1", tags=["Users"])
    app.include_router(contacts_router, prefix="/api/v1", tags=["Contacts"])

    # Defined on the app (not a router) so it is always reachable. Not
    # authenticated and not throttled: load balancers poll it.
    @app.get("/api/v1/health", tags=["Health"])
    def health(request: Request) -> HealthResponse:
        """Return API liveness, version and database status."""
        components = {"app": "ok"}
        try:
            request.app.state.user_store.ping()
            request.app.state.contact_store.ping()
            components["database"] = "ok"
        except Exception:
            logger.exception("Health check: database unreachable")
            components["database"] = "error"
        status = "healthy" if components["database"] == "ok" else "degraded"
        return HealthResponse(status=status, version=__version__, components=components)

    @app.get("/", include_in_schema=False)
    def root() -> MessageResponse:
        return MessageResponse(message="Welcome to the Contact List API")

    return app
