"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

These adapt a Starlette Request into a core.models.RequestContext and run one
of the interceptor pipelines that api/main.py builds and stores on app.state:

  app.state.protected_pipeline -- AuthGate; used by every contact route and /users/me
  app.state.login_pipeline     -- LoginThrottle; used by POST /users/login

A rejecting interceptor raises a core.errors error, and the exception handler
in api/main.py turns it into the one response for the request. The route
handler never runs.

All helpers are plain `def`: FastAPI runs them in the threadpool, so the token
check and the identity lookup do not block the event loop.

Layer rule: no imports from api/ or contacts/.
  auth/dependencies.py may import from fastapi and slowapi because this module
  is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Depends, Request
from slowapi.util import get_remote_address

from core.errors import UnauthenticatedError
from core.models import Identity, RequestContext
from core.pipeline import Pipeline


def build_context(request: Request) -> RequestContext:
    """Capture the parts of the request the interceptors are allowed to see."""
    return RequestContext(
        method=request.method,
        path=request.url.path,
        client_ip=get_remote_address(request),
        authorization=request.headers.get("Authorization"),
    )


def require_auth(request: Request) -> RequestContext:
    """Run the protected pipeline. Raises UnauthenticatedError (401) on failure."""
    pipeline: Pipeline = request.app.state.protected_pipeline
    return pipeline.run(build_context(request))


def get_current_identity(context: RequestContext = Depends(require_auth)) -> Identity:
    """Require authentication and return the caller's Identity.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(identity: Identity = Depends(get_current_identity)): ...
    """
    # The auth gate rejects rather than proceeding without an identity; this
    # only trips if the protected pipeline was assembled without it.
    if context.identity is None:
        raise UnauthenticatedError()
    return context.identity


def login_guard(request: Request) -> RequestContext:
    """Run the login pipeline. Raises RateLimitedError (429) when throttled."""
    pipeline: Pipeline = request.app.state.login_pipeline
    return pipeline.run(build_context(request))
