"""
api/routes/v1/auth.py -- Registration, login and identity endpoints.

Routes:
  POST /api/v1/users        -- register; returns the account and a token (201)
  POST /api/v1/users/login  -- password login; returns the account and a token
  GET  /api/v1/users/me     -- current identity (requires auth)

Security:
  POST /users/login runs the login pipeline first (login_guard), which
  throttles by client address. A throttled attempt never reaches bcrypt.
  AuthService.login() gives the same 401 for unknown email and wrong password,
  and spends one bcrypt computation either way.
  Cache-Control: no-store on every response that carries a token.

All handlers are plain `def` so FastAPI runs them, and the bcrypt work inside
them, in its threadpool rather than on the event loop.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from api.models import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from auth.dependencies import get_current_identity, login_guard
from auth.service import AuthService
from core.models import Identity, RequestContext

# Auth policy:
# - POST /api/v1/users:        public
# - POST /api/v1/users/login:  public, throttled per client address
# - GET  /api/v1/users/me:     requires auth (get_current_identity)
router = APIRouter()


@router.post("/users", response_model=AuthResponse, status_code=201)
def register(request: Request, response: Response, body: RegisterRequest) -> AuthResponse:
    """Create an account. Returns 409 if the email is already registered."""
    service: AuthService = request.app.state.auth_service
    result = service.register(body.name, body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return AuthResponse.from_user(result.user, result.token)


@router.post("/users/login", response_model=AuthResponse)
def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    _: RequestContext = Depends(login_guard),
) -> AuthResponse:
    """Exchange email and password for a bearer token.

    Returns 401 invalid_credentials on any mismatch and 429 once the client
    address has used up its attempts for the window.
    """
    service: AuthService = request.app.state.auth_service
    result = service.login(body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return AuthResponse.from_user(result.user, result.token)


@router.get("/users/me", response_model=MeResponse)
def me(identity: Identity = Depends(get_current_identity)) -> MeResponse:
    """Return identity information for the authenticated caller."""
    return MeResponse.from_identity(identity)
