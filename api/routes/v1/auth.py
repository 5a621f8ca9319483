"""
api/routes/v1/auth.py -- Registration, login, and session credential endpoints.

Routes:
  POST /api/v1/auth/register  -- create an account; 201 {message, userid}
  POST /api/v1/auth/login     -- password login; 200 {token}
  POST /api/v1/auth/refresh   -- re-issue the caller's credential (requires auth)
  GET  /api/v1/auth/me        -- claims of the current credential (requires auth)
  GET  /api/v1/users          -- list accounts (requires auth)

Security:
  login_user() provides timing equalization and one generic error for both
  unknown username and wrong password -- use it, never inline the lookup.
  Cache-Control: no-store on every response that carries a token.

Handlers are plain `def`: bcrypt and the SQLAlchemy calls block, so FastAPI
runs them in its threadpool.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from api.models import Credentials, MeResponse, RegisterResponse, TokenResponse, UserSummary
from auth.dependencies import get_current_claims
from auth.directory import list_users as list_all_users
from auth.directory import login_user, register_user
from auth.models import SessionClaims
from auth.store import UserStore
from auth.tokens import refresh_token

# Auth policy:
# - POST /api/v1/auth/register: public
# - POST /api/v1/auth/login:    public -- login endpoint must be unauthenticated
# - POST /api/v1/auth/refresh:  requires auth (get_current_claims)
# - GET  /api/v1/auth/me:       requires auth (get_current_claims)
# - GET  /api/v1/users:         requires auth (get_current_claims)
router = APIRouter()


def _token_response(token: str) -> JSONResponse:
    resp = JSONResponse(status_code=200, content=TokenResponse(token=token).model_dump())
    resp.headers["Cache-Control"] = "no-store"
    return resp


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/auth/register", response_model=RegisterResponse, status_code=201)
def register(request: Request, body: Credentials) -> RegisterResponse:
    """Create a user account.

    400 if username or password is empty, 409 if the username is taken.
    """
    user_store: UserStore = request.app.state.user_store
    user_id = register_user(user_store, body.username, body.password)
    return RegisterResponse(userid=user_id)


@router.post("/auth/login", response_model=TokenResponse)
def login(request: Request, body: Credentials) -> JSONResponse:
    """Authenticate with username and password; return a session credential.

    The credential carries the user's active organization, if any. Wrong
    username and wrong password return the same 401 body.
    """
    user_store: UserStore = request.app.state.user_store
    token = login_user(user_store, body.username, body.password)
    return _token_response(token)


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.post("/auth/refresh", response_model=TokenResponse)
def refresh(claims: SessionClaims = Depends(get_current_claims)) -> JSONResponse:
    """Issue a new 24-hour credential carrying the same identity and activeorg."""
    return _token_response(refresh_token(claims))


@router.get("/auth/me", response_model=MeResponse)
async def me(claims: SessionClaims = Depends(get_current_claims)) -> MeResponse:
    """Return the identity carried by the caller's credential."""
    return MeResponse.from_claims(claims)


@router.get("/users", response_model=list[UserSummary])
def list_users(
    request: Request,
    response: Response,
    claims: SessionClaims = Depends(get_current_claims),
) -> list[UserSummary]:
    """List every registered user (id and username only)."""
    user_store: UserStore = request.app.state.user_store
    response.headers["Cache-Control"] = "no-store"
    return [UserSummary.from_user(u) for u in list_all_users(user_store)]
