"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Credentials arrive as an Authorization: Bearer <token> header. The token is
verified (signature + expiry) by decode_token(); only then are its claims
handed to the route. An expired or tampered token is indistinguishable from
a missing one: both produce 401.

try_get_current_claims() is the soft variant (returns None on failure).
get_current_claims() wraps it and raises HTTP 401 if unauthenticated.

Layer rule: no imports from api/ or orgs/.
  auth/dependencies.py may import from fastapi (for HTTPException/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.models import SessionClaims
from auth.tokens import decode_token


def try_get_current_claims(request: Request) -> SessionClaims | None:
    """Return the verified claims of the request's bearer token, or None.

    Never raises -- callers that need a hard 401 should use get_current_claims().
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    token = auth_header[7:].strip()
    if not token:
        return None
    return decode_token(token)


def get_current_claims(request: Request) -> SessionClaims:
    """Require authentication. Raises HTTP 401 if the request is not authenticated.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(claims: SessionClaims = Depends(get_current_claims)): ...
    """
    claims = try_get_current_claims(request)
    if claims is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Authentication required."},
        )
    return claims
