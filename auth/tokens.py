"""
auth/tokens.py -- Session credentials (JWT) and password hashing.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       username, userid, the optional activeorg binding, and an expiry exactly
       24 hours after issuance. Verification returns None on any failure --
       the route layer turns that into a 401. Claims are only trusted after
       decode_token() has checked both signature and expiry; an expired
       credential is treated the same as no credential.

  Passwords: bcrypt directly. The _DUMMY_HASH constant enables timing
       equalization in auth.directory.login_user() so response time does not
       reveal whether a username exists.

  SECRET_KEY: sourced from core.config.get_settings(), read once at module
       load. The Settings object is never mutated after startup.

Layer rule: no imports from api/ or orgs/. Import from core/ is allowed --
core/ is the kernel and has no reverse dependencies.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JOSEError, JWTError, jwt

from auth.models import SessionClaims
from core.config import get_settings
from core.errors import InternalError

logger = logging.getLogger("foosball.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"

# Fixed session lifetime. Not configurable: clients schedule their refresh
# calls around it.
SESSION_LIFETIME = timedelta(hours=24)

# bcrypt refuses inputs longer than this many bytes (UTF-8 encoded).
MAX_PASSWORD_BYTES = 72

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password.

    bcrypt raises ValueError for inputs over MAX_PASSWORD_BYTES once encoded.
    auth.directory.register_user() rejects those before hashing.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


# Timing equalization dummy hash.
# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("foosball_timing_dummy")


def verify_against_dummy(plain: str) -> None:
    """Run a bcrypt check that always fails, costing the same as a real one.

    Called when the username does not exist so the response time matches
    a wrong-password attempt.
    """
    verify_password(plain, _DUMMY_HASH)


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def issue_token(
    user_id: int | str,
    username: str,
    active_org: int | str | None = None,
    now: datetime | None = None,
) -> str:
    """Encode a signed session credential.

    Args:
        user_id:    Database ID of the user; stored as a string claim.
        username:   Login name of the user.
        active_org: The user's active organization, if any. The activeorg
                    claim is only added when this is non-empty.
        now:        Issuance time. Defaults to the current UTC time; tests
                    pass a fixed value to check the exact expiry.

    Raises InternalError if signing fails.
    """
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "username": username,
        "userid": str(user_id),
        "exp": int((issued_at + SESSION_LIFETIME).timestamp()),
    }
    if active_org is not None and str(active_org) != "":
        claims["activeorg"] = str(active_org)

    try:
        return jwt.encode(claims, _settings.secret_key, algorithm=_ALGORITHM)
    except JOSEError as exc:
        logger.exception("Failed to sign session credential for user %s", user_id)
        raise InternalError("Failed to issue credential.") from exc


def refresh_token(claims: SessionClaims, now: datetime | None = None) -> str:
    """Re-issue a credential from already-verified claims with a fresh expiry.

    username, userid and activeorg (when present) are carried forward
    unchanged. Nothing is looked up in the store: the claims were signed by
    this server and decode_token() has already verified them.
    """
    return issue_token(claims.user_id, claims.username, claims.active_org, now=now)


def decode_token(token: str) -> SessionClaims | None:
    """Verify a credential and return its claims, or None on any failure.

    Returning None (rather than raising) keeps the caller simple: any invalid
    or expired token is treated as unauthenticated. Route dependencies turn
    None into 401.
    """
    try:
        payload = jwt.decode(
            token,
            _settings.secret_key,
            algorithms=[_ALGORITHM],
            options={"require_exp": True},
        )
    except JWTError:
        return None

    username = payload.get("username")
    user_id = payload.get("userid")
    if not isinstance(username, str) or not isinstance(user_id, str) or not user_id:
        return None
    active_org = payload.get("activeorg")
    if active_org is not None and not isinstance(active_org, str):
        return None

    return SessionClaims(
        username=username,
        user_id=user_id,
        active_org=active_org or None,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
