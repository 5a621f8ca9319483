"""
auth/directory.py -- User registration, lookup, and password login.

Every function takes the UserStore explicitly (the same calling convention
as the store-taking helpers in orgs/) and raises core.errors types. The
route layer maps those to HTTP responses.

Login never reveals whether a username exists: unknown user and wrong
password both raise the same AuthError, and bcrypt runs in both cases so
response times match.

Layer rule: no imports from api/ or orgs/.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import User
from auth.store import UserStore
from auth.tokens import MAX_PASSWORD_BYTES, hash_password, issue_token, verify_against_dummy, verify_password
from core.errors import AuthError, ConflictError, InternalError, NotFoundError, ValidationError

logger = logging.getLogger("foosball.auth")


def register_user(store: UserStore, username: str, password: str) -> int:
    """Create an account and return the new user ID.

    Raises:
        ValidationError: username or password is empty, or the password
                         is longer than MAX_PASSWORD_BYTES once UTF-8 encoded.
        ConflictError:   the username is taken (UNIQUE constraint violation).
        InternalError:   any other store failure.
    """
    if not username or not password:
        raise ValidationError("Username and password are required.")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")

    hashed = hash_password(password)
    try:
        user_id = store.create_user(User(username=username, hashed_password=hashed))
    except IntegrityError as exc:
        raise ConflictError("Username already exists.") from exc
    except SQLAlchemyError as exc:
        logger.exception("Failed to create user %r", username)
        raise InternalError("Failed to create user.") from exc

    logger.info("Registered user %s (id=%s)", username, user_id)
    return user_id


def resolve_for_login(store: UserStore, username: str) -> User:
    """Return the stored account for username.

    NotFoundError is kept distinct from store failures so login_user() can
    fold it into the generic bad-credentials response while still reporting
    a real database outage as InternalError.
    """
    try:
        user = store.get_by_username(username)
    except SQLAlchemyError as exc:
        logger.exception("User lookup failed")
        raise InternalError("Database error.") from exc
    if user is None:
        raise NotFoundError("User not found.")
    return user


def login_user(store: UserStore, username: str, password: str, now: datetime | None = None) -> str:
    """Check a username/password pair and return a signed session credential.

    The credential carries the user's active organization when one is set.

    Raises:
        ValidationError: username or password is empty.
        AuthError:       unknown username or wrong password (same message).
        InternalError:   store or signing failure.
    """
    if not username or not password:
        raise ValidationError("Username and password are required.")

    try:
        user = resolve_for_login(store, username)
    except NotFoundError:
        # Equalize timing -- do NOT return early before running bcrypt
        verify_against_dummy(password)
        raise AuthError() from None

    if not verify_password(password, user.hashed_password):
        raise AuthError()

    return issue_token(user.id, user.username, user.active_org, now=now)


def list_users(store: UserStore) -> list[User]:
    """Return every registered user. Raises InternalError on store failure."""
    try:
        return store.list_users()
    except SQLAlchemyError as exc:
        logger.exception("Failed to list users")
        raise InternalError("Database query failed.") from exc
