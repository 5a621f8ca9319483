"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in orgs/models.py -- dataclasses own domain shape; stores and routes do the
work.

Layer rule: no imports from api/ or orgs/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """A registered account.

    active_org is None until the user joins an organization with its join
    secret. A user belongs to at most one active organization at a time;
    joining another one replaces it.
    """

    username: str
    hashed_password: str
    id: int | None = None
    active_org: int | None = None


@dataclass(frozen=True)
class SessionClaims:
    """Claims carried by a verified session credential.

    Only ever built by auth.tokens.decode_token() after the signature and
    expiry have been checked, so route code can trust every field.
    Identifiers are strings, matching their JWT representation.
    """

    username: str
    user_id: str
    expires_at: datetime
    active_org: str | None = None
