"""
tests/test_tokens.py -- Unit tests for auth/tokens.py.

Covers:
  - issued credentials carry username, userid, and exp exactly 24h ahead
  - activeorg claim present only for a non-empty active organization
  - refresh_token carries identity and activeorg forward with a new expiry
  - decode_token rejects expired, foreign-signed, and malformed tokens
  - signing failures surface as InternalError without the library message
  - bcrypt hash / verify round trip
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from jose import JWTError, jwt

from auth.models import SessionClaims
from auth.tokens import (
    SESSION_LIFETIME,
    decode_token,
    hash_password,
    issue_token,
    refresh_token,
    verify_password,
)
from core.config import get_settings
from core.errors import InternalError


def _now() -> datetime:
    # exp is stored in whole seconds
    return datetime.now(timezone.utc).replace(microsecond=0)


class TestIssueToken:
    def test_claims_carry_identity_and_exact_expiry(self) -> None:
        issued_at = _now()
        claims = decode_token(issue_token(1, "alice", now=issued_at))
        assert claims is not None
        assert claims.username == "alice"
        assert claims.user_id == "1"
        assert claims.expires_at == issued_at + timedelta(hours=24)
        assert SESSION_LIFETIME == timedelta(hours=24)

    def test_activeorg_absent_without_org(self) -> None:
        token = issue_token(1, "alice")
        assert "activeorg" not in jwt.get_unverified_claims(token)
        assert decode_token(token).active_org is None

    def test_activeorg_absent_for_empty_string(self) -> None:
        token = issue_token(1, "alice", active_org="")
        assert "activeorg" not in jwt.get_unverified_claims(token)

    def test_activeorg_present_as_string(self) -> None:
        token = issue_token(2, "bob", active_org=7)
        assert jwt.get_unverified_claims(token)["activeorg"] == "7"
        assert decode_token(token).active_org == "7"


class TestRefreshToken:
    def test_refresh_carries_claims_forward_with_new_expiry(self) -> None:
        original = decode_token(issue_token(3, "carol", active_org="9", now=_now() - timedelta(hours=5)))
        refreshed_at = _now()
        refreshed = decode_token(refresh_token(original, now=refreshed_at))
        assert refreshed.username == "carol"
        assert refreshed.user_id == "3"
        assert refreshed.active_org == "9"
        assert refreshed.expires_at == refreshed_at + timedelta(hours=24)
        assert refreshed.expires_at > original.expires_at

    def test_refresh_without_org_stays_without_org(self) -> None:
        claims = SessionClaims(username="dave", user_id="4", expires_at=_now())
        token = refresh_token(claims)
        assert "activeorg" not in jwt.get_unverified_claims(token)


def _failing_encode(*args, **kwargs):
    raise JWTError("key material rejected")


class TestSigningFailure:
    def test_issue_raises_internal_error(self, monkeypatch) -> None:
        monkeypatch.setattr(jwt, "encode", _failing_encode)
        with pytest.raises(InternalError) as exc_info:
            issue_token(1, "alice")
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Failed to issue credential."

    def test_refresh_raises_internal_error(self, monkeypatch) -> None:
        claims = SessionClaims(username="alice", user_id="1", expires_at=_now(), active_org="2")
        monkeypatch.setattr(jwt, "encode", _failing_encode)
        with pytest.raises(InternalError) as exc_info:
            refresh_token(claims)
        assert "key material" not in exc_info.value.message


class TestDecodeToken:
    def test_expired_token_is_rejected(self) -> None:
        token = issue_token(1, "alice", now=_now() - timedelta(hours=25))
        assert decode_token(token) is None

    def test_foreign_signature_is_rejected(self) -> None:
        exp = int((_now() + timedelta(hours=1)).timestamp())
        forged = jwt.encode({"username": "alice", "userid": "1", "exp": exp}, "x" * 32, algorithm="HS256")
        assert decode_token(forged) is None

    def test_garbage_is_rejected(self) -> None:
        assert decode_token("not-a-jwt") is None

    def test_token_without_exp_is_rejected(self) -> None:
        token = jwt.encode({"username": "alice", "userid": "1"}, get_settings().secret_key, algorithm="HS256")
        assert decode_token(token) is None

    def test_token_missing_userid_is_rejected(self) -> None:
        exp = int((_now() + timedelta(hours=1)).timestamp())
        token = jwt.encode({"username": "alice", "exp": exp}, get_settings().secret_key, algorithm="HS256")
        assert decode_token(token) is None


class TestPasswords:
    def test_hash_verifies(self) -> None:
        hashed = hash_password("pw1")
        assert hashed != "pw1"
        assert verify_password("pw1", hashed)
        assert not verify_password("pw2", hashed)

    def test_malformed_hash_does_not_verify(self) -> None:
        assert not verify_password("pw1", "not-a-bcrypt-hash")
