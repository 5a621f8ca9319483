"""
tests/test_org_registry.py -- Unit tests for orgs/registry.py and orgs/store.py.

Covers:
  - create_organization: owner, generated secret, default settings row
  - create_organization is atomic: a failing settings insert leaves no
    organization behind
  - resolve_by_secret: hit and miss
  - join_organization: unknown secret keeps the previous binding, valid
    secret binds, repeat joins are idempotent, a new secret replaces the
    previous organization
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, select, text

from auth.models import User
from core.db import organizations
from core.errors import InternalError, NotFoundError, ValidationError
from orgs.registry import create_organization, join_organization, resolve_by_secret


@pytest.fixture
def owner_id(user_store) -> int:
    return user_store.create_user(User(username="alice", hashed_password="x"))


@pytest.fixture
def member_id(user_store) -> int:
    return user_store.create_user(User(username="bob", hashed_password="x"))


def _org_count(engine) -> int:
    with engine.connect() as conn:
        return conn.execute(select(func.count()).select_from(organizations)).scalar()


class TestCreateOrganization:
    def test_creates_org_with_default_settings(self, org_store, owner_id) -> None:
        org = create_organization(org_store, owner_id, "Acme")
        assert org.id is not None
        assert org.name == "Acme"
        assert org.owner == owner_id
        assert org.join_secret

        stored = org_store.get_organization(org.id)
        assert stored.owner == owner_id
        assert stored.join_secret == org.join_secret

        settings = org_store.get_settings(org.id)
        assert settings.org_id == org.id
        assert settings.owner == owner_id
        assert settings.max_lobbies is None
        assert settings.max_games_per_season is None
        assert settings.team1_color is None
        assert settings.team2_color is None

    def test_secrets_differ_between_orgs(self, org_store, owner_id) -> None:
        first = create_organization(org_store, owner_id, "Acme")
        second = create_organization(org_store, owner_id, "Acme")
        assert first.id != second.id
        assert first.join_secret != second.join_secret

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name_rejected(self, engine, org_store, owner_id, name) -> None:
        with pytest.raises(ValidationError):
            create_organization(org_store, owner_id, name)
        assert _org_count(engine) == 0

    def test_failed_settings_insert_rolls_back_org(self, engine, org_store, owner_id) -> None:
        # Fault injection: the settings INSERT fails after the org INSERT ran.
        with engine.begin() as conn:
            conn.execute(text("DROP TABLE organizationsettings"))

        with pytest.raises(InternalError) as exc_info:
            create_organization(org_store, owner_id, "Acme")

        assert exc_info.value.message == "Failed to create organization."
        assert _org_count(engine) == 0

    def test_unknown_owner_is_internal_error(self, engine, org_store) -> None:
        with pytest.raises(InternalError):
            create_organization(org_store, 999, "Ghost")
        assert _org_count(engine) == 0


class TestResolveBySecret:
    def test_resolves_known_secret(self, org_store, owner_id) -> None:
        org = create_organization(org_store, owner_id, "Acme")
        assert resolve_by_secret(org_store, org.join_secret) == org.id

    def test_unknown_secret_not_found(self, org_store) -> None:
        with pytest.raises(NotFoundError):
            resolve_by_secret(org_store, "no-such-secret")


class TestJoinOrganization:
    def test_join_sets_active_org(self, org_store, user_store, owner_id, member_id) -> None:
        org = create_organization(org_store, owner_id, "Acme")
        assert join_organization(org_store, user_store, member_id, org.join_secret) == org.id
        assert user_store.get_by_id(member_id).active_org == org.id

    def test_join_is_idempotent(self, org_store, user_store, owner_id, member_id) -> None:
        org = create_organization(org_store, owner_id, "Acme")
        join_organization(org_store, user_store, member_id, org.join_secret)
        join_organization(org_store, user_store, member_id, org.join_secret)
        assert user_store.get_by_id(member_id).active_org == org.id

    def test_unknown_secret_keeps_previous_binding(self, org_store, user_store, owner_id, member_id) -> None:
        org = create_organization(org_store, owner_id, "Acme")
        join_organization(org_store, user_store, member_id, org.join_secret)

        with pytest.raises(NotFoundError):
            join_organization(org_store, user_store, member_id, "wrong-secret")
        assert user_store.get_by_id(member_id).active_org == org.id

    def test_unknown_secret_without_previous_binding(self, org_store, user_store, member_id) -> None:
        with pytest.raises(NotFoundError):
            join_organization(org_store, user_store, member_id, "wrong-secret")
        assert user_store.get_by_id(member_id).active_org is None

    def test_joining_another_org_replaces_binding(self, org_store, user_store, owner_id, member_id) -> None:
        first = create_organization(org_store, owner_id, "Acme")
        second = create_organization(org_store, owner_id, "Globex")
        join_organization(org_store, user_store, member_id, first.join_secret)
        join_organization(org_store, user_store, member_id, second.join_secret)
        assert user_store.get_by_id(member_id).active_org == second.id

    def test_empty_secret_rejected(self, org_store, user_store, member_id) -> None:
        with pytest.raises(ValidationError):
            join_organization(org_store, user_store, member_id, "")

    def test_unknown_user_is_internal_error(self, org_store, user_store, owner_id) -> None:
        org = create_organization(org_store, owner_id, "Acme")
        with pytest.raises(InternalError):
            join_organization(org_store, user_store, 999, org.join_secret)
