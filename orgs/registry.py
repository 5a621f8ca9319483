"""
orgs/registry.py -- Organization creation, join-secret lookup, and membership.

Functions take their stores explicitly and raise core.errors types; the
route layer maps those to HTTP responses.

Membership model: a user has at most one active organization. Joining binds
users.activeorg to the organization resolved from the join secret, replacing
any previous binding. The caller's existing credential does not change; the
route re-issues one carrying the new activeorg claim.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from auth.store import UserStore
from core.errors import InternalError, NotFoundError, ValidationError
from orgs.models import Organization
from orgs.store import OrgStore

logger = logging.getLogger("foosball.orgs")


def create_organization(store: OrgStore, caller_user_id: int, name: str) -> Organization:
    """Create an organization owned by the caller, with default settings.

    The organization and its settings row are written in one transaction;
    on failure neither exists and InternalError is raised.

    Returns the Organization with its id and join_secret.
    """
    if not name or not name.strip():
        raise ValidationError("Organization name is required.")

    try:
        org = store.create_organization(Organization(name=name.strip(), owner=caller_user_id))
    except SQLAlchemyError as exc:
        logger.exception("Failed to create organization %r for user %s", name, caller_user_id)
        raise InternalError("Failed to create organization.") from exc

    logger.info("Created organization %s (id=%s) owned by user %s", org.name, org.id, caller_user_id)
    return org


def resolve_by_secret(store: OrgStore, join_secret: str) -> int:
    """Return the organization ID for a join secret.

    Raises NotFoundError if no organization has this secret, and
    InternalError on store failure.
    """
    try:
        org_id = store.get_org_id_by_secret(join_secret)
    except SQLAlchemyError as exc:
        logger.exception("Join secret lookup failed")
        raise InternalError("Failed to get organization.") from exc
    if org_id is None:
        raise NotFoundError("No organization with that secret.")
    return org_id


def join_organization(orgs: OrgStore, users: UserStore, caller_user_id: int, join_secret: str) -> int:
    """Make the organization behind join_secret the caller's active one.

    Joining the same organization again is a no-op in effect. An unknown
    secret raises NotFoundError before anything is written, so the caller's
    previous binding is kept.

    Returns the joined organization ID.
    """
    if not join_secret:
        raise ValidationError("Organization secret is required.")

    org_id = resolve_by_secret(orgs, join_secret)

    try:
        updated = users.set_active_org(caller_user_id, org_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to bind user %s to organization %s", caller_user_id, org_id)
        raise InternalError("Failed to join organization.") from exc
    if not updated:
        # Credential was valid but the account row is gone.
        logger.error("Join by unknown user id %s", caller_user_id)
        raise InternalError("Failed to join organization.")

    logger.info("User %s joined organization %s", caller_user_id, org_id)
    return org_id
