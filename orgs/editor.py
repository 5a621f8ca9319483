"""
orgs/editor.py -- Reading and partially updating organization settings.

Authorization comes from the activeorg claim of the caller's verified
credential: a caller may only touch the settings of their own active
organization. The claim is trusted because auth.tokens.decode_token() has
checked the signature and expiry before any of this code runs.

Partial update semantics: the patch is a mapping of field -> value built
from the fields the client actually sent. Presence decides whether a column
is written; a present None clears the column, an absent field leaves it
alone.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import SessionClaims
from core.errors import AuthError, InternalError, NotFoundError, ValidationError
from orgs.models import SETTINGS_COLUMNS, OrganizationSettings, SettingsPatch
from orgs.store import OrgStore

logger = logging.getLogger("foosball.orgs")


def _active_org_id(claims: SessionClaims) -> int:
    """Return the caller's active organization ID or raise AuthError (403)."""
    if not claims.active_org:
        raise AuthError("User is not part of any organization.", code="forbidden", status_code=403)
    try:
        return int(claims.active_org)
    except ValueError:
        raise AuthError("Invalid active organization.", code="forbidden", status_code=403) from None


def update_settings(store: OrgStore, claims: SessionClaims, patch: SettingsPatch) -> None:
    """Apply patch to the settings of the caller's active organization.

    Raises:
        ValidationError: empty patch, unknown field, or an owner that is not
                         an existing user.
        AuthError:       the caller has no active organization (403).
        InternalError:   store failure.
    """
    if not patch:
        raise ValidationError("At least one option must be passed in.")
    unknown = set(patch) - set(SETTINGS_COLUMNS)
    if unknown:
        raise ValidationError(f"Unknown settings fields: {', '.join(sorted(unknown))}.")

    org_id = _active_org_id(claims)

    try:
        updated = store.update_settings(org_id, patch)
    except IntegrityError as exc:
        raise ValidationError("Organization owner must be an existing user.") from exc
    except SQLAlchemyError as exc:
        logger.exception("Failed to update settings for organization %s", org_id)
        raise InternalError("Failed to update organization settings.") from exc

    if not updated:
        logger.error("Organization %s has no settings row", org_id)
        raise InternalError("Failed to update organization settings.")

    logger.info("User %s updated settings %s of organization %s", claims.user_id, sorted(patch), org_id)


def get_settings_for(store: OrgStore, claims: SessionClaims) -> OrganizationSettings:
    """Return the settings of the caller's active organization."""
    org_id = _active_org_id(claims)
    try:
        settings = store.get_settings(org_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to read settings for organization %s", org_id)
        raise InternalError("Failed to get organization settings.") from exc
    if settings is None:
        raise NotFoundError("Organization settings not found.")
    return settings
