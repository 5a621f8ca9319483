"""
api/routes/v1/orgs.py -- Organization creation, membership, and settings endpoints.

Routes:
  POST  /api/v1/orgs           -- create an organization owned by the caller
  POST  /api/v1/orgs/join      -- join with a join secret; returns a fresh credential
  GET   /api/v1/orgs/settings  -- read the caller's active organization settings
  PATCH /api/v1/orgs/settings  -- partially update those settings

All routes require a valid bearer credential. Settings routes additionally
require an activeorg claim (403 otherwise).

Join re-issues the credential so the new activeorg claim is usable right
away; clients holding the old token keep working but see no activeorg until
they switch to the new one (or refresh after a login).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import (
    MessageResponse,
    OrgCreate,
    OrgCreatedResponse,
    OrgJoin,
    OrgJoinResponse,
    OrgSettingsPatch,
    OrgSettingsResponse,
)
from auth.dependencies import get_current_claims
from auth.models import SessionClaims
from auth.store import UserStore
from auth.tokens import issue_token
from orgs.editor import get_settings_for, update_settings
from orgs.registry import create_organization, join_organization
from orgs.store import OrgStore

router = APIRouter()


@router.post("/orgs", response_model=OrgCreatedResponse, status_code=201)
def create_org(
    request: Request,
    body: OrgCreate,
    claims: SessionClaims = Depends(get_current_claims),
) -> OrgCreatedResponse:
    """Create an organization owned by the caller.

    The join secret is returned once here; share it with the players who
    should join.
    """
    org_store: OrgStore = request.app.state.org_store
    org = create_organization(org_store, int(claims.user_id), body.name)
    return OrgCreatedResponse(orgid=org.id, orgsecret=org.join_secret)


@router.post("/orgs/join", response_model=OrgJoinResponse)
def join_org(
    request: Request,
    body: OrgJoin,
    claims: SessionClaims = Depends(get_current_claims),
) -> JSONResponse:
    """Join the organization behind a join secret and make it the active one."""
    org_store: OrgStore = request.app.state.org_store
    user_store: UserStore = request.app.state.user_store

    org_id = join_organization(org_store, user_store, int(claims.user_id), body.orgsecret)
    token = issue_token(claims.user_id, claims.username, org_id)

    resp = JSONResponse(
        status_code=200,
        content=OrgJoinResponse(orgid=org_id, token=token).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.get("/orgs/settings", response_model=OrgSettingsResponse)
def read_org_settings(
    request: Request,
    claims: SessionClaims = Depends(get_current_claims),
) -> OrgSettingsResponse:
    """Return the settings of the caller's active organization."""
    org_store: OrgStore = request.app.state.org_store
    return OrgSettingsResponse.from_settings(get_settings_for(org_store, claims))


@router.patch("/orgs/settings", response_model=MessageResponse)
def edit_org_settings(
    request: Request,
    body: OrgSettingsPatch,
    claims: SessionClaims = Depends(get_current_claims),
) -> MessageResponse:
    """Update only the settings fields present in the request body.

    Sending a field as null clears it; omitting a field leaves it unchanged.
    """
    org_store: OrgStore = request.app.state.org_store
    update_settings(org_store, claims, body.to_patch())
    return MessageResponse(message="Organization settings updated successfully")
