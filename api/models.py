"""
API request and response models for the foosball REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
orgs/models.py, which own the internal domain representation. Route handlers
map between the two.

JSON field names (userid, orgsecret, maxlobbies, ...) match the wire format
existing clients already send and parse.

Required-field checks for username, password, name and orgsecret are left to
the services, which answer 400 with a specific message. Pydantic still
enforces types and length caps (422 on violation).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import SessionClaims, User
from orgs.models import OrganizationSettings, SettingsPatch

# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class Credentials(BaseModel):
    """Request body for POST /api/v1/auth/register and /auth/login.

    The 72-character cap on password is a coarse bound; register_user()
    enforces bcrypt's 72-byte limit on the encoded value. Neither field is
    stripped: whitespace in a password is significant.
    """

    username: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=72)


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class TokenResponse(BaseModel):
    """A freshly signed session credential."""

    model_config = ConfigDict(frozen=True)

    token: str


class RegisterResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str = "User created successfully"
    userid: int


class UserSummary(BaseModel):
    """One row in GET /api/v1/users -- never includes the password hash."""

    model_config = ConfigDict(frozen=True)

    userid: int
    username: str

    @classmethod
    def from_user(cls, user: User) -> "UserSummary":
        return cls(userid=user.id, username=user.username)


class MeResponse(BaseModel):
    """Identity carried by the caller's current credential."""

    model_config = ConfigDict(frozen=True)

    userid: str
    username: str
    activeorg: Optional[str] = None
    expires_at: str

    @classmethod
    def from_claims(cls, claims: SessionClaims) -> "MeResponse":
        return cls(
            userid=claims.user_id,
            username=claims.username,
            activeorg=claims.active_org,
            expires_at=claims.expires_at.isoformat(),
        )


# ---------------------------------------------------------------------------
# Organizations -- request models
# ---------------------------------------------------------------------------


class OrgCreate(BaseModel):
    """Request body for POST /api/v1/orgs."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(default="", max_length=255)


class OrgJoin(BaseModel):
    """Request body for POST /api/v1/orgs/join."""

    model_config = ConfigDict(str_strip_whitespace=True)

    orgsecret: str = Field(default="", max_length=64)


class OrgSettingsPatch(BaseModel):
    """Request body for PATCH /api/v1/orgs/settings.

    Every field is optional. to_patch() keeps only the fields the client sent,
    including ones sent as an explicit null, so absent fields are never
    overwritten.
    """

    model_config = ConfigDict(extra="forbid")

    owner: Optional[int] = Field(default=None, alias="orgowner")
    max_lobbies: Optional[int] = Field(default=None, alias="maxlobbies", ge=0)
    max_games_per_season: Optional[int] = Field(default=None, alias="maxgamesperseason", ge=0)
    team1_color: Optional[str] = Field(default=None, alias="team1color", max_length=32)
    team2_color: Optional[str] = Field(default=None, alias="team2color", max_length=32)

    def to_patch(self) -> SettingsPatch:
        return self.model_dump(exclude_unset=True)


# ---------------------------------------------------------------------------
# Organizations -- response models
# ---------------------------------------------------------------------------


class OrgCreatedResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str = "Org created successfully"
    orgid: int
    orgsecret: str


class OrgJoinResponse(BaseModel):
    """Join confirmation plus a credential that already carries activeorg."""

    model_config = ConfigDict(frozen=True)

    message: str = "Added user to organization"
    orgid: int
    token: str


class OrgSettingsResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    orgid: int
    orgowner: Optional[int]
    maxlobbies: Optional[int]
    maxgamesperseason: Optional[int]
    team1color: Optional[str]
    team2color: Optional[str]

    @classmethod
    def from_settings(cls, settings: OrganizationSettings) -> "OrgSettingsResponse":
        return cls(
            orgid=settings.org_id,
            orgowner=settings.owner,
            maxlobbies=settings.max_lobbies,
            maxgamesperseason=settings.max_games_per_season,
            team1color=settings.team1_color,
            team2color=settings.team2_color,
        )


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
