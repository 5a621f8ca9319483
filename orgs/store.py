"""
orgs/store.py -- SQLAlchemy Core persistence layer for organizations.

Pattern: Repository + Data Mapper (same as auth/store.py).
OrgStore is the repository; _row_to_org / _row_to_settings are the mappers.

Atomicity:
  create_organization() inserts the organization and its settings row inside
  one engine.begin() block. If the settings INSERT fails, the transaction
  rolls back and the organization row never becomes visible.

Security:
  All queries use bound parameters. update_settings() builds its SET clause
  from SETTINGS_COLUMNS only; unknown keys raise ValueError before any SQL
  is built, so patch keys can never reach the statement text.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.engine import Engine

from core.db import organization_settings as _settings
from core.db import organizations as _orgs
from orgs.models import SETTINGS_COLUMNS, Organization, OrganizationSettings, SettingsPatch


class OrgStore:
    """Repository for Organization and OrganizationSettings entities.

    Usage:
        store = OrgStore(engine)
        org = store.create_organization(Organization(name="Acme", owner=1))
        store.update_settings(org.id, {"max_lobbies": 5})
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    # ------------------------------------------------------------------
    # Organizations
    # ------------------------------------------------------------------

    def create_organization(self, org: Organization) -> Organization:
        """Insert an organization plus its default settings row atomically.

        The join secret comes from the orgsecret column default. Returns a
        new Organization with id and join_secret filled in.

        Raises sqlalchemy.exc.SQLAlchemyError on any failure; nothing is
        persisted in that case.
        """
        with self.engine.begin() as conn:
            result = conn.execute(_orgs.insert().values(name=org.name, orgowner=org.owner))
            org_id = result.inserted_primary_key[0]
            join_secret = result.last_inserted_params()["orgsecret"]
            conn.execute(_settings.insert().values(orgid=org_id, orgowner=org.owner))
        return Organization(id=org_id, name=org.name, owner=org.owner, join_secret=join_secret)

    def get_organization(self, org_id: int) -> Organization | None:
        with self.engine.connect() as conn:
            row = conn.execute(_orgs.select().where(_orgs.c.orgid == org_id)).fetchone()
        return _row_to_org(row) if row is not None else None

    def get_org_id_by_secret(self, join_secret: str) -> int | None:
        """Return the ID of the organization with this join secret, or None.

        orgsecret is UNIQUE, so at most one row can match.
        """
        with self.engine.connect() as conn:
            return conn.execute(select(_orgs.c.orgid).where(_orgs.c.orgsecret == join_secret)).scalar()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def get_settings(self, org_id: int) -> OrganizationSettings | None:
        with self.engine.connect() as conn:
            row = conn.execute(_settings.select().where(_settings.c.orgid == org_id)).fetchone()
        return _row_to_settings(row) if row is not None else None

    def update_settings(self, org_id: int, patch: SettingsPatch) -> bool:
        """Apply a partial update to an organization's settings row.

        Only the keys present in patch are written; every other column keeps
        its value. A key mapped to None sets the column to NULL.

        Raises ValueError for keys outside SETTINGS_COLUMNS, and
        sqlalchemy.exc.IntegrityError if owner does not reference a user.
        Returns True if a row was updated, False if the organization has no
        settings row.
        """
        unknown = set(patch) - set(SETTINGS_COLUMNS)
        if unknown:
            raise ValueError(f"Unknown settings fields: {sorted(unknown)!r}")
        if not patch:
            return False
        values = {SETTINGS_COLUMNS[field]: value for field, value in patch.items()}
        with self.engine.begin() as conn:
            result = conn.execute(_settings.update().where(_settings.c.orgid == org_id).values(**values))
        return result.rowcount > 0


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_org(row) -> Organization:
    return Organization(
        id=row.orgid,
        name=row.name,
        owner=row.orgowner,
        join_secret=row.orgsecret,
    )


def _row_to_settings(row) -> OrganizationSettings:
    return OrganizationSettings(
        org_id=row.orgid,
        owner=row.orgowner,
        max_lobbies=row.maxlobbies,
        max_games_per_season=row.maxgamesperseason,
        team1_color=row.team1color,
        team2_color=row.team2color,
    )
