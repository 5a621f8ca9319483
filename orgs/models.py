"""
orgs/models.py -- Domain dataclasses for organizations and their settings.

Pattern: Data class (pure data container, zero logic), as in auth/models.py.

Layer rule: no imports from api/. orgs/ may import from auth/ and core/.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Settings fields a patch may touch, mapped to their column names in
# organizationsettings. The store only ever builds UPDATEs from these keys.
SETTINGS_COLUMNS: dict[str, str] = {
    "owner": "orgowner",
    "max_lobbies": "maxlobbies",
    "max_games_per_season": "maxgamesperseason",
    "team1_color": "team1color",
    "team2_color": "team2color",
}

# A settings patch: field name -> new value. Presence of a key means "set
# this column", even when the value is None.
SettingsPatch = dict[str, Any]


@dataclass
class Organization:
    """An organization (league) that users join with its secret.

    join_secret is generated by the store at insert time and handed to the
    creator once; anyone holding it can join.
    """

    name: str
    owner: int
    id: int | None = None
    join_secret: str | None = None


@dataclass
class OrganizationSettings:
    """Per-organization configuration. Exactly one row per organization."""

    org_id: int
    owner: int | None = None
    max_lobbies: int | None = None
    max_games_per_season: int | None = None
    team1_color: str | None = None
    team2_color: str | None = None
