"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as orgs/store.py).
UserStore is the repository; _row_to_user is the mapper. Service and route
code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  Username uniqueness is enforced by the UNIQUE constraint on
  users.username, not by a read-before-write check. Two concurrent
  registrations for the same name race on the INSERT; the database lets
  exactly one win and the other gets IntegrityError.

Layer rule: no imports from api/ or orgs/.
"""

from __future__ import annotations

from sqlalchemy.engine import Engine

from auth.models import User
from core.db import users as _users


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore(engine)
        uid = store.create_user(User(username="alice", hashed_password=hash_password("pw1")))
        user = store.get_by_username("alice")
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def create_user(self, user: User) -> int:
        """Insert a new user and return its assigned database ID.

        Raises sqlalchemy.exc.IntegrityError if the username already exists.
        """
        with self.engine.begin() as conn:
            result = conn.execute(
                _users.insert().values(
                    username=user.username,
                    password=user.hashed_password,
                    activeorg=user.active_org,
                )
            )
            return result.inserted_primary_key[0]

    def get_by_username(self, username: str) -> User | None:
        """Look up a user by exact username (case-sensitive). Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.username == username)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: int) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.userid == user_id)).fetchone()
        return _row_to_user(row) if row is not None else None

    def list_users(self) -> list[User]:
        """Return all users ordered by ID."""
        with self.engine.connect() as conn:
            rows = conn.execute(_users.select().order_by(_users.c.userid)).fetchall()
        return [_row_to_user(r) for r in rows]

    def set_active_org(self, user_id: int, org_id: int) -> bool:
        """Bind a user to an organization, replacing any previous binding.

        Raises sqlalchemy.exc.IntegrityError if org_id does not reference an
        existing organization. Returns True if a row was updated, False if
        user_id was not found.
        """
        with self.engine.begin() as conn:
            result = conn.execute(_users.update().where(_users.c.userid == user_id).values(activeorg=org_id))
        return result.rowcount > 0


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.userid,
        username=row.username,
        hashed_password=row.password,
        active_org=row.activeorg,
    )
