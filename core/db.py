"""
core/db.py -- SQLAlchemy Core schema and engine factory.

All three tables live on one MetaData so foreign keys between users and
organizations resolve, and so the org registry can insert an organization
and its settings row inside a single transaction on the same engine.

Column names follow the persisted schema (userid, orgsecret, maxlobbies, ...)
so the database stays compatible with existing deployments.

Security:
  All queries built on these tables use bound parameters. No f-strings in SQL.

Layer rule: core/ is the kernel. No imports from api/, auth/, or orgs/.
"""

from __future__ import annotations

import secrets

from sqlalchemy import Column, ForeignKey, Integer, MetaData, String, Table, Text, create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()


def _generate_join_secret() -> str:
    # 128 bits of entropy; URL-safe so it can be shared in invite links.
    return secrets.token_urlsafe(16)


users = Table(
    "users",
    metadata,
    Column("userid", Integer, primary_key=True, autoincrement=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("password", Text, nullable=False),  # bcrypt hash, never plaintext
    Column("activeorg", Integer, ForeignKey("organizations.orgid", use_alter=True), nullable=True),
)

organizations = Table(
    "organizations",
    metadata,
    Column("orgid", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("orgowner", Integer, ForeignKey("users.userid"), nullable=False),
    Column("orgsecret", String(64), nullable=False, unique=True, default=_generate_join_secret),
)

organization_settings = Table(
    "organizationsettings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("orgid", Integer, ForeignKey("organizations.orgid"), nullable=False, unique=True),
    Column("orgowner", Integer, ForeignKey("users.userid"), nullable=True),
    Column("maxlobbies", Integer),
    Column("maxgamesperseason", Integer),
    Column("team1color", String(32)),
    Column("team2color", String(32)),
)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


def _set_sqlite_pragmas(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode and foreign key enforcement.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool. SQLite ignores FOREIGN KEY clauses unless
    foreign_keys is switched on.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


def create_db_engine(db_url: str) -> Engine:
    """Create an engine for db_url and make sure the schema exists."""
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_sqlite_pragmas)
    metadata.create_all(engine)
    return engine


def ping(engine: Engine) -> bool:
    """Return True if the database answers a trivial query."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
