"""
auth/store.py -- SQLAlchemy Core persistence layer for auth entities.

Pattern: Repository + Data Mapper (same as chirps/store.py).
UserStore is the repository; _row_to_user / _row_to_refresh_token are the
mappers. Service and route code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  Refresh token revocation is a single UPDATE with
  revoked_at = COALESCE(revoked_at, :now). The row is never torn: a
  concurrent reader sees either the old NULL or the final timestamp, and a
  second revoke leaves the first timestamp in place (monotonic).

  Rows in refresh_tokens are never deleted here except by delete_all(),
  which backs the dev-only reset endpoint.

Timestamps are stored as ISO 8601 UTC strings and mapped back to aware
datetimes. User ids are UUID4 strings.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, MetaData, String, Table, Text, func, select
from sqlalchemy.engine import Connection, Engine

from auth.models import RefreshToken, User
from core.db import make_engine

_DEFAULT_DB_URL = "sqlite:///chirpy.db"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", String(36), primary_key=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("hashed_password", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)

_refresh_tokens = Table(
    "refresh_tokens",
    _metadata,
    Column("token", String(64), primary_key=True),  # secrets.token_hex(32)
    Column("user_id", String(36), nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
    Column("expires_at", String(32), nullable=False),
    Column("revoked_at", String(32)),  # NULL until revoked, never cleared
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat()


def _from_iso(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User and RefreshToken entities.

    Usage:
        store = UserStore("sqlite:///chirpy.db")
        user = store.create_user(User(email="a@x.com", hashed_password=hash_password("pw")))
        store.get_by_email("a@x.com")
        store.close()
    """

    def __init__(self, db_url: str = _DEFAULT_DB_URL) -> None:
        self.engine: Engine = make_engine(db_url)
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # User queries
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> User:
        """Insert a new user and return it with timestamps filled in.

        A missing user.id is assigned a fresh UUID4.

        Raises sqlalchemy.exc.IntegrityError if the email already exists.
        SessionService turns that into EmailConflict, which covers the race
        where two signups pass email_exists() at the same time.
        """
        with self.engine.begin() as conn:
            return _insert_user(conn, user)

    def create_user_with_refresh_token(self, user: User, refresh_token: RefreshToken) -> tuple[User, RefreshToken]:
        """Insert a user and its first refresh token in one transaction.

        user.id must already be set and match refresh_token.user_id. If either
        insert fails, neither row is kept, so a failed signup can be retried
        with the same email.
        """
        with self.engine.begin() as conn:
            created = _insert_user(conn, user)
            _insert_refresh_token(conn, refresh_token)
        return created, refresh_token

    def get_by_email(self, email: str) -> User | None:
        """Look up a user by exact email. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == email)).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_id(self, user_id: uuid.UUID) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.id == str(user_id))).fetchone()
        return _row_to_user(row) if row is not None else None

    def email_exists(self, email: str) -> bool:
        with self.engine.connect() as conn:
            count = conn.execute(select(func.count()).select_from(_users).where(_users.c.email == email)).scalar()
        return (count or 0) > 0

    # ------------------------------------------------------------------
    # Refresh token queries
    # ------------------------------------------------------------------

    def create_refresh_token(self, refresh_token: RefreshToken) -> RefreshToken:
        """Persist a freshly issued refresh token and return it.

        Raises sqlalchemy.exc.IntegrityError on a duplicate token value. With
        256 bits of entropy that means a broken RNG, so it is not retried.
        """
        with self.engine.begin() as conn:
            _insert_refresh_token(conn, refresh_token)
        return refresh_token

    def get_refresh_token(self, token: str) -> RefreshToken | None:
        """Look up a refresh token by value. O(1) via the primary key."""
        with self.engine.connect() as conn:
            row = conn.execute(_refresh_tokens.select().where(_refresh_tokens.c.token == token)).fetchone()
        return _row_to_refresh_token(row) if row is not None else None

    def revoke_refresh_token(self, token: str, revoked_at: datetime) -> bool:
        """Stamp revoked_at on a token unless it is already set.

        Returns True if the token exists (revoked now or earlier), False if
        no such token was ever issued.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _refresh_tokens.update()
                .where(_refresh_tokens.c.token == token)
                .values(revoked_at=func.coalesce(_refresh_tokens.c.revoked_at, _to_iso(revoked_at)))
            )
            conn.commit()
        return result.rowcount > 0

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def delete_all(self) -> None:
        """Remove every user and refresh token. Dev-platform reset only."""
        with self.engine.connect() as conn:
            conn.execute(_refresh_tokens.delete())
            conn.execute(_users.delete())
            conn.commit()

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _insert_user(conn: Connection, user: User) -> User:
    user_id = user.id or uuid.uuid4()
    now = _to_iso(_utcnow())
    conn.execute(
        _users.insert().values(
            id=str(user_id),
            email=user.email,
            hashed_password=user.hashed_password,
            created_at=now,
            updated_at=now,
        )
    )
    return User(
        id=user_id,
        email=user.email,
        hashed_password=user.hashed_password,
        created_at=_from_iso(now),
        updated_at=_from_iso(now),
    )


def _insert_refresh_token(conn: Connection, refresh_token: RefreshToken) -> None:
    conn.execute(
        _refresh_tokens.insert().values(
            token=refresh_token.token,
            user_id=str(refresh_token.user_id),
            created_at=_to_iso(refresh_token.created_at),
            expires_at=_to_iso(refresh_token.expires_at),
            revoked_at=None,
        )
    )


def _row_to_user(row) -> User:
    return User(
        id=uuid.UUID(row.id),
        email=row.email,
        hashed_password=row.hashed_password,
        created_at=_from_iso(row.created_at),
        updated_at=_from_iso(row.updated_at),
    )


def _row_to_refresh_token(row) -> RefreshToken:
    return RefreshToken(
        token=row.token,
        user_id=uuid.UUID(row.user_id),
        created_at=_from_iso(row.created_at),
        expires_at=_from_iso(row.expires_at),
        revoked_at=_from_iso(row.revoked_at),
    )
