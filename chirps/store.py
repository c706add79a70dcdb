"""
chirps/store.py -- SQLAlchemy Core persistence layer for chirps.

Pattern: Repository + Data Mapper (same as auth/store.py). ChirpStore is the
repository; _row_to_chirp is the mapper.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = ChirpStore("sqlite:///chirpy.db")
    chirp = store.create_chirp(Chirp(body="hello", user_id=user_id))
    store.list_chirps()
    store.close()
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from chirps.models import Chirp
from core.db import make_engine

_DEFAULT_DB_URL = "sqlite:///chirpy.db"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_chirps = Table(
    "chirps",
    _metadata,
    Column("id", String(36), primary_key=True),
    Column("body", Text, nullable=False),
    Column("user_id", String(36), nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ChirpStore:
    """Repository for Chirp entities."""

    def __init__(self, db_url: str = _DEFAULT_DB_URL) -> None:
        self.engine: Engine = make_engine(db_url)
        _metadata.create_all(self.engine)

    def create_chirp(self, chirp: Chirp) -> Chirp:
        """Insert a chirp and return it with id and timestamps filled in."""
        chirp_id = uuid.uuid4()
        now = _now_iso()
        with self.engine.connect() as conn:
            conn.execute(
                _chirps.insert().values(
                    id=str(chirp_id),
                    body=chirp.body,
                    user_id=str(chirp.user_id),
                    created_at=now,
                    updated_at=now,
                )
            )
            conn.commit()
        return Chirp(
            id=chirp_id,
            body=chirp.body,
            user_id=chirp.user_id,
            created_at=datetime.fromisoformat(now),
            updated_at=datetime.fromisoformat(now),
        )

    def list_chirps(self) -> list[Chirp]:
        """Return every chirp, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(_chirps.select().order_by(_chirps.c.created_at, _chirps.c.id)).fetchall()
        return [_row_to_chirp(r) for r in rows]

    def get_chirp(self, chirp_id: uuid.UUID) -> Chirp | None:
        """Look up a chirp by id. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_chirps.select().where(_chirps.c.id == str(chirp_id))).fetchone()
        return _row_to_chirp(row) if row is not None else None

    def delete_all(self) -> None:
        """Remove every chirp. Dev-platform reset only."""
        with self.engine.connect() as conn:
            conn.execute(_chirps.delete())
            conn.commit()

    def close(self) -> None:
        self.engine.dispose()


def _row_to_chirp(row) -> Chirp:
    return Chirp(
        id=uuid.UUID(row.id),
        body=row.body,
        user_id=uuid.UUID(row.user_id),
        created_at=datetime.fromisoformat(row.created_at),
        updated_at=datetime.fromisoformat(row.updated_at),
    )
