"""
chirps/models.py -- Domain dataclass for a chirp.

Pure data container. Length checks and word filtering live in
chirps/censor.py; persistence lives in chirps/store.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class Chirp:
    """A short post. id and timestamps are None until the store writes it."""

    body: str
    user_id: UUID
    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
