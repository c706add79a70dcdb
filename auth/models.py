"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic beyond derived state).
Dataclasses own domain shape; stores and services do the work.

Layer rule: no imports from api/, core/, or chirps/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class User:
    """A registered account.

    hashed_password is the bcrypt hash. It never leaves the auth layer: API
    response models are built field by field and do not carry it.
    """

    email: str
    hashed_password: str
    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class RefreshToken:
    """A long-lived, opaque, server-tracked credential.

    State is derived rather than stored:
    - revoked_at set            -> revoked (terminal)
    - now >= expires_at         -> expired (terminal)
    - otherwise                 -> active

    token is the lookup key: 64 hex chars from secrets.token_hex(32).
    """

    token: str
    user_id: UUID
    created_at: datetime
    expires_at: datetime
    revoked_at: datetime | None = None

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass
class SessionTokens:
    """Result of a successful signup or login: the account plus a token pair."""

    user: User
    access_token: str
    refresh_token: RefreshToken
