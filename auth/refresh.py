"""
auth/refresh.py -- Refresh token lifecycle: issue, authenticate, revoke.

States:
  active   -- stored, not revoked, now < expires_at
  expired  -- now >= expires_at (derived, never written)
  revoked  -- revoked_at set (written once, never cleared)

Both terminal states are final: nothing moves a token back to active.

authenticate() checks in a fixed order -- existence, then revocation, then
expiry -- so a token that was revoked and has since passed its natural expiry
still reports as revoked.

Persistence is delegated to UserStore. Store errors propagate unchanged;
nothing here retries.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from auth.errors import RefreshTokenExpired, RefreshTokenNotFound, RefreshTokenRevoked
from auth.models import RefreshToken
from auth.store import UserStore
from auth.tokens import generate_refresh_token

logger = logging.getLogger("chirpy.auth")

DEFAULT_LIFETIME = timedelta(days=60)


def _prefix(token: str) -> str:
    # Enough to correlate log lines, not enough to replay the token.
    return token[:8]


class RefreshTokenManager:
    """Issues and checks refresh tokens against a UserStore.

    lifetime is fixed for the life of the manager (Settings.refresh_token_ttl).
    """

    def __init__(self, store: UserStore, lifetime: timedelta = DEFAULT_LIFETIME) -> None:
        self.store = store
        self.lifetime = lifetime

    def build(self, owner: UUID) -> RefreshToken:
        """Mint a token record for owner without persisting it."""
        now = datetime.now(timezone.utc)
        return RefreshToken(
            token=generate_refresh_token(),
            user_id=owner,
            created_at=now,
            expires_at=now + self.lifetime,
        )

    def issue(self, owner: UUID) -> RefreshToken:
        return self.store.create_refresh_token(self.build(owner))

    def authenticate(self, token: str) -> RefreshToken:
        """Return the stored record for an active token.

        Raises RefreshTokenNotFound, RefreshTokenRevoked or RefreshTokenExpired,
        in that order of precedence.
        """
        record = self.store.get_refresh_token(token)
        if record is None:
            logger.info("Refresh rejected: token %s... not found", _prefix(token))
            raise RefreshTokenNotFound("refresh token not found")
        if record.is_revoked:
            logger.info("Refresh rejected: token %s... revoked at %s", _prefix(token), record.revoked_at)
            raise RefreshTokenRevoked("refresh token has been revoked")
        if record.is_expired(datetime.now(timezone.utc)):
            logger.info("Refresh rejected: token %s... expired at %s", _prefix(token), record.expires_at)
            raise RefreshTokenExpired("refresh token has expired")
        return record

    def revoke(self, token: str) -> None:
        """Revoke a token. Revoking an already-revoked token is a no-op."""
        if not self.store.revoke_refresh_token(token, datetime.now(timezone.utc)):
            logger.info("Revoke rejected: token %s... not found", _prefix(token))
            raise RefreshTokenNotFound("refresh token not found")
