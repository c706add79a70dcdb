"""
auth/sessions.py -- Session use cases: signup, login, refresh, revoke, and
request authentication.

SessionService composes the leaf components:
  passwords.py  -- bcrypt hash / check
  tokens.py     -- JWT access tokens
  bearer.py     -- Authorization header parsing
  refresh.py    -- refresh token lifecycle

Configuration (signing key, lifetimes, bcrypt cost) is handed to the
constructor once and treated as read-only. The service holds no other state,
so a single instance on app.state is shared by every request thread.

Failure policy:
  - Each use case raises one outward-facing error kind (InvalidCredentials,
    Unauthorized, EmailConflict, PersistenceFailure). The specific cause is
    chained as __cause__ and logged, never returned to the client.
  - HashingFailure is not translated: it is a backend fault and fails the
    request.
  - Nothing is retried.

[Timing] login() runs bcrypt against a dummy hash when the email is unknown,
so response time does not reveal which emails are registered.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from uuid import UUID, uuid4

from pydantic import SecretStr
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.bearer import get_bearer_token
from auth.errors import (
    BearerError,
    EmailConflict,
    InvalidCredentials,
    PasswordMismatch,
    PersistenceFailure,
    RefreshTokenError,
    TokenError,
    Unauthorized,
)
from auth.models import SessionTokens, User
from auth.passwords import DEFAULT_ROUNDS, check_password, hash_password
from auth.refresh import RefreshTokenManager
from auth.store import UserStore
from auth.tokens import create_access_token, validate_access_token
from core.config import Settings

logger = logging.getLogger("chirpy.auth")

DEFAULT_ACCESS_TOKEN_TTL = timedelta(hours=1)


class SessionService:
    """Answers the five session use cases against a UserStore.

    Usage:
        sessions = SessionService.from_settings(UserStore(url), get_settings())
        tokens = sessions.signup("a@x.com", "pw")
        user_id = sessions.authenticate_request(f"Bearer {tokens.access_token}")
    """

    def __init__(
        self,
        store: UserStore,
        signing_key: SecretStr,
        refresh_tokens: RefreshTokenManager,
        access_token_ttl: timedelta = DEFAULT_ACCESS_TOKEN_TTL,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ) -> None:
        self.store = store
        self.refresh_tokens = refresh_tokens
        self.access_token_ttl = access_token_ttl
        self.bcrypt_rounds = bcrypt_rounds
        self._signing_key = signing_key
        # Same cost as real hashes so the unknown-email path takes as long.
        self._dummy_hash = hash_password("chirpy_timing_dummy", bcrypt_rounds)

    @classmethod
    def from_settings(cls, store: UserStore, settings: Settings) -> "SessionService":
        return cls(
            store=store,
            signing_key=settings.secret_key,
            refresh_tokens=RefreshTokenManager(store, settings.refresh_token_ttl),
            access_token_ttl=settings.access_token_ttl,
            bcrypt_rounds=settings.bcrypt_rounds,
        )

    # ------------------------------------------------------------------
    # Credential use cases
    # ------------------------------------------------------------------

    def signup(self, email: str, password: str) -> SessionTokens:
        """Create an account and open a session for it.

        Raises EmailConflict if the email is taken (including a concurrent
        signup that wins the insert), PersistenceFailure for any other store
        error, HashingFailure if bcrypt fails.
        """
        try:
            taken = self.store.email_exists(email)
        except SQLAlchemyError as exc:
            raise PersistenceFailure("could not check email") from exc
        if taken:
            raise EmailConflict("email already registered")

        hashed = hash_password(password, self.bcrypt_rounds)
        user_id = uuid4()
        # User row and first refresh token commit together or not at all.
        try:
            user, refresh_token = self.store.create_user_with_refresh_token(
                User(email=email, hashed_password=hashed, id=user_id),
                self.refresh_tokens.build(user_id),
            )
        except IntegrityError as exc:
            raise EmailConflict("email already registered") from exc
        except SQLAlchemyError as exc:
            raise PersistenceFailure("could not create user") from exc

        logger.info("User %s signed up", user.id)
        return SessionTokens(
            user=user,
            access_token=self.issue_access_token(user.id),
            refresh_token=refresh_token,
        )

    def login(self, email: str, password: str) -> SessionTokens:
        """Verify email/password and open a session.

        Unknown email and wrong password both raise InvalidCredentials.
        """
        user = self.store.get_by_email(email)
        if user is None:
            try:
                check_password(password, self._dummy_hash)
            except PasswordMismatch as exc:
                logger.info("Login rejected: unknown email")
                raise InvalidCredentials("invalid credentials") from exc
            # A password equal to the dummy seed still must not log anyone in.
            raise InvalidCredentials("invalid credentials")

        try:
            check_password(password, user.hashed_password)
        except PasswordMismatch as exc:
            logger.info("Login rejected: wrong password for user %s", user.id)
            raise InvalidCredentials("invalid credentials") from exc

        logger.info("User %s logged in", user.id)
        return self._open_session(user)

    # ------------------------------------------------------------------
    # Bearer use cases
    # ------------------------------------------------------------------

    def refresh_access_token(self, authorization: str | None) -> str:
        """Mint a new access token from a refresh token bearer header.

        The refresh token itself is not rotated.
        """
        try:
            token = get_bearer_token(authorization)
            record = self.refresh_tokens.authenticate(token)
        except (BearerError, RefreshTokenError) as exc:
            raise Unauthorized("unauthorized") from exc
        return self.issue_access_token(record.user_id)

    def revoke_refresh_token(self, authorization: str | None) -> None:
        try:
            token = get_bearer_token(authorization)
            self.refresh_tokens.revoke(token)
        except (BearerError, RefreshTokenError) as exc:
            raise Unauthorized("unauthorized") from exc

    def authenticate_request(self, authorization: str | None) -> UUID:
        """Return the acting user id for an access token bearer header."""
        try:
            token = get_bearer_token(authorization)
            return validate_access_token(token, self._signing_key.get_secret_value())
        except (BearerError, TokenError) as exc:
            logger.debug("Request rejected: %s", type(exc).__name__)
            raise Unauthorized("unauthorized") from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def issue_access_token(self, user_id: UUID) -> str:
        return create_access_token(user_id, self._signing_key.get_secret_value(), self.access_token_ttl)

    def _open_session(self, user: User) -> SessionTokens:
        return SessionTokens(
            user=user,
            access_token=self.issue_access_token(user.id),
            refresh_token=self.refresh_tokens.issue(user.id),
        )
