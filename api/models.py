"""
API request and response models for Chirpy REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
chirps/models.py, which own the internal domain representation. Route
handlers map between the two.

No response model has a password or password-hash field. The hash cannot leak
through serialization because there is nowhere to put it.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import SessionTokens
from auth.passwords import MAX_PASSWORD_BYTES
from chirps.models import Chirp

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CredentialsRequest(BaseModel):
    """Request body for POST /api/v1/users and POST /api/v1/login.

    The empty password is accepted (it hashes fine). Passwords over bcrypt's
    72-byte input limit are rejected here with a 422 rather than truncated.
    """

    email: str = Field(min_length=3, max_length=255)
    password: str = Field(max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip()
        if "@" not in value:
            raise ValueError("email must contain '@'")
        return value

    @field_validator("password")
    @classmethod
    def check_password_bytes(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class ChirpCreate(BaseModel):
    """Request body for POST /api/v1/chirps. Length is checked by chirps.censor."""

    body: str


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class SessionResponse(BaseModel):
    """Response for signup and login: account fields plus the token pair."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str
    created_at: datetime
    updated_at: datetime
    token: str
    refresh_token: str
    refresh_token_expires_at: datetime

    @classmethod
    def from_session(cls, session: SessionTokens) -> "SessionResponse":
        return cls(
            id=session.user.id,
            email=session.user.email,
            created_at=session.user.created_at,
            updated_at=session.user.updated_at,
            token=session.access_token,
            refresh_token=session.refresh_token.token,
            refresh_token_expires_at=session.refresh_token.expires_at,
        )


class AccessTokenResponse(BaseModel):
    """Response for POST /api/v1/refresh."""

    model_config = ConfigDict(frozen=True)

    token: str


class ChirpResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    body: str
    user_id: UUID
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_chirp(cls, chirp: Chirp) -> "ChirpResponse":
        return cls(
            id=chirp.id,
            body=chirp.body,
            user_id=chirp.user_id,
            created_at=chirp.created_at,
            updated_at=chirp.updated_at,
        )


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
