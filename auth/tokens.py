"""
auth/tokens.py -- JWT access tokens and opaque refresh token generation.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry only sub (user UUID), iss, iat and
       exp. They are stateless: validity is signature + expiry, nothing is
       stored and nothing is revoked.

  Signature first: validate_access_token() never reads a claim before the
       signature has verified. jose's jwt.decode() folds signature, structure
       and claim failures into one JWTError family, so validation goes through
       jose.jws directly and interprets the verified payload itself. That keeps
       the three failure kinds (InvalidSignature, TokenExpired, MalformedToken)
       separate for callers and tests.

  Refresh tokens: secrets.token_hex(32) gives 256 bits of entropy as 64 hex
       characters. They are opaque -- all state lives in the store.

  Signing key: passed in by the caller (SessionService holds it, read from
       Settings at startup). It never appears in an exception message.

Layer rule: no imports from api/ or chirps/.
"""

from __future__ import annotations

import json
import math
import secrets
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import jws, jwt
from jose.exceptions import JWSError

from auth.errors import InvalidSignature, MalformedToken, TokenExpired

ISSUER = "chirpy"

_ALGORITHM = "HS256"


# ---------------------------------------------------------------------------
# Access tokens
# ---------------------------------------------------------------------------


def create_access_token(user_id: UUID, secret: str, expires_in: timedelta) -> str:
    """Encode a signed JWT for user_id that expires expires_in from now.

    iat and exp are derived from the same instant, so exp - iat is exactly
    expires_in (to the second).
    """
    issued_at = int(datetime.now(timezone.utc).timestamp())
    claims = {
        "iss": ISSUER,
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + int(expires_in.total_seconds()),
    }
    return jwt.encode(claims, secret, algorithm=_ALGORITHM)


def validate_access_token(token: str, secret: str) -> UUID:
    """Verify a JWT and return the user UUID from its subject claim.

    Raises:
        MalformedToken:   not a JWT, payload is not a claims object, or the
                          claims are missing/unusable (exp, iss, sub).
        InvalidSignature: signature does not verify with secret, or the header
                          names an algorithm other than HS256.
        TokenExpired:     signature is valid but now >= exp.
    """
    try:
        jws.get_unverified_header(token)
    except JWSError as exc:
        raise MalformedToken("token is not a well-formed JWT") from exc

    try:
        payload = jws.verify(token, secret, algorithms=[_ALGORITHM])
    except JWSError as exc:
        raise InvalidSignature("token signature is invalid") from exc

    # Everything below runs on verified bytes only.
    try:
        claims = json.loads(payload)
    except ValueError as exc:
        raise MalformedToken("token payload is not JSON") from exc
    if not isinstance(claims, dict):
        raise MalformedToken("token payload is not a claims object")

    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)) or not math.isfinite(exp):
        raise MalformedToken("token has no usable exp claim")
    if datetime.now(timezone.utc).timestamp() >= exp:
        raise TokenExpired("token has expired")

    if claims.get("iss") != ISSUER:
        raise MalformedToken("token issuer is not recognised")

    subject = claims.get("sub")
    if not isinstance(subject, str):
        raise MalformedToken("token has no subject")
    try:
        return UUID(subject)
    except ValueError as exc:
        raise MalformedToken("token subject is not a user id") from exc


# ---------------------------------------------------------------------------
# Refresh tokens
# ---------------------------------------------------------------------------


def generate_refresh_token() -> str:
    """Return a new opaque refresh token: 32 random bytes as 64 hex chars."""
    return secrets.token_hex(32)
