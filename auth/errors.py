"""
auth/errors.py -- Exception taxonomy for the credential and session subsystem.

Every failure inside auth/ is raised as one of these types so callers (and
tests) can tell the causes apart. The HTTP layer collapses them to a generic
401 -- the distinction is for logs and tests, never for response bodies.

Hierarchy:
  AuthError
    HashingFailure            bcrypt backend error, fatal to the request
    PasswordMismatch          wrong password or unreadable stored hash
    TokenError                access token validation
      InvalidSignature
      TokenExpired
      MalformedToken
    BearerError               Authorization header parsing
      MissingAuthorization
      MalformedScheme
    RefreshTokenError         refresh token lookup
      RefreshTokenNotFound
      RefreshTokenExpired
      RefreshTokenRevoked
    InvalidCredentials        login failed (unknown email or wrong password)
    Unauthorized              bearer-protected use case failed
    EmailConflict             signup with an email that is already registered
    PersistenceFailure        storage error while creating an account

Messages are fixed strings. Never format the signing key, a password, or a
full token into an exception message.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for every error raised by auth/."""


class HashingFailure(AuthError):
    """The password hashing backend failed."""


class PasswordMismatch(AuthError):
    """The password does not match the stored hash."""


class TokenError(AuthError):
    """Access token rejected."""


class InvalidSignature(TokenError):
    """Signature does not verify against the signing key."""


class TokenExpired(TokenError):
    """Signature is valid but the token is past its exp claim."""


class MalformedToken(TokenError):
    """Token is not a well-formed JWT or carries unusable claims."""


class BearerError(AuthError):
    """Authorization header could not be parsed."""


class MissingAuthorization(BearerError):
    """Authorization header absent or empty."""


class MalformedScheme(BearerError):
    """Authorization header is not of the form 'Bearer <token>'."""


class RefreshTokenError(AuthError):
    """Refresh token cannot be used."""


class RefreshTokenNotFound(RefreshTokenError):
    """No refresh token with that value was ever issued."""


class RefreshTokenExpired(RefreshTokenError):
    """Refresh token is past its expiry."""


class RefreshTokenRevoked(RefreshTokenError):
    """Refresh token was explicitly revoked."""


class InvalidCredentials(AuthError):
    """Email/password pair rejected. Deliberately silent about which half was wrong."""


class Unauthorized(AuthError):
    """A bearer-protected operation was refused."""


class EmailConflict(AuthError):
    """An account with this email already exists."""


class PersistenceFailure(AuthError):
    """The user store failed while handling a request."""
