"""
auth/passwords.py -- bcrypt password hashing and verification.

Using bcrypt directly rather than passlib[bcrypt]: passlib's wrap-bug
detection builds a password longer than 72 bytes, which bcrypt 4.x rejects.

The cost factor is a parameter, not a module constant. SessionService reads
it from Settings.bcrypt_rounds once at startup and passes it on every call,
so callers never choose it.

bcrypt's checkpw compares in constant time. Any failure -- wrong password,
truncated hash, a value that is not a bcrypt hash at all -- surfaces as the
same PasswordMismatch so the caller learns nothing about why.
"""

from __future__ import annotations

import bcrypt

from auth.errors import HashingFailure, PasswordMismatch

DEFAULT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of input. The API layer rejects
# longer passwords before they get here.
MAX_PASSWORD_BYTES = 72


def hash_password(plain: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a salted bcrypt hash of plain.

    The empty string is a valid (weak) password and hashes normally.
    Raises HashingFailure if the backend rejects the input or the cost.
    """
    try:
        return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")
    except (ValueError, TypeError) as exc:
        raise HashingFailure("password hashing failed") from exc


def check_password(plain: str, hashed: str) -> None:
    """Raise PasswordMismatch unless plain matches the bcrypt hash."""
    try:
        matches = bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError) as exc:
        raise PasswordMismatch("password does not match") from exc
    if not matches:
        raise PasswordMismatch("password does not match")
