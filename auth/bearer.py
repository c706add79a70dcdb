"""
auth/bearer.py -- Authorization header parsing.

The header must be exactly "Bearer <token>": two fields separated by a single
space, the first literally "Bearer". A token with embedded whitespace yields
more than two fields and is rejected along with any other scheme.
"""

from __future__ import annotations

from auth.errors import MalformedScheme, MissingAuthorization

_SCHEME = "Bearer"


def get_bearer_token(header_value: str | None) -> str:
    """Return the raw token from an Authorization header value.

    Raises MissingAuthorization if the header is absent or empty, and
    MalformedScheme for anything that is not "Bearer <token>".
    """
    if not header_value:
        raise MissingAuthorization("authorization header is missing")
    parts = header_value.split(" ")
    if len(parts) != 2 or parts[0] != _SCHEME or not parts[1]:
        raise MalformedScheme("authorization header is not a bearer token")
    return parts[1]
