"""Unit tests for auth/bearer.py -- Authorization header parsing."""

import pytest

from auth.bearer import get_bearer_token
from auth.errors import MalformedScheme, MissingAuthorization

JWT_LIKE = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.eyJzdWIiOiIxMjM0NTY3ODkwIiwibmFtZSI6IkpvaG4gRG9lIiwiaWF0IjoxNTE2MjM5MDIyfQ"
    ".SflKxwRJSMeKKF2QT4fwpMeJf36POk6yJV_adQssw5c"
)


def test_extracts_token() -> None:
    assert get_bearer_token("Bearer abc123") == "abc123"


def test_extracts_jwt() -> None:
    assert get_bearer_token(f"Bearer {JWT_LIKE}") == JWT_LIKE


@pytest.mark.parametrize("value", ["", None])
def test_missing_header(value) -> None:
    with pytest.raises(MissingAuthorization):
        get_bearer_token(value)


@pytest.mark.parametrize(
    "value",
    [
        "abc123 extra",  # wrong scheme
        "Basic abc123",  # wrong scheme
        "bearer abc123",  # scheme is case-sensitive
        JWT_LIKE,  # token without scheme
        f"{JWT_LIKE} asd adsf adsf",  # too many fields
        "Bearer abc 123",  # whitespace inside the token
        "Bearer ",  # empty token
        "Bearer",  # no token at all
    ],
)
def test_malformed_scheme(value: str) -> None:
    with pytest.raises(MalformedScheme):
        get_bearer_token(value)
