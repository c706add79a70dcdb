"""Unit tests for auth/tokens.py -- JWT access token codec.

Covers:
- issue then validate returns the subject
- claims carry iss/sub/iat/exp with exp - iat == ttl
- wrong key -> InvalidSignature; tampered payload -> InvalidSignature
- past-expiry token -> TokenExpired (real-clock test and a pre-expired token)
- structural garbage, non-UUID subject, foreign issuer -> MalformedToken
- expired token signed with the wrong key reports InvalidSignature (signature first)
- refresh token generator produces 64 distinct hex characters
"""

import base64
import json
import time
import uuid
from datetime import timedelta

import pytest
from jose import jwt

from auth.errors import InvalidSignature, MalformedToken, TokenError, TokenExpired
from auth.tokens import ISSUER, create_access_token, generate_refresh_token, validate_access_token

SECRET = "f1d9cffa3564f3d1e75027ec2805382a"
OTHER_SECRET = "2945fesdff6-2470-4cc0-ab15-38608dfc74asdb8"
USER_ID = uuid.UUID("2945fef6-2470-4cc0-ab15-38608dfc74b8")


def _b64(data: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()


class TestCreateAccessToken:
    def test_returns_compact_jwt(self) -> None:
        token = create_access_token(USER_ID, SECRET, timedelta(seconds=1))
        assert token
        assert token.count(".") == 2

    def test_claims(self) -> None:
        token = create_access_token(USER_ID, SECRET, timedelta(hours=1))
        claims = jwt.get_unverified_claims(token)
        assert claims["sub"] == str(USER_ID)
        assert claims["iss"] == ISSUER
        assert claims["exp"] - claims["iat"] == 3600

    def test_header_is_hs256(self) -> None:
        token = create_access_token(USER_ID, SECRET, timedelta(hours=1))
        assert jwt.get_unverified_header(token)["alg"] == "HS256"


class TestValidateAccessToken:
    def test_round_trip(self) -> None:
        token = create_access_token(USER_ID, SECRET, timedelta(hours=24))
        assert validate_access_token(token, SECRET) == USER_ID

    def test_wrong_secret(self) -> None:
        token = create_access_token(USER_ID, SECRET, timedelta(hours=24))
        with pytest.raises(InvalidSignature):
            validate_access_token(token, OTHER_SECRET)

    def test_tampered_payload(self) -> None:
        """Swapping in another subject without re-signing must fail on the signature."""
        token = create_access_token(USER_ID, SECRET, timedelta(hours=1))
        header, _payload, signature = token.split(".")
        forged = _b64({"iss": ISSUER, "sub": str(uuid.uuid4()), "iat": 0, "exp": 9999999999})
        with pytest.raises(InvalidSignature):
            validate_access_token(f"{header}.{forged}.{signature}", SECRET)

    def test_alg_none_is_rejected(self) -> None:
        header = _b64({"alg": "none", "typ": "JWT"})
        payload = _b64({"iss": ISSUER, "sub": str(USER_ID), "iat": 0, "exp": 9999999999})
        with pytest.raises(InvalidSignature):
            validate_access_token(f"{header}.{payload}.", SECRET)

    def test_expires_after_ttl(self) -> None:
        token = create_access_token(USER_ID, SECRET, timedelta(seconds=1))
        time.sleep(2)
        with pytest.raises(TokenExpired):
            validate_access_token(token, SECRET)

    def test_pre_expired_token(self) -> None:
        """The same HS256 token shape an older build issued, long past its exp."""
        expired = jwt.encode(
            {"iss": ISSUER, "sub": str(USER_ID), "iat": 1753153221, "exp": 1753153222},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(TokenExpired):
            validate_access_token(expired, SECRET)

    def test_signature_checked_before_expiry(self) -> None:
        """An expired token under the wrong key is a signature failure, not an expiry."""
        token = create_access_token(USER_ID, SECRET, timedelta(seconds=-10))
        with pytest.raises(InvalidSignature):
            validate_access_token(token, OTHER_SECRET)

    @pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b", "!!!.@@@.###"])
    def test_structurally_malformed(self, garbage: str) -> None:
        with pytest.raises(MalformedToken):
            validate_access_token(garbage, SECRET)

    def test_subject_not_a_uuid(self) -> None:
        token = jwt.encode({"iss": ISSUER, "sub": "alice", "iat": 0, "exp": 9999999999}, SECRET, algorithm="HS256")
        with pytest.raises(MalformedToken):
            validate_access_token(token, SECRET)

    def test_missing_exp(self) -> None:
        token = jwt.encode({"iss": ISSUER, "sub": str(USER_ID)}, SECRET, algorithm="HS256")
        with pytest.raises(MalformedToken):
            validate_access_token(token, SECRET)

    @pytest.mark.parametrize("exp", [float("nan"), float("inf")])
    def test_non_finite_exp(self, exp: float) -> None:
        """NaN compares false against any clock reading and would never expire."""
        token = jwt.encode({"iss": ISSUER, "sub": str(USER_ID), "iat": 0, "exp": exp}, SECRET, algorithm="HS256")
        with pytest.raises(MalformedToken):
            validate_access_token(token, SECRET)

    def test_foreign_issuer(self) -> None:
        token = jwt.encode(
            {"iss": "someone-else", "sub": str(USER_ID), "iat": 0, "exp": 9999999999},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(MalformedToken):
            validate_access_token(token, SECRET)

    def test_error_kinds_share_a_base(self) -> None:
        for exc_type in (InvalidSignature, TokenExpired, MalformedToken):
            assert issubclass(exc_type, TokenError)

    def test_secret_not_in_error_message(self) -> None:
        token = create_access_token(USER_ID, SECRET, timedelta(hours=1))
        with pytest.raises(InvalidSignature) as exc_info:
            validate_access_token(token, OTHER_SECRET)
        assert SECRET not in str(exc_info.value)
        assert OTHER_SECRET not in str(exc_info.value)


class TestGenerateRefreshToken:
    def test_is_64_hex_chars(self) -> None:
        token = generate_refresh_token()
        assert len(token) == 64
        int(token, 16)

    def test_tokens_are_distinct(self) -> None:
        assert len({generate_refresh_token() for _ in range(100)}) == 100
