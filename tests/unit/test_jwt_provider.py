"""Unit tests for JwtTokenProvider and WerkzeugPasswordHasher."""

import jwt
import pytest

from hojaruta.application.ports import TokenClaims
from hojaruta.domain.exceptions import (
    HojaRutaError,
    InvalidToken,
    InvalidTokenStructure,
    TokenExpired,
)
from hojaruta.infrastructure.auth.jwt_provider import JwtTokenProvider
from hojaruta.infrastructure.auth.password_hasher import WerkzeugPasswordHasher

SECRET = "access-secret-for-tests-0123456789abcdef"
REFRESH_SECRET = "refresh-secret-for-tests-0123456789abcdef"
CLAIMS = TokenClaims(user_id=7, username="ana", rol="secretaria")


@pytest.fixture
def provider() -> JwtTokenProvider:
    return JwtTokenProvider(SECRET, REFRESH_SECRET)


def test_access_token_round_trip(provider: JwtTokenProvider) -> None:
    claims = provider.decode_access(provider.issue_access(CLAIMS))
    assert (claims.user_id, claims.username, claims.rol) == (7, "ana", "secretaria")
    assert claims.exp is not None


def test_access_payload_uses_camel_case_user_id(provider: JwtTokenProvider) -> None:
    payload = jwt.decode(provider.issue_access(CLAIMS), SECRET, algorithms=["HS256"])
    assert payload["userId"] == 7
    assert payload["rol"] == "secretaria"


def test_expired_token_is_rejected() -> None:
    provider = JwtTokenProvider(SECRET, expiry_seconds=-10)
    with pytest.raises(TokenExpired):
        provider.decode_access(provider.issue_access(CLAIMS))


def test_token_signed_with_other_secret_is_invalid(provider: JwtTokenProvider) -> None:
    other = JwtTokenProvider("another-secret-for-tests-0123456789abcdef")
    with pytest.raises(InvalidToken):
        provider.decode_access(other.issue_access(CLAIMS))


def test_garbage_token_is_invalid(provider: JwtTokenProvider) -> None:
    with pytest.raises(InvalidToken):
        provider.decode_access("not-a-token")


def test_token_without_role_has_bad_structure(provider: JwtTokenProvider) -> None:
    token = jwt.encode({"userId": 7}, SECRET, algorithm="HS256")
    with pytest.raises(InvalidTokenStructure):
        provider.decode_access(token)


def test_refresh_token_round_trip(provider: JwtTokenProvider) -> None:
    claims = provider.decode_refresh(provider.issue_refresh(CLAIMS))
    assert claims.user_id == 7
    assert claims.rol == ""


def test_access_token_is_not_a_refresh_token(provider: JwtTokenProvider) -> None:
    token = jwt.encode({"userId": 7, "rol": "admin"}, REFRESH_SECRET, algorithm="HS256")
    with pytest.raises(InvalidTokenStructure):
        provider.decode_refresh(token)


def test_no_refresh_secret_means_no_refresh_tokens() -> None:
    provider = JwtTokenProvider(SECRET)
    assert provider.issue_refresh(CLAIMS) is None
    with pytest.raises(InvalidToken):
        provider.decode_refresh("anything")


def test_missing_secret_refuses_to_sign() -> None:
    provider = JwtTokenProvider("")
    with pytest.raises(HojaRutaError, match="JWT_SECRET"):
        provider.issue_access(CLAIMS)
    with pytest.raises(InvalidToken):
        provider.decode_access("anything")


def test_password_hasher_verifies() -> None:
    hasher = WerkzeugPasswordHasher()
    hashed = hasher.hash("s3creta")
    assert hashed != "s3creta"
    assert hasher.verify(hashed, "s3creta")
    assert not hasher.verify(hashed, "otra")
    assert not hasher.verify("", "s3creta")
