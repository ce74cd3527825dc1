"""HS256 session tokens via PyJWT."""

import logging
from datetime import UTC, datetime, timedelta

import jwt

from hojaruta.application.ports import TokenClaims
from hojaruta.domain.exceptions import (
    HojaRutaError,
    InvalidToken,
    InvalidTokenStructure,
    TokenExpired,
)

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
REFRESH_TYPE = "refresh"


class JwtTokenProvider:
    """Signs and verifies access and refresh tokens.

    Access tokens carry ``userId``, ``username`` and ``rol``. Refresh tokens are
    signed with a separate secret and carry ``type: refresh`` instead of the
    role. Without a refresh secret no refresh tokens are issued.
    """

    def __init__(
        self,
        secret: str,
        refresh_secret: str = "",
        expiry_seconds: int = 3600,
        refresh_expiry_seconds: int = 7 * 24 * 3600,
    ) -> None:
        if not secret:
            logger.critical("JWT secret is not configured; tokens cannot be issued")
        self._secret = secret
        self._refresh_secret = refresh_secret
        self._expiry = timedelta(seconds=expiry_seconds)
        self._refresh_expiry = timedelta(seconds=refresh_expiry_seconds)

    def issue_access(self, claims: TokenClaims) -> str:
        if not self._secret:
            raise HojaRutaError("JWT_SECRET no configurado")
        payload = {
            "userId": claims.user_id,
            "username": claims.username,
            "rol": claims.rol,
            "exp": datetime.now(UTC) + self._expiry,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def issue_refresh(self, claims: TokenClaims) -> str | None:
        if not self._refresh_secret:
            return None
        payload = {
            "userId": claims.user_id,
            "username": claims.username,
            "type": REFRESH_TYPE,
            "exp": datetime.now(UTC) + self._refresh_expiry,
        }
        return jwt.encode(payload, self._refresh_secret, algorithm=ALGORITHM)

    def decode_access(self, token: str) -> TokenClaims:
        payload = self._decode(token, self._secret)
        if not payload.get("userId") or not payload.get("rol"):
            raise InvalidTokenStructure("Token con estructura inválida")
        return TokenClaims(
            user_id=payload["userId"],
            username=payload.get("username"),
            rol=payload["rol"],
            exp=payload.get("exp"),
        )

    def decode_refresh(self, token: str) -> TokenClaims:
        payload = self._decode(token, self._refresh_secret)
        if payload.get("type") != REFRESH_TYPE or not payload.get("userId"):
            raise InvalidTokenStructure("Refresh token con estructura inválida")
        return TokenClaims(
            user_id=payload["userId"],
            username=payload.get("username"),
            rol="",
            exp=payload.get("exp"),
        )

    @staticmethod
    def _decode(token: str, secret: str) -> dict:
        if not secret:
            raise InvalidToken("Token inválido")
        try:
            return jwt.decode(token, secret, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise TokenExpired("Token expirado") from None
        except jwt.InvalidTokenError:
            raise InvalidToken("Token inválido") from None
