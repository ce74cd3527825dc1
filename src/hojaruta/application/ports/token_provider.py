"""Token provider port - session token issue and validation."""

from dataclasses import dataclass
from typing import Protocol


@dataclass
class TokenClaims:
    """Identity carried by a session token."""

    user_id: int
    username: str | None
    rol: str
    exp: int | None = None


class TokenProvider(Protocol):
    """Port for signing and verifying access and refresh tokens."""

    def issue_access(self, claims: TokenClaims) -> str: ...

    def issue_refresh(self, claims: TokenClaims) -> str | None: ...

    def decode_access(self, token: str) -> TokenClaims: ...

    def decode_refresh(self, token: str) -> TokenClaims: ...


class PasswordHasher(Protocol):
    """Port for hashing and verifying passwords."""

    def hash(self, password: str) -> str: ...

    def verify(self, password_hash: str, password: str) -> bool: ...
