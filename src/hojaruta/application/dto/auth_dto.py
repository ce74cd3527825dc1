"""Auth DTOs."""

from dataclasses import dataclass

from hojaruta.domain.entities import Usuario


@dataclass
class LoginResult:
    """Tokens and profile returned by a successful login."""

    token: str
    refresh_token: str | None
    usuario: Usuario
    unidad_nombre: str | None = None
