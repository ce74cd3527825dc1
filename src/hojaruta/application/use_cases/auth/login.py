"""Login and token refresh use cases."""

import logging

from hojaruta.application.dto.auth_dto import LoginResult
from hojaruta.application.ports import PasswordHasher, TokenClaims, TokenProvider
from hojaruta.domain.exceptions import InvalidCredentials, InvalidToken, ValidationError

logger = logging.getLogger(__name__)


class LoginUseCase:
    """Check credentials and issue an access/refresh token pair.

    Unknown users, inactive users and wrong passwords all fail the same way
    so callers cannot tell which usernames exist.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        token_provider: TokenProvider,
        password_hasher: PasswordHasher,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._tokens = token_provider
        self._hasher = password_hasher

    async def execute(self, username: str | None, password: str | None) -> LoginResult:
        username = (username or "").strip()
        if len(username) < 2:
            raise ValidationError(
                "Usuario debe tener al menos 2 caracteres", field="username"
            )
        if not password:
            raise ValidationError("Contraseña es requerida", field="password")

        async with self._uow_factory() as uow:
            usuario = await uow.usuarios.get_by_username(username)
            if not usuario or not usuario.activo:
                logger.warning("Login rejected: unknown or inactive user %r", username)
                raise InvalidCredentials("Credenciales inválidas")
            if not self._hasher.verify(usuario.password_hash, password):
                logger.warning("Login rejected: bad password for user %s", usuario.id)
                raise InvalidCredentials("Credenciales inválidas")

            claims = TokenClaims(user_id=usuario.id, username=usuario.username, rol=usuario.rol)
            token = self._tokens.issue_access(claims)
            refresh = self._tokens.issue_refresh(claims)

            await uow.usuarios.touch_login(usuario.id)
            unidad_nombre = None
            if usuario.unidad_id is not None:
                unidad = await uow.unidades.get_by_id(usuario.unidad_id)
                unidad_nombre = unidad.nombre if unidad else None

        logger.info("User %s logged in", usuario.id)
        return LoginResult(
            token=token,
            refresh_token=refresh,
            usuario=usuario,
            unidad_nombre=unidad_nombre,
        )


class RefrescarTokenUseCase:
    """Exchange a refresh token for a new access token."""

    def __init__(self, unit_of_work_factory: type, token_provider: TokenProvider) -> None:
        self._uow_factory = unit_of_work_factory
        self._tokens = token_provider

    async def execute(self, refresh_token: str | None) -> str:
        if not refresh_token:
            raise ValidationError("Refresh token requerido", field="refreshToken")

        claims = self._tokens.decode_refresh(refresh_token)
        # The role is read again so a demoted user does not keep old rights.
        async with self._uow_factory() as uow:
            usuario = await uow.usuarios.get_by_id(claims.user_id)
        if not usuario or not usuario.activo:
            raise InvalidToken("Refresh token inválido")

        logger.info("Token refreshed for user %s", usuario.id)
        return self._tokens.issue_access(
            TokenClaims(user_id=usuario.id, username=usuario.username, rol=usuario.rol)
        )
