"""Create user use case."""

import logging
from datetime import UTC, datetime

from hojaruta.application.ports import PasswordHasher
from hojaruta.domain.entities import Usuario
from hojaruta.domain.exceptions import Conflict, NotFound, ValidationError
from hojaruta.domain.value_objects import Rol

logger = logging.getLogger(__name__)


class CrearUsuarioUseCase:
    """Create an account; usernames are stored lower-cased and must be unique."""

    def __init__(self, unit_of_work_factory: type, password_hasher: PasswordHasher) -> None:
        self._uow_factory = unit_of_work_factory
        self._hasher = password_hasher

    async def execute(
        self,
        username: str | None,
        password: str | None,
        nombre_completo: str | None,
        unidad_id: int | None = None,
        rol: str | None = None,
    ) -> Usuario:
        username = (username or "").strip().lower()
        nombre_completo = (nombre_completo or "").strip()
        if not username or not password or not nombre_completo:
            raise ValidationError("Username, password y nombre_completo son requeridos")
        try:
            rol = Rol(rol or Rol.USUARIO).value
        except ValueError:
            raise ValidationError(f"Rol invalido: {rol}", field="rol") from None

        async with self._uow_factory() as uow:
            if await uow.usuarios.get_by_username(username):
                raise Conflict("El usuario ya existe")
            if unidad_id is not None and not await uow.unidades.get_by_id(unidad_id):
                raise NotFound("Unidad", unidad_id)
            now = datetime.now(UTC)
            usuario = await uow.usuarios.create(
                Usuario(
                    id=None,
                    username=username,
                    password_hash=self._hasher.hash(password),
                    nombre_completo=nombre_completo,
                    rol=rol,
                    unidad_id=unidad_id,
                    created_at=now,
                    updated_at=now,
                )
            )

        logger.info("Usuario %s created with rol %s", usuario.id, usuario.rol)
        return usuario
