"""Usuario repository port."""

from typing import Protocol

from hojaruta.domain.entities import Usuario


class UsuarioRepository(Protocol):
    """Port for user persistence."""

    async def get_by_id(self, usuario_id: int) -> Usuario | None: ...

    async def get_by_username(self, username: str) -> Usuario | None: ...

    async def list(self, *, unidad_id: int | None = None) -> list[Usuario]: ...

    async def create(self, usuario: Usuario) -> Usuario: ...

    async def touch_login(self, usuario_id: int) -> None: ...
