"""Notification repository port."""

from typing import Protocol

from hojaruta.domain.entities import Notificacion


class NotificacionRepository(Protocol):
    """Port for notification persistence."""

    async def get_by_id(self, notificacion_id: int) -> Notificacion | None: ...

    async def list_by_usuario(
        self, usuario_id: int, solo_no_leidas: bool = False
    ) -> list[Notificacion]: ...

    async def count_unread(self, usuario_id: int) -> int: ...

    async def has_unread(self, usuario_id: int, hoja_ruta_id: int, tipo: str) -> bool: ...

    async def create(self, notificacion: Notificacion) -> Notificacion: ...

    async def mark_read(self, notificacion: Notificacion) -> Notificacion: ...

    async def mark_all_read(self, usuario_id: int) -> int: ...
