"""Notification use cases."""

import logging
from datetime import UTC, datetime

from hojaruta.application.dto.notificacion_dto import NotificacionInput
from hojaruta.domain.entities import Notificacion
from hojaruta.domain.exceptions import NotFound, PermissionDenied, ValidationError

logger = logging.getLogger(__name__)


class CrearNotificacionUseCase:
    """Create a notification for a user."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, data: NotificacionInput) -> Notificacion:
        tipo = (data.tipo or "").strip()
        mensaje = (data.mensaje or "").strip()
        if not tipo:
            raise ValidationError("tipo es requerido", field="tipo")
        if not mensaje:
            raise ValidationError("mensaje es requerido", field="mensaje")

        async with self._uow_factory() as uow:
            if not await uow.usuarios.get_by_id(data.usuario_id):
                raise NotFound("Usuario", data.usuario_id)
            if data.hoja_ruta_id is not None and not await uow.hojas.get_by_id(data.hoja_ruta_id):
                raise NotFound("Hoja de ruta", data.hoja_ruta_id)
            notificacion = await uow.notificaciones.create(
                Notificacion(
                    id=None,
                    usuario_id=data.usuario_id,
                    tipo=tipo,
                    mensaje=mensaje,
                    hoja_ruta_id=data.hoja_ruta_id,
                )
            )

        logger.info("Notification %s created for user %s", notificacion.id, data.usuario_id)
        return notificacion


class MarcarLeidaUseCase:
    """Mark one notification as read; only its owner or an admin may."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, user_id: int, notificacion_id: int, is_admin: bool = False
    ) -> Notificacion:
        async with self._uow_factory() as uow:
            notificacion = await uow.notificaciones.get_by_id(notificacion_id)
            if not notificacion:
                raise NotFound("Notificación", notificacion_id)
            if notificacion.usuario_id != user_id and not is_admin:
                raise PermissionDenied("No tienes permisos para realizar esta acción")
            notificacion.marcar_leida(datetime.now(UTC))
            notificacion = await uow.notificaciones.mark_read(notificacion)
        return notificacion


class MarcarTodasLeidasUseCase:
    """Mark every unread notification of a user as read."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, usuario_id: int) -> int:
        async with self._uow_factory() as uow:
            count = await uow.notificaciones.mark_all_read(usuario_id)
        logger.info("%d notifications marked read for user %s", count, usuario_id)
        return count
