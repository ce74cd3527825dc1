"""Deadline notices for open hojas de ruta."""

import logging
from collections.abc import Callable
from datetime import date

from hojaruta.domain.entities import HojaRuta, Notificacion
from hojaruta.domain.value_objects import NotificacionTipo

logger = logging.getLogger(__name__)

DIAS_AVISO = 3


def _mensaje(hoja: HojaRuta, dias: int) -> str:
    if dias < 0:
        return f"La hoja de ruta {hoja.numero_hr} venció hace {-dias} día(s)"
    if dias == 0:
        return f"La hoja de ruta {hoja.numero_hr} vence hoy"
    return f"La hoja de ruta {hoja.numero_hr} vence en {dias} día(s)"


class GenerarAvisosVencimientoUseCase:
    """Notify the creator of every open hoja that is due soon or overdue.

    A hoja gets at most one unread notice of each kind per user, so running
    this repeatedly only adds notices for newly due documents.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        today: Callable[[], date] = date.today,
        dias_aviso: int = DIAS_AVISO,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._today = today
        self._dias_aviso = dias_aviso

    async def execute(self) -> list[Notificacion]:
        today = self._today()
        creadas: list[Notificacion] = []
        async with self._uow_factory() as uow:
            for hoja in await uow.hojas.list(incluir_completadas=False):
                dias = hoja.dias_para_vencimiento(today)
                if dias is None or dias > self._dias_aviso or hoja.usuario_creador_id is None:
                    continue
                tipo = NotificacionTipo.VENCIDA if dias < 0 else NotificacionTipo.VENCIMIENTO_PROXIMO
                if await uow.notificaciones.has_unread(hoja.usuario_creador_id, hoja.id, tipo):
                    continue
                creadas.append(
                    await uow.notificaciones.create(
                        Notificacion(
                            id=None,
                            usuario_id=hoja.usuario_creador_id,
                            tipo=tipo.value,
                            mensaje=_mensaje(hoja, dias),
                            hoja_ruta_id=hoja.id,
                            numero_hr=hoja.numero_hr,
                            referencia=hoja.referencia,
                        )
                    )
                )

        logger.info("%d deadline notices generated", len(creadas))
        return creadas
