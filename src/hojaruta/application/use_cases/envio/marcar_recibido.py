"""Mark an envio as received by its destination unit."""

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime

from hojaruta.application.dto.envio_dto import RoutingResult
from hojaruta.domain.entities import Progreso
from hojaruta.domain.exceptions import NotFound
from hojaruta.domain.value_objects import EnvioEstado, HojaEstado, ProgresoAccion
from hojaruta.domain.value_objects.section_ledger import DEFAULT_CAPACITY

logger = logging.getLogger(__name__)

SECTION_NOT_FOUND = "SECTION_NOT_FOUND"


class MarcarRecibidoUseCase:
    """Receive an envio and stamp the matching ledger section."""

    def __init__(
        self,
        unit_of_work_factory: type,
        ledger_capacity: int = DEFAULT_CAPACITY,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._capacity = ledger_capacity
        self._today = today

    async def execute(self, user_id: int, envio_id: int) -> RoutingResult:
        async with self._uow_factory() as uow:
            envio = await uow.envios.get_by_id(envio_id, for_update=True)
            if not envio:
                raise NotFound("Envio", envio_id)

            now = datetime.now(UTC)
            envio.transition_to(EnvioEstado.RECIBIDO, now)

            unidad = None
            if envio.unidad_destino_id is not None:
                unidad = await uow.unidades.get_by_id(envio.unidad_destino_id)
            nombre_unidad = unidad.nombre if unidad else "Unidad"

            hoja = await uow.hojas.get_by_id(envio.hoja_id, for_update=True)
            if not hoja:
                raise NotFound("Hoja de ruta", envio.hoja_id)

            ledger = hoja.ledger(self._capacity)
            seccion = ledger.mark_received(nombre_unidad, self._today())
            advertencia = None
            if seccion is None:
                advertencia = SECTION_NOT_FOUND
                logger.warning(
                    "Hoja %s: no unreceived section for %s", hoja.id, nombre_unidad
                )
            else:
                hoja.store_ledger(ledger)

            envio = await uow.envios.update(envio)

            await uow.progreso.create(
                Progreso(
                    id=None,
                    hoja_ruta_id=hoja.id,
                    ubicacion_anterior=hoja.ubicacion_actual,
                    ubicacion_actual="Recibido en unidad",
                    accion=ProgresoAccion.RECIBIDO,
                    responsable_id=user_id,
                    notas="Marcado como recibido",
                    unidad_destino_id=envio.unidad_destino_id,
                    fecha_registro=now,
                )
            )

            hoja.estado = HojaEstado.RECIBIDA
            hoja.updated_at = now
            await uow.hojas.update(hoja)

        logger.info("Envio %s received by %s (seccion %s)", envio.id, nombre_unidad, seccion)
        return RoutingResult(envio=envio, seccion=seccion, advertencia=advertencia)
