"""Record a unit's response to an envio."""

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime

from hojaruta.application.dto.envio_dto import RoutingResult
from hojaruta.domain.entities import Progreso
from hojaruta.domain.exceptions import LedgerFull, NotFound, ValidationError
from hojaruta.domain.value_objects import EnvioEstado, HojaEstado, ProgresoAccion
from hojaruta.domain.value_objects.section_ledger import DEFAULT_CAPACITY

logger = logging.getLogger(__name__)


class ResponderEnvioUseCase:
    """Answer a received envio and write the answer into the next free section."""

    def __init__(
        self,
        unit_of_work_factory: type,
        ledger_capacity: int = DEFAULT_CAPACITY,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._capacity = ledger_capacity
        self._today = today

    async def execute(self, user_id: int, envio_id: int, respuesta: str | None) -> RoutingResult:
        texto = (respuesta or "").strip()
        if not texto:
            raise ValidationError("La respuesta es requerida", field="respuesta")

        async with self._uow_factory() as uow:
            envio = await uow.envios.get_by_id(envio_id, for_update=True)
            if not envio:
                raise NotFound("Envio", envio_id)

            now = datetime.now(UTC)
            envio.transition_to(EnvioEstado.RESPONDIDO, now)
            envio.respuesta = texto

            unidad = None
            if envio.unidad_destino_id is not None:
                unidad = await uow.unidades.get_by_id(envio.unidad_destino_id)
            nombre_unidad = unidad.nombre if unidad else "Unidad"

            hoja = await uow.hojas.get_by_id(envio.hoja_id, for_update=True)
            if not hoja:
                raise NotFound("Hoja de ruta", envio.hoja_id)

            ledger = hoja.ledger(self._capacity)
            seccion = None
            advertencia = None
            try:
                seccion = ledger.record_response(nombre_unidad, texto, self._today())
            except LedgerFull as e:
                advertencia = e.code
                logger.warning("Hoja %s: ledger full, response not recorded", hoja.id)
            else:
                hoja.store_ledger(ledger)

            envio = await uow.envios.update(envio)

            await uow.progreso.create(
                Progreso(
                    id=None,
                    hoja_ruta_id=hoja.id,
                    ubicacion_anterior=hoja.ubicacion_actual,
                    ubicacion_actual="Respuesta enviada",
                    accion=ProgresoAccion.RESPONDIDO,
                    responsable_id=user_id,
                    notas="Respuesta de unidad",
                    respuesta=texto,
                    unidad_destino_id=envio.unidad_destino_id,
                    fecha_registro=now,
                )
            )

            hoja.estado = HojaEstado.RESPONDIDA
            hoja.updated_at = now
            await uow.hojas.update(hoja)

        logger.info("Envio %s answered by %s (seccion %s)", envio.id, nombre_unidad, seccion)
        return RoutingResult(envio=envio, seccion=seccion, advertencia=advertencia)
