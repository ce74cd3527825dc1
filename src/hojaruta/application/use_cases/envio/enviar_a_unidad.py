"""Send a hoja de ruta to a unit."""

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime

from hojaruta.application.dto.envio_dto import EnviarAUnidadInput, RoutingResult
from hojaruta.application.use_cases.historial.registrar_actividad import registrar_actividad
from hojaruta.domain.entities import Envio, Progreso
from hojaruta.domain.exceptions import LedgerFull, NotFound
from hojaruta.domain.value_objects import (
    ActividadTipo,
    EnvioEstado,
    HojaEstado,
    ProgresoAccion,
)
from hojaruta.domain.value_objects.section_ledger import DEFAULT_CAPACITY

logger = logging.getLogger(__name__)


class EnviarAUnidadUseCase:
    """Create an envio, move the document, fill the next ledger section, log progress."""

    def __init__(
        self,
        unit_of_work_factory: type,
        ledger_capacity: int = DEFAULT_CAPACITY,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._capacity = ledger_capacity
        self._today = today

    async def execute(self, user_id: int, data: EnviarAUnidadInput) -> RoutingResult:
        async with self._uow_factory() as uow:
            unidad = await uow.unidades.get_by_id(data.unidad_id)
            if not unidad or not unidad.activo:
                raise NotFound("Unidad", data.unidad_id)

            hoja = await uow.hojas.get_by_id(data.hoja_id, for_update=True)
            if not hoja:
                raise NotFound("Hoja de ruta", data.hoja_id)

            seccion = None
            advertencia = None
            if data.auto_fill_seccion:
                ledger = hoja.ledger(self._capacity)
                try:
                    seccion = ledger.record_send(
                        fecha=data.fecha_enviado or self._today(),
                        destino=data.destino or unidad.nombre,
                        instrucciones=data.observaciones,
                        destinos=data.destinos_checkboxes,
                    )
                except LedgerFull as e:
                    advertencia = e.code
                    logger.warning("Hoja %s: ledger full, send not recorded", hoja.id)
                else:
                    hoja.store_ledger(ledger)

            now = datetime.now(UTC)
            envio = Envio(
                id=None,
                hoja_id=hoja.id,
                usuario_id=user_id,
                unidad_destino_id=unidad.id,
                destinatario_nombre=unidad.nombre,
                observaciones=data.observaciones,
                instrucciones=list(data.instrucciones or []),
                created_at=now,
            )
            envio.transition_to(EnvioEstado.ENVIADO, now)
            envio = await uow.envios.create(envio)

            ubicacion_anterior = hoja.ubicacion_actual
            hoja.estado = HojaEstado.ENVIADA
            hoja.unidad_actual_id = unidad.id
            hoja.ubicacion_actual = unidad.nombre
            hoja.updated_at = now
            await uow.hojas.update(hoja)

            await uow.progreso.create(
                Progreso(
                    id=None,
                    hoja_ruta_id=hoja.id,
                    ubicacion_anterior=ubicacion_anterior,
                    ubicacion_actual=f"Enviado a {unidad.nombre}",
                    accion=ProgresoAccion.ENVIADO,
                    responsable_id=user_id,
                    notas=data.observaciones or "Envio inicial",
                    unidad_destino_id=unidad.id,
                    fecha_registro=now,
                )
            )
            await registrar_actividad(
                uow,
                ActividadTipo.ENVIADO,
                hoja,
                f"Hoja de ruta {hoja.numero_hr} enviada a {unidad.nombre}",
                user_id,
                destinatario=unidad.nombre,
            )

        logger.info(
            "Hoja %s sent to unidad %s (envio %s, seccion %s)",
            hoja.id,
            unidad.id,
            envio.id,
            seccion,
        )
        return RoutingResult(envio=envio, seccion=seccion, advertencia=advertencia)
