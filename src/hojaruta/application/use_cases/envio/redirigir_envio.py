"""Redirect an envio to a different unit."""

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime

from hojaruta.application.dto.envio_dto import RedirigirInput, RoutingResult
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


class RedirigirEnvioUseCase:
    """Close the current envio as redirected and open a new one for the target unit.

    The original row is never reused: it ends in ``redirigido`` and a fresh
    ``enviado`` row points at the new destination. The ledger gets a section
    that remembers the unit the document was redirected from, and the progress
    log gets one ``redirigido`` entry plus one ``enviado`` entry for the new hop.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        ledger_capacity: int = DEFAULT_CAPACITY,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._capacity = ledger_capacity
        self._today = today

    async def execute(self, user_id: int, data: RedirigirInput) -> RoutingResult:
        async with self._uow_factory() as uow:
            envio = await uow.envios.get_by_id(data.envio_id, for_update=True)
            if not envio:
                raise NotFound("Envio", data.envio_id)

            destino = await uow.unidades.get_by_id(data.unidad_destino_id)
            if not destino or not destino.activo:
                raise NotFound("Unidad", data.unidad_destino_id)

            origen_id = envio.unidad_destino_id
            origen = await uow.unidades.get_by_id(origen_id) if origen_id is not None else None
            nombre_origen = origen.nombre if origen else "Unidad"

            now = datetime.now(UTC)
            envio.transition_to(EnvioEstado.REDIRIGIDO, now)
            envio.redirigido_a_unidad_id = destino.id
            envio.redirigido_por = user_id

            hoja = await uow.hojas.get_by_id(envio.hoja_id, for_update=True)
            if not hoja:
                raise NotFound("Hoja de ruta", envio.hoja_id)

            ledger = hoja.ledger(self._capacity)
            seccion = None
            advertencia = None
            try:
                seccion = ledger.record_redirect(
                    destino=destino.nombre,
                    origen=nombre_origen,
                    fecha=self._today(),
                    notas=data.notas,
                    destinos=data.checkboxes,
                )
            except LedgerFull as e:
                advertencia = e.code
                logger.warning("Hoja %s: ledger full, redirect not recorded", hoja.id)
            else:
                hoja.store_ledger(ledger)

            envio = await uow.envios.update(envio)

            nuevo = Envio(
                id=None,
                hoja_id=hoja.id,
                usuario_id=user_id,
                unidad_destino_id=destino.id,
                destinatario_nombre=destino.nombre,
                observaciones=data.notas or f"Redirigido desde {nombre_origen}",
                instrucciones=list(data.checkboxes),
                created_at=now,
            )
            nuevo.transition_to(EnvioEstado.ENVIADO, now)
            nuevo = await uow.envios.create(nuevo)

            ubicacion_anterior = hoja.ubicacion_actual
            await uow.progreso.create(
                Progreso(
                    id=None,
                    hoja_ruta_id=hoja.id,
                    ubicacion_anterior=ubicacion_anterior,
                    ubicacion_actual=f"Redirigido a {destino.nombre}",
                    accion=ProgresoAccion.REDIRIGIDO,
                    responsable_id=user_id,
                    notas=data.notas or "",
                    unidad_origen_id=origen_id,
                    unidad_destino_id=destino.id,
                    fecha_registro=now,
                )
            )
            await uow.progreso.create(
                Progreso(
                    id=None,
                    hoja_ruta_id=hoja.id,
                    ubicacion_anterior=nombre_origen,
                    ubicacion_actual=f"Enviado a {destino.nombre}",
                    accion=ProgresoAccion.ENVIADO,
                    responsable_id=user_id,
                    notas=f"Redirigido desde {nombre_origen}",
                    unidad_origen_id=origen_id,
                    unidad_destino_id=destino.id,
                    fecha_registro=now,
                )
            )

            hoja.estado = HojaEstado.ENVIADA
            hoja.unidad_actual_id = destino.id
            hoja.ubicacion_actual = destino.nombre
            hoja.updated_at = now
            await uow.hojas.update(hoja)
            await registrar_actividad(
                uow,
                ActividadTipo.ENVIADO,
                hoja,
                f"Hoja de ruta {hoja.numero_hr} redirigida de {nombre_origen} a {destino.nombre}",
                user_id,
                destinatario=destino.nombre,
            )

        logger.info(
            "Envio %s redirected from %s to %s (new envio %s)",
            envio.id,
            nombre_origen,
            destino.nombre,
            nuevo.id,
        )
        return RoutingResult(
            envio=envio, seccion=seccion, advertencia=advertencia, nuevo_envio=nuevo
        )
