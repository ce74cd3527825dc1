"""Create hoja de ruta use case."""

import logging
from datetime import UTC, datetime

from hojaruta.application.dto.hoja_ruta_dto import HojaRutaInput
from hojaruta.application.use_cases.historial.registrar_actividad import registrar_actividad
from hojaruta.domain.entities import HojaRuta
from hojaruta.domain.exceptions import ValidationError
from hojaruta.domain.value_objects import (
    ActividadTipo,
    EstadoCumplimiento,
    HojaEstado,
    Prioridad,
    SectionLedger,
)
from hojaruta.domain.value_objects.section_ledger import DEFAULT_CAPACITY

logger = logging.getLogger(__name__)

DEFAULT_UBICACION = "SEDEGES - Sede Central"
DEFAULT_RESPONSABLE = "Sistema SEDEGES"


class CrearHojaRutaUseCase:
    """Register a new document and normalize the sections it arrives with."""

    def __init__(
        self, unit_of_work_factory: type, ledger_capacity: int = DEFAULT_CAPACITY
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._capacity = ledger_capacity

    async def execute(self, user_id: int | None, data: HojaRutaInput) -> HojaRuta:
        for name in ("numero_hr", "referencia", "procedencia", "fecha_limite"):
            if not getattr(data, name):
                raise ValidationError(f"{name} es requerido", field=name)

        ledger = SectionLedger.from_details(data.detalles, self._capacity)
        now = datetime.now(UTC)
        hoja = HojaRuta(
            id=None,
            numero_hr=data.numero_hr,
            referencia=data.referencia,
            procedencia=data.procedencia,
            prioridad=Prioridad(data.prioridad or Prioridad.RUTINARIO),
            estado=HojaEstado(data.estado or HojaEstado.PENDIENTE),
            estado_cumplimiento=EstadoCumplimiento.from_estado(data.estado),
            ubicacion_actual=data.ubicacion_actual or DEFAULT_UBICACION,
            responsable_actual=data.responsable_actual or DEFAULT_RESPONSABLE,
            detalles=ledger.to_details(data.detalles),
            fecha_limite=data.fecha_limite,
            cite=data.cite,
            numero_fojas=data.numero_fojas,
            observaciones=data.observaciones,
            nombre_solicitante=data.nombre_solicitante,
            telefono_celular=data.telefono_celular,
            usuario_creador_id=user_id,
            fecha_ingreso=now,
            created_at=now,
            updated_at=now,
        )

        async with self._uow_factory() as uow:
            hoja = await uow.hojas.create(hoja)
            await registrar_actividad(
                uow, ActividadTipo.ANADIDO, hoja, f"Hoja de ruta {hoja.numero_hr} registrada", user_id
            )

        logger.info("Hoja %s created as %s", hoja.id, hoja.numero_hr)
        return hoja
