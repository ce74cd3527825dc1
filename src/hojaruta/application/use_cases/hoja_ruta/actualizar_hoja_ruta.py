"""Update hoja de ruta use case."""

import logging
from datetime import UTC, datetime

from hojaruta.application.dto.hoja_ruta_dto import MAIN_FIELDS, HojaRutaUpdate
from hojaruta.application.use_cases.historial.registrar_actividad import (
    registrar_actividad,
    snapshot,
)
from hojaruta.domain.entities import HojaRuta
from hojaruta.domain.exceptions import NotFound, ValidationError
from hojaruta.domain.value_objects import ActividadTipo, HojaEstado, Prioridad, SectionLedger
from hojaruta.domain.value_objects.section_ledger import DEFAULT_CAPACITY

logger = logging.getLogger(__name__)


class ActualizarHojaRutaUseCase:
    """Apply a partial edit to the main columns and the form details."""

    def __init__(
        self, unit_of_work_factory: type, ledger_capacity: int = DEFAULT_CAPACITY
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._capacity = ledger_capacity

    async def execute(
        self, hoja_id: int, data: HojaRutaUpdate, user_id: int | None = None
    ) -> HojaRuta:
        if data.is_empty:
            raise ValidationError("No hay datos para actualizar")

        async with self._uow_factory() as uow:
            hoja = await uow.hojas.get_by_id(hoja_id, for_update=True)
            if not hoja:
                raise NotFound("Hoja de ruta", hoja_id)

            anteriores = {name: getattr(hoja, name, None) for name in data.campos}
            anteriores.update({k: hoja.detalles.get(k) for k in data.detalles})

            for name, value in data.campos.items():
                if name not in MAIN_FIELDS:
                    raise ValidationError(f"Campo desconocido: {name}", field=name)
                try:
                    if name == "prioridad":
                        value = Prioridad(value)
                    elif name == "estado":
                        value = HojaEstado(value)
                except ValueError:
                    raise ValidationError(f"Valor invalido para {name}", field=name) from None
                setattr(hoja, name, value)

            if data.detalles:
                # Incoming keys overwrite; legacy section keys fold into the array.
                merged = {**hoja.detalles, **data.detalles}
                hoja.detalles = SectionLedger.from_details(merged, self._capacity).to_details(
                    merged
                )

            hoja.updated_at = datetime.now(UTC)
            hoja = await uow.hojas.update(hoja)
            await registrar_actividad(
                uow,
                ActividadTipo.EDITADO,
                hoja,
                f"Hoja de ruta {hoja.numero_hr} editada",
                user_id,
                datos_anteriores=snapshot(anteriores),
                datos_nuevos=snapshot({**data.campos, **data.detalles}),
            )

        logger.info("Hoja %s updated (%s)", hoja_id, ", ".join(sorted(data.campos)) or "detalles")
        return hoja
