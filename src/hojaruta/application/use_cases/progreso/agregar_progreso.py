"""Append manual progress entries."""

import logging
from datetime import UTC, datetime

from hojaruta.application.dto.progreso_dto import (
    BulkProgresoResult,
    ProgresoInput,
    ProgresoItemError,
)
from hojaruta.domain.entities import Progreso
from hojaruta.domain.exceptions import HojaRutaError, NotFound, ValidationError

logger = logging.getLogger(__name__)


class AgregarProgresoUseCase:
    """Record a location change for one or many hojas de ruta."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, user_id: int, data: ProgresoInput) -> Progreso:
        """Insert one entry and move the document's current location."""
        hoja_id = self._validate(data)
        async with self._uow_factory() as uow:
            hoja = await uow.hojas.get_by_id(hoja_id, for_update=True)
            if not hoja:
                raise NotFound("Hoja de ruta", hoja_id)

            now = datetime.now(UTC)
            progreso = await uow.progreso.create(
                Progreso(
                    id=None,
                    hoja_ruta_id=hoja_id,
                    ubicacion_anterior=data.ubicacion_anterior,
                    ubicacion_actual=data.ubicacion_actual,
                    responsable_id=user_id,
                    notas=data.notas,
                    fecha_registro=now,
                )
            )
            hoja.ubicacion_actual = data.ubicacion_actual
            hoja.updated_at = now
            await uow.hojas.update(hoja)

        logger.info("Progress %s recorded for hoja %s", progreso.id, hoja_id)
        return progreso

    async def execute_many(self, user_id: int, items: list[ProgresoInput]) -> BulkProgresoResult:
        """Insert each entry in its own transaction, collecting per-item failures."""
        if not items:
            raise ValidationError(
                "Se requiere un array de hojas con al menos un elemento", field="hojas"
            )

        result = BulkProgresoResult()
        for item in items:
            try:
                result.registrados.append(await self.execute(user_id, item))
            except HojaRutaError as e:
                result.errores.append(
                    ProgresoItemError(hoja_ruta_id=item.hoja_ruta_id, error=str(e))
                )

        logger.info(
            "Bulk progress: %d recorded, %d failed",
            len(result.registrados),
            len(result.errores),
        )
        return result

    @staticmethod
    def _validate(data: ProgresoInput) -> int:
        if data.hoja_ruta_id in (None, "") or not data.ubicacion_actual:
            raise ValidationError("hoja_ruta_id y ubicacion_actual son requeridos")
        try:
            hoja_id = int(data.hoja_ruta_id)
        except (TypeError, ValueError):
            raise ValidationError("hoja_ruta_id invalido", field="hoja_ruta_id") from None
        if hoja_id < 1:
            raise ValidationError("hoja_ruta_id invalido", field="hoja_ruta_id")
        return hoja_id
