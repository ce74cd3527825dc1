"""Administrative edits of progress entries."""

import logging
from datetime import UTC, datetime

from hojaruta.domain.entities import Progreso
from hojaruta.domain.exceptions import NotFound, ValidationError

logger = logging.getLogger(__name__)


class ActualizarProgresoUseCase:
    """Correct the locations or notes of an existing entry."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        progreso_id: int,
        ubicacion_anterior: str | None = None,
        ubicacion_actual: str | None = None,
        notas: str | None = None,
    ) -> Progreso:
        if not ubicacion_anterior and not ubicacion_actual and not notas:
            raise ValidationError("Se debe proporcionar al menos un campo para actualizar")

        async with self._uow_factory() as uow:
            progreso = await uow.progreso.get_by_id(progreso_id)
            if not progreso:
                raise NotFound("Progreso", progreso_id)

            now = datetime.now(UTC)
            if ubicacion_anterior:
                progreso.ubicacion_anterior = ubicacion_anterior
            if ubicacion_actual:
                progreso.ubicacion_actual = ubicacion_actual
            if notas:
                progreso.notas = notas
            progreso.updated_at = now
            progreso = await uow.progreso.update(progreso)

            # A corrected location also corrects where the document is.
            if ubicacion_actual:
                hoja = await uow.hojas.get_by_id(progreso.hoja_ruta_id, for_update=True)
                if hoja:
                    hoja.ubicacion_actual = ubicacion_actual
                    hoja.updated_at = now
                    await uow.hojas.update(hoja)

        logger.info("Progress %s corrected", progreso_id)
        return progreso


class EliminarProgresoUseCase:
    """Remove a progress entry for good."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, progreso_id: int) -> None:
        async with self._uow_factory() as uow:
            if not await uow.progreso.delete(progreso_id):
                raise NotFound("Progreso", progreso_id)
        logger.info("Progress %s deleted", progreso_id)
