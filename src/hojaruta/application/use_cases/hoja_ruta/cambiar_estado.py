"""Compliance state and location changes for a hoja de ruta."""

import logging
from datetime import UTC, datetime

from hojaruta.domain.entities import HojaRuta
from hojaruta.domain.exceptions import NotFound, ValidationError
from hojaruta.domain.value_objects import EstadoCumplimiento, HojaEstado

logger = logging.getLogger(__name__)


class CambiarEstadoUseCase:
    """Set estado_cumplimiento (and optionally estado) of a document."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        hoja_id: int,
        estado_cumplimiento: str | None,
        estado: str | None = None,
    ) -> HojaRuta:
        if not estado_cumplimiento:
            raise ValidationError(
                "Falta el campo estado_cumplimiento", field="estado_cumplimiento"
            )
        try:
            cumplimiento = EstadoCumplimiento(estado_cumplimiento)
        except ValueError:
            permitidos = ", ".join(e.value for e in EstadoCumplimiento)
            raise ValidationError(
                f'Estado invalido: "{estado_cumplimiento}". Estados permitidos: {permitidos}',
                field="estado_cumplimiento",
            ) from None
        nuevo_estado = None
        if estado:
            try:
                nuevo_estado = HojaEstado(estado)
            except ValueError:
                raise ValidationError(f"Estado invalido: {estado}", field="estado") from None

        async with self._uow_factory() as uow:
            hoja = await uow.hojas.get_by_id(hoja_id, for_update=True)
            if not hoja:
                raise NotFound("Hoja de ruta", hoja_id)

            now = datetime.now(UTC)
            hoja.estado_cumplimiento = cumplimiento
            if nuevo_estado is not None:
                hoja.estado = nuevo_estado
            if cumplimiento is EstadoCumplimiento.COMPLETADO:
                hoja.fecha_completado = now
            hoja.updated_at = now
            hoja = await uow.hojas.update(hoja)

        logger.info("Hoja %s compliance set to %s", hoja_id, cumplimiento)
        return hoja

    async def completar(self, hoja_id: int) -> HojaRuta:
        return await self.execute(hoja_id, EstadoCumplimiento.COMPLETADO.value)


class CambiarUbicacionUseCase:
    """Move a document's current location and responsible party by hand."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        hoja_id: int,
        ubicacion_actual: str | None,
        responsable_actual: str | None = None,
    ) -> HojaRuta:
        if not ubicacion_actual:
            raise ValidationError("ubicacion_actual es requerida", field="ubicacion_actual")

        async with self._uow_factory() as uow:
            hoja = await uow.hojas.get_by_id(hoja_id, for_update=True)
            if not hoja:
                raise NotFound("Hoja de ruta", hoja_id)
            hoja.ubicacion_actual = ubicacion_actual
            if responsable_actual is not None:
                hoja.responsable_actual = responsable_actual
            hoja.updated_at = datetime.now(UTC)
            hoja = await uow.hojas.update(hoja)

        logger.info("Hoja %s moved to %s", hoja_id, ubicacion_actual)
        return hoja


class EliminarHojaRutaUseCase:
    """Soft delete: the row stays, eliminado_en is set."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, hoja_id: int) -> None:
        async with self._uow_factory() as uow:
            if not await uow.hojas.soft_delete(hoja_id):
                raise NotFound("Hoja de ruta", hoja_id)
        logger.info("Hoja %s deleted", hoja_id)
