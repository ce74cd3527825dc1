"""Unit management use cases."""

import logging
from datetime import UTC, datetime

from hojaruta.domain.entities import Unidad
from hojaruta.domain.exceptions import Conflict, NotFound, ValidationError

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class CrearUnidadUseCase:
    """Create a unit; names are unique regardless of case."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        user_id: int | None,
        nombre: str | None,
        descripcion: str | None = None,
        direccion: str | None = None,
        telefono: str | None = None,
    ) -> Unidad:
        nombre = _clean(nombre)
        if not nombre:
            raise ValidationError("El nombre es requerido", field="nombre")

        async with self._uow_factory() as uow:
            if await uow.unidades.get_by_nombre(nombre):
                raise Conflict("La unidad ya existe")
            now = datetime.now(UTC)
            unidad = await uow.unidades.create(
                Unidad(
                    id=None,
                    nombre=nombre,
                    descripcion=_clean(descripcion),
                    direccion=_clean(direccion),
                    telefono=_clean(telefono),
                    creado_por=user_id,
                    created_at=now,
                    updated_at=now,
                )
            )

        logger.info("Unidad %s created: %s", unidad.id, unidad.nombre)
        return unidad


class ActualizarUnidadUseCase:
    """Partial update; omitted fields keep their value."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, unidad_id: int, cambios: dict) -> Unidad:
        async with self._uow_factory() as uow:
            unidad = await uow.unidades.get_by_id(unidad_id)
            if not unidad:
                raise NotFound("Unidad", unidad_id)

            nombre = _clean(cambios.get("nombre"))
            if nombre and nombre.lower() != unidad.nombre.lower():
                if await uow.unidades.get_by_nombre(nombre):
                    raise Conflict("La unidad ya existe")
            if nombre:
                unidad.nombre = nombre
            for name in ("descripcion", "direccion", "telefono"):
                if cambios.get(name) is not None:
                    setattr(unidad, name, _clean(cambios[name]))
            if cambios.get("activo") is not None:
                unidad.activo = bool(cambios["activo"])
            unidad.updated_at = datetime.now(UTC)
            unidad = await uow.unidades.update(unidad)

        logger.info("Unidad %s updated", unidad_id)
        return unidad


class EliminarUnidadUseCase:
    """Deactivate a unit; it stays referenced by past envios."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, unidad_id: int) -> None:
        async with self._uow_factory() as uow:
            if not await uow.unidades.deactivate(unidad_id):
                raise NotFound("Unidad", unidad_id)
        logger.info("Unidad %s deactivated", unidad_id)
