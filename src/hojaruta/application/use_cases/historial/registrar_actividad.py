"""Activity history writes."""

import logging
from datetime import date
from enum import Enum
from typing import Any

from hojaruta.application.dto.historial_dto import ActividadInput
from hojaruta.domain.entities import Actividad, HojaRuta
from hojaruta.domain.exceptions import NotFound, ValidationError
from hojaruta.domain.value_objects import ActividadTipo

logger = logging.getLogger(__name__)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value


def snapshot(values: dict[str, Any]) -> dict[str, Any]:
    """JSON-ready copy of changed fields for ``datos_anteriores`` / ``datos_nuevos``."""
    return {k: _plain(v) for k, v in values.items()}


async def registrar_actividad(
    uow,
    tipo: ActividadTipo,
    hoja: HojaRuta,
    descripcion: str,
    user_id: int | None = None,
    destinatario: str | None = None,
    datos_anteriores: dict[str, Any] | None = None,
    datos_nuevos: dict[str, Any] | None = None,
) -> Actividad:
    """Append a history entry for ``hoja`` inside the caller's unit of work."""
    usuario = await uow.usuarios.get_by_id(user_id) if user_id is not None else None
    return await uow.actividades.create(
        Actividad(
            id=None,
            tipo=tipo,
            descripcion=descripcion,
            hoja_id=hoja.id,
            numero_hr=hoja.numero_hr,
            referencia=hoja.referencia,
            procedencia=hoja.procedencia,
            destinatario=destinatario,
            usuario_nombre=usuario.nombre_completo if usuario else None,
            datos_anteriores=datos_anteriores,
            datos_nuevos=datos_nuevos,
        )
    )


class RegistrarActividadUseCase:
    """Register an activity by hand, for events the system did not record."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, data: ActividadInput) -> Actividad:
        try:
            tipo = ActividadTipo(data.tipo)
        except ValueError:
            raise ValidationError("Tipo de actividad inválido", field="tipo") from None
        descripcion = (data.descripcion or "").strip()
        if not descripcion:
            raise ValidationError("Descripción es obligatoria", field="descripcion")

        async with self._uow_factory() as uow:
            if data.hoja_id is not None and not await uow.hojas.get_by_id(data.hoja_id):
                raise NotFound("Hoja de ruta", data.hoja_id)
            actividad = await uow.actividades.create(
                Actividad(
                    id=None,
                    tipo=tipo,
                    descripcion=descripcion,
                    hoja_id=data.hoja_id,
                    numero_hr=data.numero_hr,
                    referencia=data.referencia,
                    procedencia=data.procedencia,
                    destinatario=data.destinatario,
                    usuario_nombre=data.usuario_nombre,
                )
            )

        logger.info("Activity %s registered (%s)", actividad.id, tipo)
        return actividad
