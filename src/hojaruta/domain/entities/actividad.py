"""Activity history entry."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from hojaruta.domain.value_objects import ActividadTipo


@dataclass
class Actividad:
    """Something done to a hoja de ruta, denormalized for the history page."""

    id: int | None
    tipo: ActividadTipo
    descripcion: str
    hoja_id: int | None = None
    numero_hr: str | None = None
    referencia: str | None = None
    procedencia: str | None = None
    destinatario: str | None = None
    usuario_nombre: str | None = None
    fecha_actividad: datetime | None = None
    datos_anteriores: dict[str, Any] | None = None
    datos_nuevos: dict[str, Any] | None = None
