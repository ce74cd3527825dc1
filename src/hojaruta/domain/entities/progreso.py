"""Progress ledger entry."""

from dataclasses import dataclass
from datetime import datetime

from hojaruta.domain.value_objects import ProgresoAccion


@dataclass
class Progreso:
    """One location/action transition of a hoja de ruta."""

    id: int | None
    hoja_ruta_id: int
    ubicacion_actual: str
    ubicacion_anterior: str | None = None
    accion: ProgresoAccion | None = None
    responsable_id: int | None = None
    notas: str | None = None
    respuesta: str | None = None
    unidad_origen_id: int | None = None
    unidad_destino_id: int | None = None
    fecha_registro: datetime | None = None
    updated_at: datetime | None = None
