"""Unidad entity."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Unidad:
    """Organizational unit a document can be routed to."""

    id: int | None
    nombre: str
    descripcion: str | None = None
    direccion: str | None = None
    telefono: str | None = None
    activo: bool = True
    creado_por: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
