"""Hoja de ruta DTOs."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

# Columns of hojas_ruta an update may touch; any other key goes to detalles.
MAIN_FIELDS = (
    "numero_hr",
    "referencia",
    "procedencia",
    "fecha_limite",
    "cite",
    "numero_fojas",
    "prioridad",
    "estado",
    "observaciones",
    "nombre_solicitante",
    "telefono_celular",
)


@dataclass
class HojaRutaInput:
    """Validated form data for a new hoja de ruta."""

    numero_hr: str
    referencia: str
    procedencia: str
    fecha_limite: date
    prioridad: str | None = None
    estado: str | None = None
    cite: str | None = None
    numero_fojas: int | None = None
    observaciones: str | None = None
    nombre_solicitante: str | None = None
    telefono_celular: str | None = None
    ubicacion_actual: str | None = None
    responsable_actual: str | None = None
    detalles: dict[str, Any] = field(default_factory=dict)


@dataclass
class HojaRutaUpdate:
    """Partial update: ``campos`` holds main columns, ``detalles`` everything else."""

    campos: dict[str, Any] = field(default_factory=dict)
    detalles: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.campos and not self.detalles
