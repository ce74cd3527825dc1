"""Progress DTOs."""

from dataclasses import dataclass, field
from typing import Any

from hojaruta.domain.entities import Progreso


@dataclass
class ProgresoInput:
    """Manual progress entry for one hoja de ruta."""

    hoja_ruta_id: Any
    ubicacion_actual: str | None
    ubicacion_anterior: str | None = None
    notas: str | None = None


@dataclass
class ProgresoItemError:
    """Why one item of a bulk insert was skipped."""

    hoja_ruta_id: Any
    error: str


@dataclass
class BulkProgresoResult:
    """Per-item outcome of a bulk insert."""

    registrados: list[Progreso] = field(default_factory=list)
    errores: list[ProgresoItemError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errores
