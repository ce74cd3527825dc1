"""Hoja de ruta entity."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from hojaruta.domain.value_objects import (
    EstadoCumplimiento,
    HojaEstado,
    Prioridad,
    SectionLedger,
)


@dataclass
class HojaRuta:
    """Tracked document - aggregate root for envios and progress entries."""

    id: int | None
    numero_hr: str
    referencia: str
    procedencia: str
    prioridad: Prioridad = Prioridad.RUTINARIO
    estado: HojaEstado = HojaEstado.PENDIENTE
    estado_cumplimiento: EstadoCumplimiento = EstadoCumplimiento.PENDIENTE
    ubicacion_actual: str | None = None
    responsable_actual: str | None = None
    unidad_actual_id: int | None = None
    detalles: dict[str, Any] = field(default_factory=dict)
    fecha_limite: date | None = None
    cite: str | None = None
    numero_fojas: int | None = None
    observaciones: str | None = None
    nombre_solicitante: str | None = None
    telefono_celular: str | None = None
    usuario_creador_id: int | None = None
    fecha_ingreso: datetime | None = None
    fecha_completado: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    eliminado_en: datetime | None = None

    def ledger(self, capacity: int) -> SectionLedger:
        return SectionLedger.from_details(self.detalles, capacity)

    def store_ledger(self, ledger: SectionLedger) -> None:
        """Replace ``detalles`` with the ledger written back in."""
        self.detalles = ledger.to_details(self.detalles)

    def dias_para_vencimiento(self, today: date) -> int | None:
        if self.fecha_limite is None:
            return None
        return (self.fecha_limite - today).days

    def alerta_vencimiento(self, today: date) -> str:
        dias = self.dias_para_vencimiento(today)
        if dias is None:
            return "Normal"
        if dias < 0:
            return "Vencida"
        if dias <= 3:
            return "Crítica"
        if dias <= 7:
            return "Próxima a vencer"
        return "Normal"
