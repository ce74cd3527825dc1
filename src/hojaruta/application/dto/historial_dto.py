"""Activity history DTOs."""

from dataclasses import dataclass


@dataclass
class ActividadInput:
    """Manually registered activity."""

    tipo: str | None
    descripcion: str | None
    hoja_id: int | None = None
    numero_hr: str | None = None
    referencia: str | None = None
    procedencia: str | None = None
    destinatario: str | None = None
    usuario_nombre: str | None = None
