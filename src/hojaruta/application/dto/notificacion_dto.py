"""Notification DTOs."""

from dataclasses import dataclass


@dataclass
class NotificacionInput:
    """Manually created notification."""

    usuario_id: int
    tipo: str
    mensaje: str
    hoja_ruta_id: int | None = None
