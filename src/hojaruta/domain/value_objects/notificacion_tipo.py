"""Notification kinds raised by the system."""

from enum import StrEnum


class NotificacionTipo(StrEnum):
    """Automatic notice kinds; manual notifications may use any tag."""

    VENCIMIENTO_PROXIMO = "vencimiento_proximo"
    VENCIDA = "vencida"
