"""Notification entity."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Notificacion:
    """Message for one user, optionally about a hoja de ruta.

    ``numero_hr`` and ``referencia`` are read from the linked hoja and are
    never written back.
    """

    id: int | None
    usuario_id: int
    tipo: str
    mensaje: str
    hoja_ruta_id: int | None = None
    leida: bool = False
    leida_en: datetime | None = None
    created_at: datetime | None = None
    numero_hr: str | None = None
    referencia: str | None = None

    def marcar_leida(self, when: datetime) -> None:
        if not self.leida:
            self.leida = True
            self.leida_en = when
