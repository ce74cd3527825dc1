"""Envio (dispatch) entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from hojaruta.domain.exceptions import InvalidTransition
from hojaruta.domain.value_objects import EnvioEstado


@dataclass
class Envio:
    """One directed transmission of a hoja de ruta to a unit."""

    id: int | None
    hoja_id: int
    usuario_id: int | None
    unidad_destino_id: int | None
    destinatario_nombre: str
    observaciones: str | None = None
    instrucciones: list[Any] = field(default_factory=list)
    estado: EnvioEstado = EnvioEstado.PENDIENTE
    respuesta: str | None = None
    fecha_envio: datetime | None = None
    fecha_recepcion: datetime | None = None
    fecha_respuesta: datetime | None = None
    fecha_redireccion: datetime | None = None
    redirigido_a_unidad_id: int | None = None
    redirigido_por: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    eliminado_en: datetime | None = None

    def transition_to(self, target: EnvioEstado, at: datetime) -> None:
        """Move to ``target`` and stamp the matching timestamp."""
        if not self.estado.can_transition_to(target):
            raise InvalidTransition(self.estado.value, target.value)
        self.estado = target
        self.updated_at = at
        if target is EnvioEstado.ENVIADO:
            self.fecha_envio = at
        elif target is EnvioEstado.RECIBIDO:
            self.fecha_recepcion = at
        elif target is EnvioEstado.RESPONDIDO:
            self.fecha_respuesta = at
        elif target is EnvioEstado.REDIRIGIDO:
            self.fecha_redireccion = at
