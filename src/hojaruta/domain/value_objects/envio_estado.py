"""Dispatch lifecycle states and their transition table."""

from enum import StrEnum


class EnvioEstado(StrEnum):
    """States an envio row can be in."""

    PENDIENTE = "pendiente"
    ENVIADO = "enviado"
    RECIBIDO = "recibido"
    RESPONDIDO = "respondido"
    REDIRIGIDO = "redirigido"

    def can_transition_to(self, target: "EnvioEstado") -> bool:
        """Check the transition table."""
        return target in TRANSITIONS.get(self, frozenset())

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS.get(self)


TRANSITIONS: dict[EnvioEstado, frozenset[EnvioEstado]] = {
    EnvioEstado.PENDIENTE: frozenset({EnvioEstado.ENVIADO}),
    EnvioEstado.ENVIADO: frozenset({EnvioEstado.RECIBIDO, EnvioEstado.REDIRIGIDO}),
    EnvioEstado.RECIBIDO: frozenset({EnvioEstado.RESPONDIDO}),
    EnvioEstado.RESPONDIDO: frozenset(),
    EnvioEstado.REDIRIGIDO: frozenset(),
}
