"""Action tags recorded in the progress ledger."""

from enum import StrEnum


class ProgresoAccion(StrEnum):
    """Routing action that produced a progress entry."""

    ENVIADO = "enviado"
    RECIBIDO = "recibido"
    RESPONDIDO = "respondido"
    REDIRIGIDO = "redirigido"
