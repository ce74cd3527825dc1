"""Envio DTOs."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from hojaruta.domain.entities import Envio


@dataclass
class EnviarAUnidadInput:
    """Input for sending a hoja de ruta to a unit."""

    hoja_id: int
    unidad_id: int
    observaciones: str | None = None
    instrucciones: list[Any] | None = None
    fecha_enviado: date | None = None
    destino: str | None = None
    destinos_checkboxes: list[Any] = field(default_factory=list)
    auto_fill_seccion: bool = True


@dataclass
class RedirigirInput:
    """Input for redirecting an envio to another unit."""

    envio_id: int
    unidad_destino_id: int
    notas: str | None = None
    checkboxes: list[Any] = field(default_factory=list)


@dataclass
class RoutingResult:
    """Outcome of a routing action.

    ``seccion`` is the ledger slot that was written, or None when the ledger
    was left untouched; ``advertencia`` then carries the reason code.
    """

    envio: Envio
    seccion: int | None = None
    advertencia: str | None = None
    nuevo_envio: Envio | None = None
