"""Section ledger kept inside a hoja de ruta's ``detalles``.

Each section is one hop in the physical routing history of a document: the
date it left, where it went, the instructions that travelled with it and,
later, when it was received or answered. Sections are addressed by a 1-based
index and there are at most ``capacity`` of them.

Older rows store sections twice: as ``secciones_adicionales`` entries and as
flattened ``fecha_enviado_N`` / ``destino_N`` / ``instrucciones_N`` /
``fecha_recepcion_N`` / ``destinos_N`` keys. ``SectionLedger.from_details``
folds both into one list; ``to_details`` writes back only the list.
"""

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from hojaruta.domain.exceptions import LedgerFull

DEFAULT_CAPACITY = 10
RESPONSE_MARKER = "RESPUESTA de"
SECTIONS_KEY = "secciones_adicionales"

_LEGACY_KEY = re.compile(
    r"^(fecha_enviado|fecha_recepcion|destinos|destino|instrucciones_adicionales|instrucciones)_(\d+)$"
)
_LEGACY_FIELD = {
    "fecha_enviado": "fecha_enviado",
    "fecha_recepcion": "fecha_recepcion",
    "destino": "destino",
    "destinos": "destinos",
    "instrucciones": "instrucciones_adicionales",
    "instrucciones_adicionales": "instrucciones_adicionales",
}
_KNOWN_FIELDS = {
    "seccion",
    "fecha_enviado",
    "destino",
    "destinos",
    "instrucciones_adicionales",
    "fecha_recepcion",
    "respuesta",
    "redirigido_desde",
}


def _as_index(value: Any) -> int | None:
    try:
        index = int(value)
    except (TypeError, ValueError):
        return None
    return index if index >= 1 else None


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == []


def _as_text(value: Any) -> str | None:
    # Section fields are free text; stored numbers and the like are stringified.
    if _is_empty(value):
        return None
    return value if isinstance(value, str) else str(value)


@dataclass
class Seccion:
    """One slot of the ledger."""

    seccion: int
    fecha_enviado: str | None = None
    destino: str | None = None
    destinos: list[Any] = field(default_factory=list)
    instrucciones_adicionales: str = ""
    fecha_recepcion: str | None = None
    respuesta: str | None = None
    redirigido_desde: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, index: int, raw: dict[str, Any]) -> "Seccion":
        destinos = raw.get("destinos")
        return cls(
            seccion=index,
            fecha_enviado=_as_text(raw.get("fecha_enviado")),
            destino=_as_text(raw.get("destino")),
            destinos=list(destinos) if isinstance(destinos, list) else [],
            instrucciones_adicionales=_as_text(raw.get("instrucciones_adicionales")) or "",
            fecha_recepcion=_as_text(raw.get("fecha_recepcion")),
            respuesta=_as_text(raw.get("respuesta")),
            redirigido_desde=_as_text(raw.get("redirigido_desde")),
            extra={k: v for k, v in raw.items() if k not in _KNOWN_FIELDS},
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.extra)
        out.update(
            seccion=self.seccion,
            fecha_enviado=self.fecha_enviado,
            destino=self.destino,
            destinos=list(self.destinos),
            instrucciones_adicionales=self.instrucciones_adicionales,
        )
        if self.fecha_recepcion:
            out["fecha_recepcion"] = self.fecha_recepcion
        if self.respuesta:
            out["respuesta"] = self.respuesta
        if self.redirigido_desde:
            out["redirigido_desde"] = self.redirigido_desde
        return out

    @property
    def is_blank(self) -> bool:
        return not (
            self.fecha_enviado
            or self.destino
            or self.destinos
            or self.instrucciones_adicionales
            or self.fecha_recepcion
            or self.respuesta
        )

    @property
    def is_sealed(self) -> bool:
        """Received or answered sections are never reused."""
        return bool(self.fecha_recepcion or self.respuesta)

    def accepts_send(self) -> bool:
        return not self.is_sealed and not self.fecha_enviado and not self.destino

    def accepts_reply(self) -> bool:
        return not self.is_sealed and not self.fecha_enviado

    def absorb(self, other: "Seccion") -> None:
        """Fill missing values from a duplicate entry for the same index."""
        for name in (
            "fecha_enviado",
            "destino",
            "instrucciones_adicionales",
            "fecha_recepcion",
            "respuesta",
            "redirigido_desde",
        ):
            if not getattr(self, name) and getattr(other, name):
                setattr(self, name, getattr(other, name))
        if not self.destinos and other.destinos:
            self.destinos = list(other.destinos)
        for k, v in other.extra.items():
            self.extra.setdefault(k, v)

    def fill_legacy(self, name: str, value: Any) -> None:
        attr = _LEGACY_FIELD[name]
        if attr == "destinos":
            if not self.destinos and isinstance(value, list):
                self.destinos = list(value)
            return
        if not getattr(self, attr):
            setattr(self, attr, str(value))


class SectionLedger:
    """Ordered, fixed-capacity list of routing sections."""

    def __init__(
        self, secciones: list[Seccion] | None = None, capacity: int = DEFAULT_CAPACITY
    ) -> None:
        if capacity < 1:
            raise ValueError("Ledger capacity must be positive")
        self.capacity = capacity
        self._secciones = sorted(secciones or [], key=lambda s: s.seccion)

    @classmethod
    def from_details(
        cls, detalles: dict[str, Any] | None, capacity: int = DEFAULT_CAPACITY
    ) -> "SectionLedger":
        """Build the ledger from a ``detalles`` object in either representation."""
        detalles = detalles or {}
        by_index: dict[int, Seccion] = {}

        raw_list = detalles.get(SECTIONS_KEY)
        for raw in raw_list if isinstance(raw_list, list) else []:
            if not isinstance(raw, dict):
                continue
            index = _as_index(raw.get("seccion"))
            if index is None:
                continue
            seccion = Seccion.from_dict(index, raw)
            if seccion.is_blank:
                continue
            if index in by_index:
                by_index[index].absorb(seccion)
            else:
                by_index[index] = seccion

        for key, value in detalles.items():
            match = _LEGACY_KEY.match(key)
            if not match or _is_empty(value):
                continue
            index = _as_index(match.group(2))
            if index is None:
                continue
            by_index.setdefault(index, Seccion(seccion=index)).fill_legacy(
                match.group(1), value
            )

        return cls(list(by_index.values()), capacity)

    def to_details(self, detalles: dict[str, Any] | None = None) -> dict[str, Any]:
        """Return ``detalles`` with the ledger written back as a list only."""
        out = {
            k: v for k, v in (detalles or {}).items() if not _LEGACY_KEY.match(k)
        }
        out[SECTIONS_KEY] = [s.to_dict() for s in self._secciones]
        return out

    def __iter__(self) -> Iterator[Seccion]:
        return iter(self._secciones)

    def __len__(self) -> int:
        return len(self._secciones)

    def get(self, index: int) -> Seccion | None:
        for seccion in self._secciones:
            if seccion.seccion == index:
                return seccion
        return None

    def _first_free(self, accepts: Callable[[Seccion], bool]) -> Seccion:
        for index in range(1, self.capacity + 1):
            seccion = self.get(index)
            if seccion is None:
                seccion = Seccion(seccion=index)
                self._secciones.append(seccion)
                self._secciones.sort(key=lambda s: s.seccion)
                return seccion
            if accepts(seccion):
                return seccion
        raise LedgerFull(self.capacity)

    def record_send(
        self,
        fecha: date,
        destino: str,
        instrucciones: str | None = None,
        destinos: list[Any] | None = None,
    ) -> int:
        """Fill the first section with neither send date nor destination."""
        seccion = self._first_free(Seccion.accepts_send)
        seccion.fecha_enviado = fecha.isoformat()
        seccion.destino = destino
        seccion.destinos = list(destinos or [])
        if instrucciones:
            seccion.instrucciones_adicionales = instrucciones
        return seccion.seccion

    def mark_received(self, unidad_nombre: str, fecha: date) -> int | None:
        """Stamp the latest unreceived section addressed to the unit.

        Returns the section index, or None when nothing matches.
        """
        for seccion in reversed(self._secciones):
            if (
                seccion.destino
                and unidad_nombre in seccion.destino
                and not seccion.fecha_recepcion
                and not seccion.respuesta
            ):
                seccion.fecha_recepcion = fecha.isoformat()
                return seccion.seccion
        return None

    def record_response(self, unidad_nombre: str, respuesta: str, fecha: date) -> int:
        """Write a unit's answer into the first section without a send date."""
        seccion = self._first_free(Seccion.accepts_reply)
        seccion.fecha_enviado = fecha.isoformat()
        seccion.destino = f"{RESPONSE_MARKER} {unidad_nombre}"
        seccion.instrucciones_adicionales = respuesta
        seccion.respuesta = respuesta
        return seccion.seccion

    def record_redirect(
        self,
        destino: str,
        origen: str,
        fecha: date,
        notas: str | None = None,
        destinos: list[Any] | None = None,
    ) -> int:
        """Write a redirection hop, keeping the unit it was redirected from."""
        seccion = self._first_free(Seccion.accepts_reply)
        seccion.fecha_enviado = fecha.isoformat()
        seccion.destino = destino
        seccion.destinos = list(destinos or [])
        if notas:
            seccion.instrucciones_adicionales = notas
        seccion.redirigido_desde = origen
        return seccion.seccion
