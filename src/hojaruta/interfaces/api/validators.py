"""Request body parsing and field validation."""

import json
import re
from datetime import date, datetime
from typing import Any

import falcon.asgi

from hojaruta.application.dto.envio_dto import EnviarAUnidadInput, RedirigirInput
from hojaruta.application.dto.historial_dto import ActividadInput
from hojaruta.application.dto.hoja_ruta_dto import MAIN_FIELDS, HojaRutaInput, HojaRutaUpdate
from hojaruta.application.dto.notificacion_dto import NotificacionInput
from hojaruta.application.dto.progreso_dto import ProgresoInput
from hojaruta.domain.exceptions import PayloadTooLarge, ValidationError

PRIORIDADES = ("rutinario", "prioritario", "urgente", "otros")
ESTADOS_FORMULARIO = ("pendiente", "enviada", "en_proceso", "finalizada", "archivada")
TELEFONO_RE = re.compile(r"^[0-9+\-\s()]{0,20}$")

_MAX_LENGTH = {
    "numero_hr": 50,
    "referencia": 255,
    "procedencia": 255,
    "nombre_solicitante": 255,
    "observaciones": 1000,
    "tipo": 50,
    "mensaje": 1000,
    "descripcion": 1000,
    "destinatario": 255,
    "usuario_nombre": 255,
}
_HOJA_INPUT_FIELDS = MAIN_FIELDS + ("ubicacion_actual", "responsable_actual")


async def read_json(req: falcon.asgi.Request) -> dict[str, Any]:
    """Body as a JSON object; an empty body reads as ``{}``.

    The limit left in ``req.context`` by the payload middleware is checked
    against the bytes actually read, so chunked bodies are bounded as well.
    """
    limit = req.context.get("max_payload_bytes")
    raw = bytearray()
    async for chunk in req.stream:
        raw.extend(chunk)
        if limit is not None and len(raw) > limit:
            raise PayloadTooLarge(limit)
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        raise ValidationError("JSON inválido") from None
    if not isinstance(body, dict):
        raise ValidationError("Se esperaba un objeto JSON")
    return body


def parse_date(value: Any, field: str) -> date | None:
    """Accept ``YYYY-MM-DD`` or a full ISO-8601 timestamp."""
    if value in (None, ""):
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} inválida", field=field)
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError(f"{field} inválida", field=field) from None


def parse_id(value: Any, field: str, required: bool = True) -> int | None:
    """Positive integer id, from a JSON number or numeric string."""
    if value in (None, ""):
        if required:
            raise ValidationError(f"{field} es requerido", field=field)
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} inválido", field=field)
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} inválido", field=field) from None
    if parsed < 1:
        raise ValidationError(f"{field} inválido", field=field)
    return parsed


def _text(body: dict[str, Any], field: str) -> str | None:
    value = body.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    limit = _MAX_LENGTH.get(field)
    if limit and len(value) > limit:
        raise ValidationError(f"{field} muy largo (máximo {limit})", field=field)
    return value


def _numero_fojas(value: Any) -> int | None:
    # Blank or non-numeric input means "not given"; a number must be >= 1.
    if value in (None, ""):
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    if parsed < 1:
        raise ValidationError(
            "Número de fojas debe ser entero positivo", field="numero_fojas"
        )
    return parsed


def _check_common(body: dict[str, Any]) -> None:
    prioridad = body.get("prioridad")
    if prioridad is not None and prioridad not in PRIORIDADES:
        raise ValidationError("Prioridad inválida", field="prioridad")
    estado = body.get("estado")
    if estado is not None and estado not in ESTADOS_FORMULARIO:
        raise ValidationError("Estado inválido", field="estado")
    telefono = body.get("telefono_celular")
    if telefono is not None and not TELEFONO_RE.match(str(telefono).strip()):
        raise ValidationError("Teléfono inválido", field="telefono_celular")


def parse_hoja_create(body: dict[str, Any]) -> HojaRutaInput:
    _check_common(body)
    for field in ("numero_hr", "referencia", "procedencia"):
        if not _text(body, field):
            raise ValidationError(f"{field} es requerido", field=field)
    fecha_limite = parse_date(body.get("fecha_limite"), "fecha_limite")
    if fecha_limite is None:
        raise ValidationError("Fecha límite requerida", field="fecha_limite")

    return HojaRutaInput(
        numero_hr=_text(body, "numero_hr"),
        referencia=_text(body, "referencia"),
        procedencia=_text(body, "procedencia"),
        fecha_limite=fecha_limite,
        prioridad=body.get("prioridad"),
        estado=body.get("estado"),
        cite=_text(body, "cite"),
        numero_fojas=_numero_fojas(body.get("numero_fojas")),
        observaciones=_text(body, "observaciones"),
        nombre_solicitante=_text(body, "nombre_solicitante"),
        telefono_celular=_text(body, "telefono_celular"),
        ubicacion_actual=_text(body, "ubicacion_actual"),
        responsable_actual=_text(body, "responsable_actual"),
        detalles={
            k: v
            for k, v in body.items()
            if k not in _HOJA_INPUT_FIELDS and k != "usuario_creador_id"
        },
    )


def parse_hoja_update(body: dict[str, Any]) -> HojaRutaUpdate:
    _check_common(body)
    campos: dict[str, Any] = {}
    detalles: dict[str, Any] = {}
    for key, value in body.items():
        if key not in MAIN_FIELDS:
            detalles[key] = value
        elif key == "fecha_limite":
            campos[key] = parse_date(value, key)
        elif key == "numero_fojas":
            campos[key] = _numero_fojas(value)
        elif key in ("prioridad", "estado"):
            if value is None:
                raise ValidationError(f"{key} no puede ser nulo", field=key)
            campos[key] = value
        else:
            campos[key] = _text(body, key)
    for key in ("numero_hr", "referencia", "procedencia", "fecha_limite"):
        if key in campos and not campos[key]:
            raise ValidationError(f"{key} no puede estar vacío", field=key)
    return HojaRutaUpdate(campos=campos, detalles=detalles)


def _list(value: Any, field: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"{field} debe ser una lista", field=field)
    return value


def parse_enviar(body: dict[str, Any]) -> EnviarAUnidadInput:
    if body.get("hoja_id") in (None, "") or body.get("unidad_id") in (None, ""):
        raise ValidationError("hoja_id y unidad_id son requeridos")
    return EnviarAUnidadInput(
        hoja_id=parse_id(body.get("hoja_id"), "hoja_id"),
        unidad_id=parse_id(body.get("unidad_id"), "unidad_id"),
        observaciones=body.get("observaciones") or None,
        instrucciones=_list(body.get("instrucciones"), "instrucciones"),
        fecha_enviado=parse_date(body.get("fecha_enviado"), "fecha_enviado"),
        destino=body.get("destino") or None,
        destinos_checkboxes=_list(body.get("destinos_checkboxes"), "destinos_checkboxes"),
        auto_fill_seccion=body.get("auto_fill_seccion", True) is not False,
    )


def parse_redirigir(envio_id: int, body: dict[str, Any]) -> RedirigirInput:
    return RedirigirInput(
        envio_id=envio_id,
        unidad_destino_id=parse_id(body.get("unidad_destino_id"), "unidad_destino_id"),
        notas=body.get("notas") or None,
        checkboxes=_list(body.get("checkboxes"), "checkboxes"),
    )


def parse_progreso(body: dict[str, Any]) -> ProgresoInput:
    # No checks here; the recorder reports bad items per entry.
    return ProgresoInput(
        hoja_ruta_id=body.get("hoja_ruta_id"),
        ubicacion_actual=body.get("ubicacion_actual"),
        ubicacion_anterior=body.get("ubicacion_anterior"),
        notas=body.get("notas"),
    )


def parse_progreso_bulk(body: dict[str, Any]) -> list[ProgresoInput]:
    hojas = body.get("hojas")
    if not isinstance(hojas, list) or not hojas:
        raise ValidationError(
            "Se requiere un array de hojas con al menos un elemento", field="hojas"
        )
    return [parse_progreso(h if isinstance(h, dict) else {}) for h in hojas]


def parse_notificacion(body: dict[str, Any]) -> NotificacionInput:
    return NotificacionInput(
        usuario_id=parse_id(body.get("usuario_id"), "usuario_id"),
        tipo=_text(body, "tipo") or "",
        mensaje=_text(body, "mensaje") or "",
        hoja_ruta_id=parse_id(body.get("hoja_ruta_id"), "hoja_ruta_id", required=False),
    )


def parse_actividad(body: dict[str, Any]) -> ActividadInput:
    return ActividadInput(
        tipo=_text(body, "tipo"),
        descripcion=_text(body, "descripcion"),
        hoja_id=parse_id(body.get("hoja_id"), "hoja_id", required=False),
        numero_hr=_text(body, "numero_hr"),
        referencia=_text(body, "referencia"),
        procedencia=_text(body, "procedencia"),
        destinatario=_text(body, "destinatario"),
        usuario_nombre=_text(body, "usuario_nombre"),
    )
