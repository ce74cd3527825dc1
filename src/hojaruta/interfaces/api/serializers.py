"""Entity to JSON-ready dict conversion."""

from datetime import date, datetime
from typing import Any

from hojaruta.domain.entities import (
    Actividad,
    Envio,
    HojaRuta,
    Notificacion,
    Progreso,
    Unidad,
    Usuario,
)


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value else None


def hoja_to_dict(hoja: HojaRuta, today: date, merge_detalles: bool = False) -> dict[str, Any]:
    """Serialize a hoja with its computed deadline fields.

    ``merge_detalles`` flattens the form details into the top level, main
    columns winning on key clashes, which is what the edit form expects.
    """
    data = {
        "id": hoja.id,
        "numero_hr": hoja.numero_hr,
        "referencia": hoja.referencia,
        "procedencia": hoja.procedencia,
        "prioridad": hoja.prioridad.value,
        "estado": hoja.estado.value,
        "estado_cumplimiento": hoja.estado_cumplimiento.value,
        "ubicacion_actual": hoja.ubicacion_actual,
        "responsable_actual": hoja.responsable_actual,
        "unidad_actual_id": hoja.unidad_actual_id,
        "detalles": hoja.detalles,
        "fecha_limite": _iso(hoja.fecha_limite),
        "dias_para_vencimiento": hoja.dias_para_vencimiento(today),
        "alerta_vencimiento": hoja.alerta_vencimiento(today),
        "cite": hoja.cite,
        "numero_fojas": hoja.numero_fojas,
        "observaciones": hoja.observaciones,
        "nombre_solicitante": hoja.nombre_solicitante,
        "telefono_celular": hoja.telefono_celular,
        "usuario_creador_id": hoja.usuario_creador_id,
        "fecha_ingreso": _iso(hoja.fecha_ingreso),
        "fecha_completado": _iso(hoja.fecha_completado),
        "created_at": _iso(hoja.created_at),
        "updated_at": _iso(hoja.updated_at),
    }
    if merge_detalles:
        return {**hoja.detalles, **data}
    return data


def envio_to_dict(envio: Envio) -> dict[str, Any]:
    return {
        "id": envio.id,
        "hoja_id": envio.hoja_id,
        "usuario_id": envio.usuario_id,
        "unidad_destino_id": envio.unidad_destino_id,
        "destinatario_nombre": envio.destinatario_nombre,
        "observaciones": envio.observaciones,
        "instrucciones": envio.instrucciones,
        "estado": envio.estado.value,
        "respuesta": envio.respuesta,
        "fecha_envio": _iso(envio.fecha_envio),
        "fecha_recepcion": _iso(envio.fecha_recepcion),
        "fecha_respuesta": _iso(envio.fecha_respuesta),
        "fecha_redireccion": _iso(envio.fecha_redireccion),
        "redirigido_a_unidad_id": envio.redirigido_a_unidad_id,
        "redirigido_por": envio.redirigido_por,
        "created_at": _iso(envio.created_at),
        "updated_at": _iso(envio.updated_at),
    }


def progreso_to_dict(progreso: Progreso) -> dict[str, Any]:
    return {
        "id": progreso.id,
        "hoja_ruta_id": progreso.hoja_ruta_id,
        "ubicacion_anterior": progreso.ubicacion_anterior,
        "ubicacion_actual": progreso.ubicacion_actual,
        "accion": progreso.accion.value if progreso.accion else None,
        "responsable_id": progreso.responsable_id,
        "notas": progreso.notas,
        "respuesta": progreso.respuesta,
        "unidad_origen_id": progreso.unidad_origen_id,
        "unidad_destino_id": progreso.unidad_destino_id,
        "fecha_registro": _iso(progreso.fecha_registro),
        "updated_at": _iso(progreso.updated_at),
    }


def unidad_to_dict(unidad: Unidad) -> dict[str, Any]:
    return {
        "id": unidad.id,
        "nombre": unidad.nombre,
        "descripcion": unidad.descripcion,
        "direccion": unidad.direccion,
        "telefono": unidad.telefono,
        "activo": unidad.activo,
        "created_at": _iso(unidad.created_at),
        "updated_at": _iso(unidad.updated_at),
    }


def usuario_to_dict(usuario: Usuario, unidad_nombre: str | None = None) -> dict[str, Any]:
    """Public profile; the password hash never leaves the server."""
    return {
        "id": usuario.id,
        "username": usuario.username,
        "nombre_completo": usuario.nombre_completo,
        "rol": usuario.rol,
        "email": usuario.email,
        "cargo": usuario.cargo,
        "unidad_id": usuario.unidad_id,
        "unidad_nombre": unidad_nombre,
        "activo": usuario.activo,
        "ultimo_login": _iso(usuario.ultimo_login),
    }


def notificacion_to_dict(notificacion: Notificacion) -> dict[str, Any]:
    return {
        "id": notificacion.id,
        "usuario_id": notificacion.usuario_id,
        "hoja_ruta_id": notificacion.hoja_ruta_id,
        "numero_hr": notificacion.numero_hr,
        "referencia": notificacion.referencia,
        "tipo": notificacion.tipo,
        "mensaje": notificacion.mensaje,
        "leida": notificacion.leida,
        "leida_en": _iso(notificacion.leida_en),
        "created_at": _iso(notificacion.created_at),
    }


def actividad_to_dict(actividad: Actividad) -> dict[str, Any]:
    return {
        "id": actividad.id,
        "tipo": actividad.tipo.value,
        "hoja_id": actividad.hoja_id,
        "numero_hr": actividad.numero_hr,
        "referencia": actividad.referencia,
        "procedencia": actividad.procedencia,
        "destinatario": actividad.destinatario,
        "descripcion": actividad.descripcion,
        "usuario_nombre": actividad.usuario_nombre,
        "fecha_actividad": _iso(actividad.fecha_actividad),
        "datos_anteriores": actividad.datos_anteriores,
        "datos_nuevos": actividad.datos_nuevos,
    }
