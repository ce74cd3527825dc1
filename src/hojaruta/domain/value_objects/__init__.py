"""Domain value objects."""

from hojaruta.domain.value_objects.actividad_tipo import ActividadTipo
from hojaruta.domain.value_objects.envio_estado import EnvioEstado
from hojaruta.domain.value_objects.hoja_estado import (
    EstadoCumplimiento,
    HojaEstado,
    Prioridad,
)
from hojaruta.domain.value_objects.notificacion_tipo import NotificacionTipo
from hojaruta.domain.value_objects.permission_action import PermissionAction
from hojaruta.domain.value_objects.progreso_accion import ProgresoAccion
from hojaruta.domain.value_objects.rol import Rol
from hojaruta.domain.value_objects.section_ledger import Seccion, SectionLedger

__all__ = [
    "ActividadTipo",
    "EnvioEstado",
    "EstadoCumplimiento",
    "HojaEstado",
    "NotificacionTipo",
    "PermissionAction",
    "Prioridad",
    "ProgresoAccion",
    "Rol",
    "Seccion",
    "SectionLedger",
]
