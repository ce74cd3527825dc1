"""Domain entities."""

from hojaruta.domain.entities.actividad import Actividad
from hojaruta.domain.entities.envio import Envio
from hojaruta.domain.entities.hoja_ruta import HojaRuta
from hojaruta.domain.entities.notificacion import Notificacion
from hojaruta.domain.entities.progreso import Progreso
from hojaruta.domain.entities.unidad import Unidad
from hojaruta.domain.entities.usuario import Usuario

__all__ = [
    "Actividad",
    "Envio",
    "HojaRuta",
    "Notificacion",
    "Progreso",
    "Unidad",
    "Usuario",
]
