"""Repository ports."""

from hojaruta.application.ports.repositories.actividad_repository import (
    ActividadRepository,
)
from hojaruta.application.ports.repositories.envio_repository import EnvioRepository
from hojaruta.application.ports.repositories.hoja_ruta_repository import (
    HojaRutaRepository,
)
from hojaruta.application.ports.repositories.notificacion_repository import (
    NotificacionRepository,
)
from hojaruta.application.ports.repositories.progreso_repository import (
    ProgresoRepository,
)
from hojaruta.application.ports.repositories.unidad_repository import UnidadRepository
from hojaruta.application.ports.repositories.usuario_repository import (
    UsuarioRepository,
)

__all__ = [
    "ActividadRepository",
    "EnvioRepository",
    "HojaRutaRepository",
    "NotificacionRepository",
    "ProgresoRepository",
    "UnidadRepository",
    "UsuarioRepository",
]
