"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from hojaruta.application.ports.repositories import (
    ActividadRepository,
    EnvioRepository,
    HojaRutaRepository,
    NotificacionRepository,
    ProgresoRepository,
    UnidadRepository,
    UsuarioRepository,
)


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def hojas(self) -> HojaRutaRepository: ...

    @property
    def envios(self) -> EnvioRepository: ...

    @property
    def progreso(self) -> ProgresoRepository: ...

    @property
    def unidades(self) -> UnidadRepository: ...

    @property
    def usuarios(self) -> UsuarioRepository: ...

    @property
    def notificaciones(self) -> NotificacionRepository: ...

    @property
    def actividades(self) -> ActividadRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
