"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg_pool import AsyncConnectionPool

from hojaruta.infrastructure.persistence.postgres.actividad_repository import (
    PostgresActividadRepository,
)
from hojaruta.infrastructure.persistence.postgres.envio_repository import (
    PostgresEnvioRepository,
)
from hojaruta.infrastructure.persistence.postgres.hoja_ruta_repository import (
    PostgresHojaRutaRepository,
)
from hojaruta.infrastructure.persistence.postgres.notificacion_repository import (
    PostgresNotificacionRepository,
)
from hojaruta.infrastructure.persistence.postgres.progreso_repository import (
    PostgresProgresoRepository,
)
from hojaruta.infrastructure.persistence.postgres.unidad_repository import (
    PostgresUnidadRepository,
)
from hojaruta.infrastructure.persistence.postgres.usuario_repository import (
    PostgresUsuarioRepository,
)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn: object | None = None
        self._conn_cm: object | None = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self._hojas = PostgresHojaRutaRepository(self._conn)
        self._envios = PostgresEnvioRepository(self._conn)
        self._progreso = PostgresProgresoRepository(self._conn)
        self._unidades = PostgresUnidadRepository(self._conn)
        self._usuarios = PostgresUsuarioRepository(self._conn)
        self._notificaciones = PostgresNotificacionRepository(self._conn)
        self._actividades = PostgresActividadRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def hojas(self) -> PostgresHojaRutaRepository:
        return self._hojas

    @property
    def envios(self) -> PostgresEnvioRepository:
        return self._envios

    @property
    def progreso(self) -> PostgresProgresoRepository:
        return self._progreso

    @property
    def unidades(self) -> PostgresUnidadRepository:
        return self._unidades

    @property
    def usuarios(self) -> PostgresUsuarioRepository:
        return self._usuarios

    @property
    def notificaciones(self) -> PostgresNotificacionRepository:
        return self._notificaciones

    @property
    def actividades(self) -> PostgresActividadRepository:
        return self._actividades

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool) -> object:
    """Create UnitOfWork factory (async context manager)."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        uow = PostgresUnitOfWork(pool)
        async with uow:
            try:
                yield uow
                await uow.commit()
            except BaseException:
                await uow.rollback()
                raise

    return factory
