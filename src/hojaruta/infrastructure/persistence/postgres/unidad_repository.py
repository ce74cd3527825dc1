"""PostgreSQL unit repository implementation."""

from psycopg import AsyncConnection

from hojaruta.domain.entities import Unidad
from hojaruta.infrastructure.persistence.postgres.errors import integrity_guard

_COLUMNS = (
    "id, nombre, descripcion, direccion, telefono, activo, creado_por, created_at, updated_at"
)


def _row_to_unidad(r: tuple) -> Unidad:
    return Unidad(
        id=r[0],
        nombre=r[1],
        descripcion=r[2],
        direccion=r[3],
        telefono=r[4],
        activo=r[5],
        creado_por=r[6],
        created_at=r[7],
        updated_at=r[8],
    )


class PostgresUnidadRepository:
    """Unit repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, unidad_id: int) -> Unidad | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM unidades WHERE id = %s", (unidad_id,)
        )
        r = await cur.fetchone()
        return _row_to_unidad(r) if r else None

    async def get_by_nombre(self, nombre: str) -> Unidad | None:
        """Case-insensitive lookup."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM unidades WHERE LOWER(nombre) = LOWER(%s)", (nombre,)
        )
        r = await cur.fetchone()
        return _row_to_unidad(r) if r else None

    async def list_active(self) -> list[Unidad]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM unidades WHERE activo = true ORDER BY nombre"
        )
        return [_row_to_unidad(r) for r in await cur.fetchall()]

    async def create(self, unidad: Unidad) -> Unidad:
        async with integrity_guard():
            cur = await self._conn.execute(
                "INSERT INTO unidades (nombre, descripcion, direccion, telefono, activo, "
                "creado_por, created_at, updated_at) VALUES (%s, %s, %s, %s, %s, %s, %s, %s) "
                "RETURNING id",
                (
                    unidad.nombre,
                    unidad.descripcion,
                    unidad.direccion,
                    unidad.telefono,
                    unidad.activo,
                    unidad.creado_por,
                    unidad.created_at,
                    unidad.updated_at,
                ),
            )
            r = await cur.fetchone()
        unidad.id = r[0]
        return unidad

    async def update(self, unidad: Unidad) -> Unidad:
        async with integrity_guard():
            await self._conn.execute(
                "UPDATE unidades SET nombre=%s, descripcion=%s, direccion=%s, telefono=%s, "
                "activo=%s, updated_at=%s WHERE id=%s",
                (
                    unidad.nombre,
                    unidad.descripcion,
                    unidad.direccion,
                    unidad.telefono,
                    unidad.activo,
                    unidad.updated_at,
                    unidad.id,
                ),
            )
        return unidad

    async def deactivate(self, unidad_id: int) -> bool:
        cur = await self._conn.execute(
            "UPDATE unidades SET activo = false, updated_at = NOW() WHERE id = %s",
            (unidad_id,),
        )
        return cur.rowcount > 0
