"""PostgreSQL activity history repository implementation."""

from datetime import datetime

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from hojaruta.domain.entities import Actividad
from hojaruta.domain.value_objects import ActividadTipo
from hojaruta.infrastructure.persistence.postgres.errors import integrity_guard

_COLUMNS = (
    "id, tipo, hoja_id, numero_hr, referencia, procedencia, destinatario, descripcion, "
    "usuario_nombre, fecha_actividad, datos_anteriores, datos_nuevos"
)


def _row_to_actividad(r: tuple) -> Actividad:
    return Actividad(
        id=r[0],
        tipo=ActividadTipo(r[1]),
        hoja_id=r[2],
        numero_hr=r[3],
        referencia=r[4],
        procedencia=r[5],
        destinatario=r[6],
        descripcion=r[7],
        usuario_nombre=r[8],
        fecha_actividad=r[9],
        datos_anteriores=r[10],
        datos_nuevos=r[11],
    )


def _jsonb(value: dict | None) -> Jsonb | None:
    return Jsonb(value) if value is not None else None


class PostgresActividadRepository:
    """Activity history repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_recent(
        self, *, tipo: str | None = None, limit: int = 50, offset: int = 0
    ) -> list[Actividad]:
        """Newest first, optionally of one kind."""
        sql = f"SELECT {_COLUMNS} FROM historial_actividades"
        params: list[object] = []
        if tipo:
            sql += " WHERE tipo = %s"
            params.append(tipo)
        sql += " ORDER BY fecha_actividad DESC, id DESC LIMIT %s OFFSET %s"
        params += [limit, offset]
        cur = await self._conn.execute(sql, params)
        return [_row_to_actividad(r) for r in await cur.fetchall()]

    async def count_by_tipo(self, since: datetime) -> dict[str, int]:
        cur = await self._conn.execute(
            "SELECT tipo, COUNT(*) FROM historial_actividades "
            "WHERE fecha_actividad >= %s GROUP BY tipo",
            (since,),
        )
        return {r[0]: int(r[1]) for r in await cur.fetchall()}

    async def create(self, actividad: Actividad) -> Actividad:
        async with integrity_guard():
            cur = await self._conn.execute(
                "INSERT INTO historial_actividades (tipo, hoja_id, numero_hr, referencia, "
                "procedencia, destinatario, descripcion, usuario_nombre, datos_anteriores, "
                "datos_nuevos) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s) "
                "RETURNING id, fecha_actividad",
                (
                    actividad.tipo.value,
                    actividad.hoja_id,
                    actividad.numero_hr,
                    actividad.referencia,
                    actividad.procedencia,
                    actividad.destinatario,
                    actividad.descripcion,
                    actividad.usuario_nombre,
                    _jsonb(actividad.datos_anteriores),
                    _jsonb(actividad.datos_nuevos),
                ),
            )
            r = await cur.fetchone()
        actividad.id, actividad.fecha_actividad = r[0], r[1]
        return actividad
