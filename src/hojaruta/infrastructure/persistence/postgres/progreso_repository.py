"""PostgreSQL progress ledger repository implementation."""

from psycopg import AsyncConnection

from hojaruta.domain.entities import Progreso
from hojaruta.domain.value_objects import ProgresoAccion
from hojaruta.infrastructure.persistence.postgres.errors import integrity_guard

_COLUMNS = (
    "id, hoja_ruta_id, ubicacion_actual, ubicacion_anterior, accion, responsable_id, "
    "notas, respuesta, unidad_origen_id, unidad_destino_id, fecha_registro, updated_at"
)


def _row_to_progreso(r: tuple) -> Progreso:
    return Progreso(
        id=r[0],
        hoja_ruta_id=r[1],
        ubicacion_actual=r[2],
        ubicacion_anterior=r[3],
        accion=ProgresoAccion(r[4]) if r[4] else None,
        responsable_id=r[5],
        notas=r[6],
        respuesta=r[7],
        unidad_origen_id=r[8],
        unidad_destino_id=r[9],
        fecha_registro=r[10],
        updated_at=r[11],
    )


class PostgresProgresoRepository:
    """Progress entry repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, progreso_id: int) -> Progreso | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM progreso_hojas_ruta WHERE id = %s", (progreso_id,)
        )
        r = await cur.fetchone()
        return _row_to_progreso(r) if r else None

    async def list_by_hoja(self, hoja_id: int, newest_first: bool = True) -> list[Progreso]:
        """Full history of one hoja."""
        direction = "DESC" if newest_first else "ASC"
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM progreso_hojas_ruta WHERE hoja_ruta_id = %s "
            f"ORDER BY fecha_registro {direction}, id {direction}",
            (hoja_id,),
        )
        return [_row_to_progreso(r) for r in await cur.fetchall()]

    async def latest_by_hoja(self, hoja_id: int) -> Progreso | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM progreso_hojas_ruta WHERE hoja_ruta_id = %s "
            "ORDER BY fecha_registro DESC, id DESC LIMIT 1",
            (hoja_id,),
        )
        r = await cur.fetchone()
        return _row_to_progreso(r) if r else None

    async def list_latest(
        self, *, limit: int = 50, offset: int = 0
    ) -> tuple[list[Progreso], int]:
        """Most recent entry per hoja, plus how many hojas have any entry."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM ("
            f" SELECT DISTINCT ON (hoja_ruta_id) {_COLUMNS} FROM progreso_hojas_ruta"
            " ORDER BY hoja_ruta_id, fecha_registro DESC, id DESC"
            ") latest ORDER BY fecha_registro DESC LIMIT %s OFFSET %s",
            (limit, offset),
        )
        items = [_row_to_progreso(r) for r in await cur.fetchall()]
        cur = await self._conn.execute(
            "SELECT COUNT(DISTINCT hoja_ruta_id) FROM progreso_hojas_ruta"
        )
        total = (await cur.fetchone())[0]
        return items, int(total)

    async def create(self, progreso: Progreso) -> Progreso:
        """Append entry; the database assigns the id."""
        async with integrity_guard():
            cur = await self._conn.execute(
                "INSERT INTO progreso_hojas_ruta (hoja_ruta_id, ubicacion_actual, "
                "ubicacion_anterior, accion, responsable_id, notas, respuesta, "
                "unidad_origen_id, unidad_destino_id, fecha_registro) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, COALESCE(%s, NOW())) "
                "RETURNING id, fecha_registro",
                (
                    progreso.hoja_ruta_id,
                    progreso.ubicacion_actual,
                    progreso.ubicacion_anterior,
                    progreso.accion.value if progreso.accion else None,
                    progreso.responsable_id,
                    progreso.notas,
                    progreso.respuesta,
                    progreso.unidad_origen_id,
                    progreso.unidad_destino_id,
                    progreso.fecha_registro,
                ),
            )
            r = await cur.fetchone()
        progreso.id, progreso.fecha_registro = r[0], r[1]
        return progreso

    async def update(self, progreso: Progreso) -> Progreso:
        await self._conn.execute(
            "UPDATE progreso_hojas_ruta SET ubicacion_anterior=%s, ubicacion_actual=%s, "
            "notas=%s, updated_at=%s WHERE id=%s",
            (
                progreso.ubicacion_anterior,
                progreso.ubicacion_actual,
                progreso.notas,
                progreso.updated_at,
                progreso.id,
            ),
        )
        return progreso

    async def delete(self, progreso_id: int) -> bool:
        cur = await self._conn.execute(
            "DELETE FROM progreso_hojas_ruta WHERE id = %s", (progreso_id,)
        )
        return cur.rowcount > 0
