"""PostgreSQL notification repository implementation."""

from psycopg import AsyncConnection

from hojaruta.domain.entities import Notificacion
from hojaruta.infrastructure.persistence.postgres.errors import integrity_guard

_SELECT = (
    "SELECT n.id, n.usuario_id, n.tipo, n.mensaje, n.hoja_ruta_id, n.leida, n.leida_en, "
    "n.created_at, hr.numero_hr, hr.referencia "
    "FROM notificaciones n LEFT JOIN hojas_ruta hr ON n.hoja_ruta_id = hr.id"
)


def _row_to_notificacion(r: tuple) -> Notificacion:
    return Notificacion(
        id=r[0],
        usuario_id=r[1],
        tipo=r[2],
        mensaje=r[3],
        hoja_ruta_id=r[4],
        leida=r[5],
        leida_en=r[6],
        created_at=r[7],
        numero_hr=r[8],
        referencia=r[9],
    )


class PostgresNotificacionRepository:
    """Notification repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, notificacion_id: int) -> Notificacion | None:
        cur = await self._conn.execute(f"{_SELECT} WHERE n.id = %s", (notificacion_id,))
        r = await cur.fetchone()
        return _row_to_notificacion(r) if r else None

    async def list_by_usuario(
        self, usuario_id: int, solo_no_leidas: bool = False
    ) -> list[Notificacion]:
        """Newest first."""
        sql = f"{_SELECT} WHERE n.usuario_id = %s"
        if solo_no_leidas:
            sql += " AND n.leida = false"
        cur = await self._conn.execute(sql + " ORDER BY n.created_at DESC, n.id DESC", (usuario_id,))
        return [_row_to_notificacion(r) for r in await cur.fetchall()]

    async def count_unread(self, usuario_id: int) -> int:
        cur = await self._conn.execute(
            "SELECT COUNT(*) FROM notificaciones WHERE usuario_id = %s AND leida = false",
            (usuario_id,),
        )
        return int((await cur.fetchone())[0])

    async def has_unread(self, usuario_id: int, hoja_ruta_id: int, tipo: str) -> bool:
        cur = await self._conn.execute(
            "SELECT EXISTS (SELECT 1 FROM notificaciones WHERE usuario_id = %s "
            "AND hoja_ruta_id = %s AND tipo = %s AND leida = false)",
            (usuario_id, hoja_ruta_id, tipo),
        )
        return bool((await cur.fetchone())[0])

    async def create(self, notificacion: Notificacion) -> Notificacion:
        async with integrity_guard():
            cur = await self._conn.execute(
                "INSERT INTO notificaciones (usuario_id, hoja_ruta_id, tipo, mensaje) "
                "VALUES (%s, %s, %s, %s) RETURNING id, created_at",
                (
                    notificacion.usuario_id,
                    notificacion.hoja_ruta_id,
                    notificacion.tipo,
                    notificacion.mensaje,
                ),
            )
            r = await cur.fetchone()
        notificacion.id, notificacion.created_at = r[0], r[1]
        return notificacion

    async def mark_read(self, notificacion: Notificacion) -> Notificacion:
        await self._conn.execute(
            "UPDATE notificaciones SET leida = %s, leida_en = %s WHERE id = %s",
            (notificacion.leida, notificacion.leida_en, notificacion.id),
        )
        return notificacion

    async def mark_all_read(self, usuario_id: int) -> int:
        cur = await self._conn.execute(
            "UPDATE notificaciones SET leida = true, leida_en = NOW() "
            "WHERE usuario_id = %s AND leida = false",
            (usuario_id,),
        )
        return cur.rowcount
