"""PostgreSQL envio repository implementation."""

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from hojaruta.domain.entities import Envio
from hojaruta.domain.value_objects import EnvioEstado
from hojaruta.infrastructure.persistence.postgres.errors import integrity_guard

_COLUMNS = (
    "id, hoja_id, usuario_id, unidad_destino_id, destinatario_nombre, observaciones, "
    "instrucciones, estado, respuesta, fecha_envio, fecha_recepcion, fecha_respuesta, "
    "fecha_redireccion, redirigido_a_unidad_id, redirigido_por, created_at, updated_at, "
    "eliminado_en"
)


def _row_to_envio(r: tuple) -> Envio:
    return Envio(
        id=r[0],
        hoja_id=r[1],
        usuario_id=r[2],
        unidad_destino_id=r[3],
        destinatario_nombre=r[4],
        observaciones=r[5],
        instrucciones=r[6] or [],
        estado=EnvioEstado(r[7]),
        respuesta=r[8],
        fecha_envio=r[9],
        fecha_recepcion=r[10],
        fecha_respuesta=r[11],
        fecha_redireccion=r[12],
        redirigido_a_unidad_id=r[13],
        redirigido_por=r[14],
        created_at=r[15],
        updated_at=r[16],
        eliminado_en=r[17],
    )


class PostgresEnvioRepository:
    """Envio repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, envio_id: int, for_update: bool = False) -> Envio | None:
        """Get envio by id. ``for_update`` locks the row until commit."""
        q = f"SELECT {_COLUMNS} FROM envios WHERE id = %s AND eliminado_en IS NULL"
        if for_update:
            q += " FOR UPDATE"
        cur = await self._conn.execute(q, (envio_id,))
        r = await cur.fetchone()
        return _row_to_envio(r) if r else None

    async def list_all(self) -> list[Envio]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM envios WHERE eliminado_en IS NULL "
            "ORDER BY fecha_envio DESC NULLS LAST, id DESC"
        )
        return [_row_to_envio(r) for r in await cur.fetchall()]

    async def list_by_unidad(self, unidad_id: int) -> list[Envio]:
        """Envios addressed to a unit, newest first."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM envios WHERE unidad_destino_id = %s "
            "AND eliminado_en IS NULL ORDER BY fecha_envio DESC NULLS LAST, id DESC",
            (unidad_id,),
        )
        return [_row_to_envio(r) for r in await cur.fetchall()]

    async def list_by_hoja(self, hoja_id: int) -> list[Envio]:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM envios WHERE hoja_id = %s AND eliminado_en IS NULL "
            "ORDER BY id",
            (hoja_id,),
        )
        return [_row_to_envio(r) for r in await cur.fetchall()]

    async def create(self, envio: Envio) -> Envio:
        """Insert envio; the database assigns the id."""
        async with integrity_guard():
            cur = await self._conn.execute(
                "INSERT INTO envios (hoja_id, usuario_id, unidad_destino_id, destinatario_nombre, "
                "observaciones, instrucciones, estado, respuesta, fecha_envio, fecha_recepcion, "
                "fecha_respuesta, fecha_redireccion, redirigido_a_unidad_id, redirigido_por, "
                "created_at, updated_at) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s) "
                "RETURNING id",
                (
                    envio.hoja_id,
                    envio.usuario_id,
                    envio.unidad_destino_id,
                    envio.destinatario_nombre,
                    envio.observaciones,
                    Jsonb(envio.instrucciones),
                    envio.estado.value,
                    envio.respuesta,
                    envio.fecha_envio,
                    envio.fecha_recepcion,
                    envio.fecha_respuesta,
                    envio.fecha_redireccion,
                    envio.redirigido_a_unidad_id,
                    envio.redirigido_por,
                    envio.created_at,
                    envio.updated_at,
                ),
            )
            r = await cur.fetchone()
        envio.id = r[0]
        return envio

    async def update(self, envio: Envio) -> Envio:
        """Write state, response and timestamps back."""
        async with integrity_guard():
            await self._conn.execute(
                "UPDATE envios SET estado=%s, respuesta=%s, fecha_envio=%s, fecha_recepcion=%s, "
                "fecha_respuesta=%s, fecha_redireccion=%s, redirigido_a_unidad_id=%s, "
                "redirigido_por=%s, updated_at=%s WHERE id=%s",
                (
                    envio.estado.value,
                    envio.respuesta,
                    envio.fecha_envio,
                    envio.fecha_recepcion,
                    envio.fecha_respuesta,
                    envio.fecha_redireccion,
                    envio.redirigido_a_unidad_id,
                    envio.redirigido_por,
                    envio.updated_at,
                    envio.id,
                ),
            )
        return envio
