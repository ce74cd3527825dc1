"""PostgreSQL hoja de ruta repository implementation."""

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from hojaruta.domain.entities import HojaRuta
from hojaruta.domain.value_objects import EstadoCumplimiento, HojaEstado, Prioridad
from hojaruta.infrastructure.persistence.postgres.errors import integrity_guard

_COLUMNS = (
    "id, numero_hr, referencia, procedencia, prioridad, estado, estado_cumplimiento, "
    "ubicacion_actual, responsable_actual, unidad_actual_id, detalles, fecha_limite, "
    "cite, numero_fojas, observaciones, nombre_solicitante, telefono_celular, "
    "usuario_creador_id, fecha_ingreso, fecha_completado, created_at, updated_at, eliminado_en"
)

# Overdue first, then urgent, then priority; soonest deadline first within each.
_ORDER = (
    " ORDER BY CASE WHEN estado_cumplimiento = 'vencido' THEN 1"
    " WHEN prioridad = 'urgente' THEN 2"
    " WHEN prioridad = 'prioritario' THEN 3 ELSE 4 END,"
    " fecha_limite ASC NULLS LAST, fecha_ingreso DESC"
)


def _row_to_hoja(r: tuple) -> HojaRuta:
    return HojaRuta(
        id=r[0],
        numero_hr=r[1],
        referencia=r[2],
        procedencia=r[3],
        prioridad=Prioridad(r[4]) if r[4] else Prioridad.RUTINARIO,
        estado=HojaEstado(r[5]) if r[5] else HojaEstado.PENDIENTE,
        estado_cumplimiento=(
            EstadoCumplimiento(r[6]) if r[6] else EstadoCumplimiento.PENDIENTE
        ),
        ubicacion_actual=r[7],
        responsable_actual=r[8],
        unidad_actual_id=r[9],
        detalles=r[10] or {},
        fecha_limite=r[11],
        cite=r[12],
        numero_fojas=r[13],
        observaciones=r[14],
        nombre_solicitante=r[15],
        telefono_celular=r[16],
        usuario_creador_id=r[17],
        fecha_ingreso=r[18],
        fecha_completado=r[19],
        created_at=r[20],
        updated_at=r[21],
        eliminado_en=r[22],
    )


class PostgresHojaRutaRepository:
    """Hoja de ruta repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(
        self,
        hoja_id: int,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> HojaRuta | None:
        """Get hoja by id, optionally locking the row until commit."""
        q = f"SELECT {_COLUMNS} FROM hojas_ruta WHERE id = %s"
        if not include_deleted:
            q += " AND eliminado_en IS NULL"
        if for_update:
            q += " FOR UPDATE"
        cur = await self._conn.execute(q, (hoja_id,))
        r = await cur.fetchone()
        return _row_to_hoja(r) if r else None

    async def list(
        self,
        *,
        query: str | None = None,
        estado_cumplimiento: str | None = None,
        incluir_completadas: bool = True,
    ) -> list[HojaRuta]:
        """List non-deleted hojas with text and state filters."""
        conditions = ["eliminado_en IS NULL"]
        params: list[object] = []
        if query:
            conditions.append(
                "(numero_hr ILIKE %s OR referencia ILIKE %s OR procedencia ILIKE %s"
                " OR ubicacion_actual ILIKE %s OR nombre_solicitante ILIKE %s"
                " OR telefono_celular ILIKE %s)"
            )
            params.extend([f"%{query}%"] * 6)
        if estado_cumplimiento:
            conditions.append("estado_cumplimiento = %s")
            params.append(estado_cumplimiento)
        if not incluir_completadas:
            conditions.append(
                "estado_cumplimiento <> 'completado' AND estado NOT IN ('finalizada', 'archivada')"
            )
        q = f"SELECT {_COLUMNS} FROM hojas_ruta WHERE {' AND '.join(conditions)}{_ORDER}"
        cur = await self._conn.execute(q, tuple(params))
        return [_row_to_hoja(r) for r in await cur.fetchall()]

    async def create(self, hoja: HojaRuta) -> HojaRuta:
        """Insert hoja; the database assigns the id."""
        async with integrity_guard():
            cur = await self._conn.execute(
                "INSERT INTO hojas_ruta (numero_hr, referencia, procedencia, prioridad, estado, "
                "estado_cumplimiento, ubicacion_actual, responsable_actual, unidad_actual_id, "
                "detalles, fecha_limite, cite, numero_fojas, observaciones, nombre_solicitante, "
                "telefono_celular, usuario_creador_id, fecha_ingreso, created_at, updated_at) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s) "
                "RETURNING id",
                (
                    hoja.numero_hr,
                    hoja.referencia,
                    hoja.procedencia,
                    hoja.prioridad.value,
                    hoja.estado.value,
                    hoja.estado_cumplimiento.value,
                    hoja.ubicacion_actual,
                    hoja.responsable_actual,
                    hoja.unidad_actual_id,
                    Jsonb(hoja.detalles),
                    hoja.fecha_limite,
                    hoja.cite,
                    hoja.numero_fojas,
                    hoja.observaciones,
                    hoja.nombre_solicitante,
                    hoja.telefono_celular,
                    hoja.usuario_creador_id,
                    hoja.fecha_ingreso,
                    hoja.created_at,
                    hoja.updated_at,
                ),
            )
            r = await cur.fetchone()
        hoja.id = r[0]
        return hoja

    async def update(self, hoja: HojaRuta) -> HojaRuta:
        """Write every mutable column back."""
        async with integrity_guard():
            await self._conn.execute(
                "UPDATE hojas_ruta SET numero_hr=%s, referencia=%s, procedencia=%s, prioridad=%s, "
                "estado=%s, estado_cumplimiento=%s, ubicacion_actual=%s, responsable_actual=%s, "
                "unidad_actual_id=%s, detalles=%s, fecha_limite=%s, cite=%s, numero_fojas=%s, "
                "observaciones=%s, nombre_solicitante=%s, telefono_celular=%s, "
                "fecha_completado=%s, updated_at=%s WHERE id=%s",
                (
                    hoja.numero_hr,
                    hoja.referencia,
                    hoja.procedencia,
                    hoja.prioridad.value,
                    hoja.estado.value,
                    hoja.estado_cumplimiento.value,
                    hoja.ubicacion_actual,
                    hoja.responsable_actual,
                    hoja.unidad_actual_id,
                    Jsonb(hoja.detalles),
                    hoja.fecha_limite,
                    hoja.cite,
                    hoja.numero_fojas,
                    hoja.observaciones,
                    hoja.nombre_solicitante,
                    hoja.telefono_celular,
                    hoja.fecha_completado,
                    hoja.updated_at,
                    hoja.id,
                ),
            )
        return hoja

    async def soft_delete(self, hoja_id: int) -> bool:
        """Soft delete hoja. Returns False when no live row matched."""
        cur = await self._conn.execute(
            "UPDATE hojas_ruta SET eliminado_en = NOW(), updated_at = NOW() "
            "WHERE id = %s AND eliminado_en IS NULL",
            (hoja_id,),
        )
        return cur.rowcount > 0

    async def estadisticas(self) -> dict[str, int]:
        """Counts per compliance state plus deadline buckets."""
        cur = await self._conn.execute(
            "SELECT COUNT(*),"
            " COUNT(*) FILTER (WHERE estado_cumplimiento = 'pendiente'),"
            " COUNT(*) FILTER (WHERE estado_cumplimiento = 'en_proceso'),"
            " COUNT(*) FILTER (WHERE estado_cumplimiento = 'completado'),"
            " COUNT(*) FILTER (WHERE estado_cumplimiento = 'vencido'),"
            " COUNT(*) FILTER (WHERE fecha_limite - CURRENT_DATE <= 3"
            " AND estado_cumplimiento <> 'completado'),"
            " COUNT(*) FILTER (WHERE fecha_limite - CURRENT_DATE BETWEEN 4 AND 7"
            " AND estado_cumplimiento <> 'completado')"
            " FROM hojas_ruta WHERE eliminado_en IS NULL"
        )
        r = await cur.fetchone()
        keys = (
            "total",
            "pendientes",
            "en_proceso",
            "completadas",
            "vencidas",
            "criticas",
            "proximas_vencer",
        )
        return {k: int(v or 0) for k, v in zip(keys, r, strict=True)}
