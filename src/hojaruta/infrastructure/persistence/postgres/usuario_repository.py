"""PostgreSQL user repository implementation."""

from psycopg import AsyncConnection

from hojaruta.domain.entities import Usuario
from hojaruta.infrastructure.persistence.postgres.errors import integrity_guard

_COLUMNS = (
    "id, username, password_hash, nombre_completo, rol, email, cargo, unidad_id, "
    "activo, ultimo_login, created_at, updated_at"
)


def _row_to_usuario(r: tuple) -> Usuario:
    return Usuario(
        id=r[0],
        username=r[1],
        password_hash=r[2],
        nombre_completo=r[3],
        rol=r[4],
        email=r[5],
        cargo=r[6],
        unidad_id=r[7],
        activo=r[8],
        ultimo_login=r[9],
        created_at=r[10],
        updated_at=r[11],
    )


class PostgresUsuarioRepository:
    """User repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, usuario_id: int) -> Usuario | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM usuarios WHERE id = %s", (usuario_id,)
        )
        r = await cur.fetchone()
        return _row_to_usuario(r) if r else None

    async def get_by_username(self, username: str) -> Usuario | None:
        """Case-insensitive lookup."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM usuarios WHERE LOWER(username) = LOWER(%s)",
            (username,),
        )
        r = await cur.fetchone()
        return _row_to_usuario(r) if r else None

    async def list(self, *, unidad_id: int | None = None) -> list[Usuario]:
        """All users, or the active members of one unit."""
        if unidad_id is None:
            cur = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM usuarios ORDER BY created_at DESC, id DESC"
            )
        else:
            cur = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM usuarios WHERE unidad_id = %s AND activo = true "
                "ORDER BY nombre_completo",
                (unidad_id,),
            )
        return [_row_to_usuario(r) for r in await cur.fetchall()]

    async def create(self, usuario: Usuario) -> Usuario:
        async with integrity_guard():
            cur = await self._conn.execute(
                "INSERT INTO usuarios (username, password_hash, nombre_completo, rol, email, "
                "cargo, unidad_id, activo, created_at, updated_at) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s) RETURNING id",
                (
                    usuario.username,
                    usuario.password_hash,
                    usuario.nombre_completo,
                    usuario.rol,
                    usuario.email,
                    usuario.cargo,
                    usuario.unidad_id,
                    usuario.activo,
                    usuario.created_at,
                    usuario.updated_at,
                ),
            )
            r = await cur.fetchone()
        usuario.id = r[0]
        return usuario

    async def touch_login(self, usuario_id: int) -> None:
        await self._conn.execute(
            "UPDATE usuarios SET ultimo_login = NOW(), updated_at = NOW() WHERE id = %s",
            (usuario_id,),
        )
