"""Usuario entity."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Usuario:
    """Application user."""

    id: int | None
    username: str
    password_hash: str
    nombre_completo: str
    rol: str = "usuario"
    email: str | None = None
    cargo: str | None = None
    unidad_id: int | None = None
    activo: bool = True
    ultimo_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
