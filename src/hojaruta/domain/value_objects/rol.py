"""User roles."""

from enum import StrEnum


class Rol(StrEnum):
    """Known user roles."""

    DESARROLLADOR = "desarrollador"
    ADMIN = "admin"
    ADMINISTRADOR = "administrador"
    SECRETARIA = "secretaria"
    USUARIO = "usuario"
