"""Kinds of entries in the activity history."""

from enum import StrEnum


class ActividadTipo(StrEnum):
    """What happened to a hoja de ruta."""

    ANADIDO = "añadido"
    EDITADO = "editado"
    ENVIADO = "enviado"
