"""Hojas de ruta - document routing backend."""

__version__ = "0.1.0"
