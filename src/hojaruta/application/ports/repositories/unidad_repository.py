"""Unidad repository port."""

from typing import Protocol

from hojaruta.domain.entities import Unidad


class UnidadRepository(Protocol):
    """Port for unit persistence."""

    async def get_by_id(self, unidad_id: int) -> Unidad | None: ...

    async def get_by_nombre(self, nombre: str) -> Unidad | None: ...

    async def list_active(self) -> list[Unidad]: ...

    async def create(self, unidad: Unidad) -> Unidad: ...

    async def update(self, unidad: Unidad) -> Unidad: ...

    async def deactivate(self, unidad_id: int) -> bool: ...
