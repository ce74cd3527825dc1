"""Progress ledger repository port."""

from typing import Protocol

from hojaruta.domain.entities import Progreso


class ProgresoRepository(Protocol):
    """Port for progress entry persistence."""

    async def get_by_id(self, progreso_id: int) -> Progreso | None: ...

    async def list_by_hoja(self, hoja_id: int, newest_first: bool = True) -> list[Progreso]: ...

    async def latest_by_hoja(self, hoja_id: int) -> Progreso | None: ...

    async def list_latest(self, *, limit: int = 50, offset: int = 0) -> tuple[list[Progreso], int]: ...

    async def create(self, progreso: Progreso) -> Progreso: ...

    async def update(self, progreso: Progreso) -> Progreso: ...

    async def delete(self, progreso_id: int) -> bool: ...
