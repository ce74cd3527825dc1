"""Activity history repository port."""

from datetime import datetime
from typing import Protocol

from hojaruta.domain.entities import Actividad


class ActividadRepository(Protocol):
    """Port for activity history persistence."""

    async def list_recent(
        self, *, tipo: str | None = None, limit: int = 50, offset: int = 0
    ) -> list[Actividad]: ...

    async def count_by_tipo(self, since: datetime) -> dict[str, int]: ...

    async def create(self, actividad: Actividad) -> Actividad: ...
