"""Hoja de ruta repository port."""

from typing import Protocol

from hojaruta.domain.entities import HojaRuta


class HojaRutaRepository(Protocol):
    """Port for hoja de ruta persistence."""

    async def get_by_id(
        self,
        hoja_id: int,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> HojaRuta | None: ...

    async def list(
        self,
        *,
        query: str | None = None,
        estado_cumplimiento: str | None = None,
        incluir_completadas: bool = True,
    ) -> list[HojaRuta]: ...

    async def create(self, hoja: HojaRuta) -> HojaRuta: ...

    async def update(self, hoja: HojaRuta) -> HojaRuta: ...

    async def soft_delete(self, hoja_id: int) -> bool: ...

    async def estadisticas(self) -> dict[str, int]: ...
