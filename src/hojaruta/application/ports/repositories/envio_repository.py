"""Envio repository port."""

from typing import Protocol

from hojaruta.domain.entities import Envio


class EnvioRepository(Protocol):
    """Port for envio persistence."""

    async def get_by_id(self, envio_id: int, for_update: bool = False) -> Envio | None: ...

    async def list_all(self) -> list[Envio]: ...

    async def list_by_unidad(self, unidad_id: int) -> list[Envio]: ...

    async def list_by_hoja(self, hoja_id: int) -> list[Envio]: ...

    async def create(self, envio: Envio) -> Envio: ...

    async def update(self, envio: Envio) -> Envio: ...
