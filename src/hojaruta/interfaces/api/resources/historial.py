"""Activity history API resources."""

from datetime import UTC, datetime, timedelta

import falcon
import falcon.asgi

from hojaruta.application.ports import PermissionChecker
from hojaruta.application.use_cases.historial.registrar_actividad import (
    RegistrarActividadUseCase,
)
from hojaruta.domain.exceptions import HojaRutaError, ValidationError
from hojaruta.domain.value_objects import ActividadTipo, PermissionAction
from hojaruta.interfaces.api.errors import render_error
from hojaruta.interfaces.api.middleware.auth import require
from hojaruta.interfaces.api.serializers import actividad_to_dict
from hojaruta.interfaces.api.validators import parse_actividad, read_json

MAX_LIMITE = 200
POR_CATEGORIA = 10
MAX_PERIODO_DIAS = 365


class HistorialResource:
    """GET/POST /api/historial plus the categorias and estadisticas views."""

    def __init__(
        self,
        registrar: RegistrarActividadUseCase,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
    ) -> None:
        self._registrar = registrar
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Newest first, optionally filtered by ``tipo``."""
        try:
            tipo = ActividadTipo(req.get_param("tipo")) if req.get_param("tipo") else None
        except ValueError:
            render_error(resp, ValidationError("Tipo de actividad inválido", field="tipo"))
            return
        limite = min(max(req.get_param_as_int("limite") or 50, 1), MAX_LIMITE)
        offset = max(req.get_param_as_int("offset") or 0, 0)

        async with self._uow_factory() as uow:
            items = await uow.actividades.list_recent(tipo=tipo, limit=limite, offset=offset)

        resp.media = {
            "success": True,
            "total": len(items),
            "data": [actividad_to_dict(a) for a in items],
        }
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            require(req, self._permission_checker, PermissionAction.WRITE)
            actividad = await self._registrar.execute(parse_actividad(await read_json(req)))
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {
            "success": True,
            "message": "Actividad registrada exitosamente",
            "data": actividad_to_dict(actividad),
        }
        resp.status = falcon.HTTP_201

    async def on_get_categorias(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Latest entries of each kind for the history page."""
        async with self._uow_factory() as uow:
            data = {
                f"{tipo.value}s": [
                    actividad_to_dict(a)
                    for a in await uow.actividades.list_recent(tipo=tipo, limit=POR_CATEGORIA)
                ]
                for tipo in ActividadTipo
            }
        resp.media = {"success": True, "data": data}
        resp.status = falcon.HTTP_200

    async def on_get_estadisticas(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Counts per kind over the last ``periodo`` days (default 7)."""
        periodo = req.get_param_as_int("periodo", default=7)
        if not 1 <= periodo <= MAX_PERIODO_DIAS:
            render_error(
                resp,
                ValidationError(
                    f"periodo debe estar entre 1 y {MAX_PERIODO_DIAS}", field="periodo"
                ),
            )
            return
        since = datetime.now(UTC) - timedelta(days=periodo)
        async with self._uow_factory() as uow:
            counts = await uow.actividades.count_by_tipo(since)

        data = {f"{tipo.value}s": counts.get(tipo.value, 0) for tipo in ActividadTipo}
        data["total"] = sum(counts.values())
        resp.media = {"success": True, "data": data, "periodo": f"{periodo} días"}
        resp.status = falcon.HTTP_200
