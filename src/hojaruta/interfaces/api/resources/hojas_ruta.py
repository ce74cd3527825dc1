"""Hoja de ruta API resources."""

from collections.abc import Callable
from datetime import date

import falcon
import falcon.asgi

from hojaruta.application.ports import PermissionChecker
from hojaruta.application.use_cases.hoja_ruta.actualizar_hoja_ruta import (
    ActualizarHojaRutaUseCase,
)
from hojaruta.application.use_cases.hoja_ruta.cambiar_estado import (
    CambiarEstadoUseCase,
    CambiarUbicacionUseCase,
    EliminarHojaRutaUseCase,
)
from hojaruta.application.use_cases.hoja_ruta.crear_hoja_ruta import CrearHojaRutaUseCase
from hojaruta.domain.exceptions import HojaRutaError, NotFound
from hojaruta.domain.value_objects import PermissionAction
from hojaruta.interfaces.api.errors import render_error
from hojaruta.interfaces.api.middleware.auth import require
from hojaruta.interfaces.api.serializers import hoja_to_dict
from hojaruta.interfaces.api.validators import parse_hoja_create, parse_hoja_update, read_json


class HojasRutaResource:
    """GET/POST /api/hojas-ruta - list and create documents."""

    def __init__(
        self,
        crear_hoja: CrearHojaRutaUseCase,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._crear_hoja = crear_hoja
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._today = today

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List documents, overdue and urgent first."""
        query = (req.get_param("query") or "").strip() or None
        incluir = req.get_param_as_bool("incluir_completadas", default=True)

        async with self._uow_factory() as uow:
            hojas = await uow.hojas.list(
                query=query,
                estado_cumplimiento=req.get_param("estado_cumplimiento"),
                incluir_completadas=incluir,
            )

        today = self._today()
        resp.media = {
            "success": True,
            "total": len(hojas),
            "hojas": [hoja_to_dict(h, today) for h in hojas],
        }
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create a document from the intake form."""
        try:
            user = require(req, self._permission_checker, PermissionAction.WRITE)
            data = parse_hoja_create(await read_json(req))
            hoja = await self._crear_hoja.execute(user.user_id, data)
        except HojaRutaError as e:
            render_error(resp, e)
            return

        resp.media = {
            "success": True,
            "hoja": hoja_to_dict(hoja, self._today()),
            "message": "Hoja de ruta creada exitosamente",
        }
        resp.status = falcon.HTTP_201


class HojaRutaResource:
    """GET/PUT/DELETE /api/hojas-ruta/{hoja_id} plus PATCH state changes."""

    def __init__(
        self,
        actualizar_hoja: ActualizarHojaRutaUseCase,
        cambiar_estado: CambiarEstadoUseCase,
        cambiar_ubicacion: CambiarUbicacionUseCase,
        eliminar_hoja: EliminarHojaRutaUseCase,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._actualizar_hoja = actualizar_hoja
        self._cambiar_estado = cambiar_estado
        self._cambiar_ubicacion = cambiar_ubicacion
        self._eliminar_hoja = eliminar_hoja
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._today = today

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, hoja_id: int
    ) -> None:
        """Document with its form details flattened in."""
        async with self._uow_factory() as uow:
            hoja = await uow.hojas.get_by_id(hoja_id)
        if not hoja:
            render_error(resp, NotFound("Hoja de ruta", hoja_id))
            return
        resp.media = {"success": True, "hoja": hoja_to_dict(hoja, self._today(), merge_detalles=True)}
        resp.status = falcon.HTTP_200

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, hoja_id: int
    ) -> None:
        try:
            user = require(req, self._permission_checker, PermissionAction.WRITE)
            data = parse_hoja_update(await read_json(req))
            hoja = await self._actualizar_hoja.execute(hoja_id, data, user.user_id)
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {
            "success": True,
            "hoja": hoja_to_dict(hoja, self._today(), merge_detalles=True),
            "message": "Hoja de ruta actualizada exitosamente",
        }
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, hoja_id: int
    ) -> None:
        """Soft delete; the row stays for audit."""
        try:
            require(req, self._permission_checker, PermissionAction.WRITE)
            await self._eliminar_hoja.execute(hoja_id)
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {"success": True, "message": "Hoja de ruta eliminada"}
        resp.status = falcon.HTTP_200

    async def on_patch_completar(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, hoja_id: int
    ) -> None:
        try:
            require(req, self._permission_checker, PermissionAction.WRITE)
            hoja = await self._cambiar_estado.completar(hoja_id)
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {
            "success": True,
            "message": "Hoja de ruta marcada como completada",
            "hoja": hoja_to_dict(hoja, self._today()),
        }
        resp.status = falcon.HTTP_200

    async def on_patch_estado(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, hoja_id: int
    ) -> None:
        try:
            require(req, self._permission_checker, PermissionAction.WRITE)
            body = await read_json(req)
            hoja = await self._cambiar_estado.execute(
                hoja_id, body.get("estado_cumplimiento"), body.get("estado")
            )
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {
            "success": True,
            "message": "Estado actualizado correctamente",
            "hoja": hoja_to_dict(hoja, self._today()),
        }
        resp.status = falcon.HTTP_200

    async def on_patch_ubicacion(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, hoja_id: int
    ) -> None:
        try:
            require(req, self._permission_checker, PermissionAction.WRITE)
            body = await read_json(req)
            hoja = await self._cambiar_ubicacion.execute(
                hoja_id, body.get("ubicacion_actual"), body.get("responsable_actual")
            )
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {"success": True, "hoja": hoja_to_dict(hoja, self._today())}
        resp.status = falcon.HTTP_200


class EstadisticasResource:
    """GET /api/hojas-ruta/estadisticas/dashboard - counts for the dashboard."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        async with self._uow_factory() as uow:
            stats = await uow.hojas.estadisticas()
        resp.media = {"success": True, "estadisticas": stats}
        resp.status = falcon.HTTP_200
