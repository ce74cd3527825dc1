"""Unidad API resources."""

import falcon
import falcon.asgi

from hojaruta.application.ports import PermissionChecker
from hojaruta.application.use_cases.unidad.gestionar_unidad import (
    ActualizarUnidadUseCase,
    CrearUnidadUseCase,
    EliminarUnidadUseCase,
)
from hojaruta.domain.exceptions import HojaRutaError, NotFound
from hojaruta.domain.value_objects import PermissionAction
from hojaruta.interfaces.api.errors import render_error
from hojaruta.interfaces.api.middleware.auth import require
from hojaruta.interfaces.api.serializers import unidad_to_dict, usuario_to_dict
from hojaruta.interfaces.api.validators import read_json


class UnidadesResource:
    """GET/POST /api/unidades - the listing is public for the login screen."""

    public_methods = frozenset({"GET"})

    def __init__(
        self,
        crear: CrearUnidadUseCase,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
    ) -> None:
        self._crear = crear
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        async with self._uow_factory() as uow:
            unidades = await uow.unidades.list_active()
        resp.media = {"success": True, "unidades": [unidad_to_dict(u) for u in unidades]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            user = require(req, self._permission_checker, PermissionAction.WRITE)
            body = await read_json(req)
            unidad = await self._crear.execute(
                user.user_id,
                body.get("nombre"),
                descripcion=body.get("descripcion"),
                direccion=body.get("direccion"),
                telefono=body.get("telefono"),
            )
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {"success": True, "unidad": unidad_to_dict(unidad)}
        resp.status = falcon.HTTP_201


class UnidadResource:
    """GET/PUT/DELETE /api/unidades/{unidad_id}."""

    public_methods = frozenset({"GET"})

    def __init__(
        self,
        actualizar: ActualizarUnidadUseCase,
        eliminar: EliminarUnidadUseCase,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
    ) -> None:
        self._actualizar = actualizar
        self._eliminar = eliminar
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, unidad_id: int
    ) -> None:
        async with self._uow_factory() as uow:
            unidad = await uow.unidades.get_by_id(unidad_id)
        if not unidad:
            render_error(resp, NotFound("Unidad", unidad_id))
            return
        resp.media = {"success": True, "unidad": unidad_to_dict(unidad)}
        resp.status = falcon.HTTP_200

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, unidad_id: int
    ) -> None:
        try:
            require(req, self._permission_checker, PermissionAction.WRITE)
            unidad = await self._actualizar.execute(unidad_id, await read_json(req))
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {"success": True, "unidad": unidad_to_dict(unidad)}
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, unidad_id: int
    ) -> None:
        """Deactivate; existing envios keep pointing at the unit."""
        try:
            require(req, self._permission_checker, PermissionAction.WRITE)
            await self._eliminar.execute(unidad_id)
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {"success": True, "message": "Unidad desactivada"}
        resp.status = falcon.HTTP_200


class UnidadUsuariosResource:
    """GET /api/unidades/{unidad_id}/usuarios - active members of a unit."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, unidad_id: int
    ) -> None:
        async with self._uow_factory() as uow:
            unidad = await uow.unidades.get_by_id(unidad_id)
            usuarios = await uow.usuarios.list(unidad_id=unidad_id) if unidad else []
        if not unidad:
            render_error(resp, NotFound("Unidad", unidad_id))
            return
        resp.media = {
            "success": True,
            "unidad": unidad_to_dict(unidad),
            "usuarios": [usuario_to_dict(u, unidad.nombre) for u in usuarios],
        }
        resp.status = falcon.HTTP_200
