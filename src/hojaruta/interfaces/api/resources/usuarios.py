"""Usuario API resources."""

import falcon
import falcon.asgi

from hojaruta.application.ports import PermissionChecker
from hojaruta.application.use_cases.usuario.crear_usuario import CrearUsuarioUseCase
from hojaruta.domain.exceptions import HojaRutaError, NotFound
from hojaruta.domain.value_objects import PermissionAction
from hojaruta.interfaces.api.errors import render_error
from hojaruta.interfaces.api.middleware.auth import require
from hojaruta.interfaces.api.serializers import usuario_to_dict
from hojaruta.interfaces.api.validators import parse_id, read_json


class UsuariosResource:
    """GET/POST /api/usuarios (admin) and GET /api/usuarios/me."""

    def __init__(
        self,
        crear: CrearUsuarioUseCase,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
    ) -> None:
        self._crear = crear
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            require(req, self._permission_checker, PermissionAction.ADMIN)
            unidad_id = parse_id(req.get_param("unidad_id"), "unidad_id", required=False)
        except HojaRutaError as e:
            render_error(resp, e)
            return

        async with self._uow_factory() as uow:
            usuarios = await uow.usuarios.list(unidad_id=unidad_id)
            nombres = {u.id: u.nombre for u in await uow.unidades.list_active()}

        resp.media = {
            "success": True,
            "usuarios": [usuario_to_dict(u, nombres.get(u.unidad_id)) for u in usuarios],
        }
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            require(req, self._permission_checker, PermissionAction.ADMIN)
            body = await read_json(req)
            usuario = await self._crear.execute(
                body.get("username"),
                body.get("password"),
                body.get("nombre_completo"),
                unidad_id=parse_id(body.get("unidad_id"), "unidad_id", required=False),
                rol=body.get("rol"),
            )
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {"success": True, "usuario": usuario_to_dict(usuario)}
        resp.status = falcon.HTTP_201

    async def on_get_me(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Profile of the caller, with its unit name."""
        user_id = req.context.user.user_id
        async with self._uow_factory() as uow:
            usuario = await uow.usuarios.get_by_id(user_id)
            unidad = None
            if usuario and usuario.unidad_id is not None:
                unidad = await uow.unidades.get_by_id(usuario.unidad_id)
        if not usuario:
            render_error(resp, NotFound("Usuario", user_id))
            return
        resp.media = {
            "success": True,
            "usuario": usuario_to_dict(usuario, unidad.nombre if unidad else None),
        }
        resp.status = falcon.HTTP_200
