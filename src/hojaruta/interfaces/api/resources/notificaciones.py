"""Notification API resources."""

import falcon
import falcon.asgi

from hojaruta.application.ports import PermissionChecker
from hojaruta.application.use_cases.notificacion.generar_avisos import (
    GenerarAvisosVencimientoUseCase,
)
from hojaruta.application.use_cases.notificacion.gestionar_notificaciones import (
    CrearNotificacionUseCase,
    MarcarLeidaUseCase,
    MarcarTodasLeidasUseCase,
)
from hojaruta.domain.exceptions import HojaRutaError
from hojaruta.domain.value_objects import PermissionAction
from hojaruta.interfaces.api.errors import render_error
from hojaruta.interfaces.api.middleware.auth import RequestUser, require
from hojaruta.interfaces.api.serializers import notificacion_to_dict
from hojaruta.interfaces.api.validators import parse_notificacion, read_json


def _owner_or_admin(
    req: falcon.asgi.Request, checker: PermissionChecker, usuario_id: int
) -> RequestUser:
    """A user reads their own notifications; admins read anyone's."""
    user = require(req, checker, PermissionAction.READ)
    if user.user_id != usuario_id:
        require(req, checker, PermissionAction.ADMIN)
    return user


class NotificacionesResource:
    """POST /api/notificaciones and POST /api/notificaciones/generar-automaticas."""

    def __init__(
        self,
        crear: CrearNotificacionUseCase,
        generar: GenerarAvisosVencimientoUseCase,
        permission_checker: PermissionChecker,
    ) -> None:
        self._crear = crear
        self._generar = generar
        self._permission_checker = permission_checker

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            require(req, self._permission_checker, PermissionAction.WRITE)
            notificacion = await self._crear.execute(parse_notificacion(await read_json(req)))
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {"success": True, "notificacion": notificacion_to_dict(notificacion)}
        resp.status = falcon.HTTP_201

    async def on_post_generar(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Deadline notices; meant for a scheduler or a manual trigger."""
        try:
            require(req, self._permission_checker, PermissionAction.WRITE)
            creadas = await self._generar.execute()
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {
            "success": True,
            "message": "Notificaciones automáticas procesadas",
            "nuevas_notificaciones": len(creadas),
        }
        resp.status = falcon.HTTP_200


class NotificacionesUsuarioResource:
    """Per-user listing, unread count and mark-all-read."""

    def __init__(
        self,
        marcar_todas: MarcarTodasLeidasUseCase,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
    ) -> None:
        self._marcar_todas = marcar_todas
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, usuario_id: int
    ) -> None:
        try:
            _owner_or_admin(req, self._permission_checker, usuario_id)
        except HojaRutaError as e:
            render_error(resp, e)
            return
        solo_no_leidas = req.get_param_as_bool("solo_no_leidas", default=False)
        async with self._uow_factory() as uow:
            items = await uow.notificaciones.list_by_usuario(usuario_id, solo_no_leidas)
        resp.media = {
            "success": True,
            "total": len(items),
            "notificaciones": [notificacion_to_dict(n) for n in items],
        }
        resp.status = falcon.HTTP_200

    async def on_get_count(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, usuario_id: int
    ) -> None:
        try:
            _owner_or_admin(req, self._permission_checker, usuario_id)
        except HojaRutaError as e:
            render_error(resp, e)
            return
        async with self._uow_factory() as uow:
            no_leidas = await uow.notificaciones.count_unread(usuario_id)
        resp.media = {"success": True, "no_leidas": no_leidas}
        resp.status = falcon.HTTP_200

    async def on_patch_leer_todas(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, usuario_id: int
    ) -> None:
        try:
            _owner_or_admin(req, self._permission_checker, usuario_id)
            marcadas = await self._marcar_todas.execute(usuario_id)
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {
            "success": True,
            "message": "Todas las notificaciones marcadas como leídas",
            "marcadas": marcadas,
        }
        resp.status = falcon.HTTP_200


class NotificacionResource:
    """PATCH /api/notificaciones/{notificacion_id}/leer."""

    def __init__(self, marcar: MarcarLeidaUseCase, permission_checker: PermissionChecker) -> None:
        self._marcar = marcar
        self._permission_checker = permission_checker

    async def on_patch_leer(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, notificacion_id: int
    ) -> None:
        try:
            user = require(req, self._permission_checker, PermissionAction.READ)
            notificacion = await self._marcar.execute(
                user.user_id,
                notificacion_id,
                is_admin=self._permission_checker.check(user.rol, PermissionAction.ADMIN),
            )
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {"success": True, "notificacion": notificacion_to_dict(notificacion)}
        resp.status = falcon.HTTP_200
