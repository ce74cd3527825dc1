"""Progress ledger API resources."""

import falcon
import falcon.asgi

from hojaruta.application.ports import PermissionChecker
from hojaruta.application.use_cases.progreso.agregar_progreso import AgregarProgresoUseCase
from hojaruta.application.use_cases.progreso.gestionar_progreso import (
    ActualizarProgresoUseCase,
    EliminarProgresoUseCase,
)
from hojaruta.domain.exceptions import HojaRutaError, NotFound
from hojaruta.domain.value_objects import PermissionAction
from hojaruta.interfaces.api.errors import render_error
from hojaruta.interfaces.api.middleware.auth import require
from hojaruta.interfaces.api.serializers import progreso_to_dict
from hojaruta.interfaces.api.validators import parse_progreso, parse_progreso_bulk, read_json

MAX_LIMITE = 200


class ProgresoListResource:
    """GET /api/progreso and the POST agregar endpoints."""

    def __init__(self, agregar: AgregarProgresoUseCase, unit_of_work_factory: type) -> None:
        self._agregar = agregar
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Latest entry per document, newest first."""
        limite = req.get_param_as_int("limite") or 50
        limite = min(max(limite, 1), MAX_LIMITE)
        offset = max(req.get_param_as_int("offset") or 0, 0)

        async with self._uow_factory() as uow:
            entries, total = await uow.progreso.list_latest(limit=limite, offset=offset)

        resp.media = {
            "success": True,
            "total": total,
            "progreso": [progreso_to_dict(p) for p in entries],
        }
        resp.status = falcon.HTTP_200

    async def on_post_agregar(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            data = parse_progreso(await read_json(req))
            progreso = await self._agregar.execute(req.context.user.user_id, data)
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {
            "success": True,
            "message": "Progreso registrado exitosamente",
            "progreso": progreso_to_dict(progreso),
        }
        resp.status = falcon.HTTP_201

    async def on_post_agregar_multiple(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Bulk insert; per-item failures are reported, not raised."""
        try:
            items = parse_progreso_bulk(await read_json(req))
            result = await self._agregar.execute_many(req.context.user.user_id, items)
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {
            "success": result.success,
            "message": (
                f"{len(result.registrados)} registros creados, "
                f"{len(result.errores)} con errores"
            ),
            "registrados": [progreso_to_dict(p) for p in result.registrados],
            "errores": [
                {"hoja_ruta_id": e.hoja_ruta_id, "error": e.error} for e in result.errores
            ],
        }
        resp.status = falcon.HTTP_201


class ProgresoHojaResource:
    """Read-only views over one document's ledger."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get_historial(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, hoja_id: int
    ) -> None:
        async with self._uow_factory() as uow:
            hoja = await uow.hojas.get_by_id(hoja_id)
            entries = await uow.progreso.list_by_hoja(hoja_id) if hoja else []
        if not hoja:
            render_error(resp, NotFound("Hoja de ruta", hoja_id))
            return
        resp.media = {
            "success": True,
            "total": len(entries),
            "historial": [progreso_to_dict(p) for p in entries],
        }
        resp.status = falcon.HTTP_200

    async def on_get_ultimo(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, hoja_id: int
    ) -> None:
        async with self._uow_factory() as uow:
            progreso = await uow.progreso.latest_by_hoja(hoja_id)
        if not progreso:
            render_error(resp, NotFound("Progreso de la hoja", hoja_id))
            return
        resp.media = {"success": True, "progreso": progreso_to_dict(progreso)}
        resp.status = falcon.HTTP_200

    async def on_get_respuestas(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, hoja_id: int
    ) -> None:
        """Routing actions in order, numbered as sections for the print preview."""
        async with self._uow_factory() as uow:
            entries = await uow.progreso.list_by_hoja(hoja_id, newest_first=False)
            entries = [p for p in entries if p.accion is not None]
            unidades = {}
            responsables = {}
            for p in entries:
                if p.unidad_destino_id and p.unidad_destino_id not in unidades:
                    unidad = await uow.unidades.get_by_id(p.unidad_destino_id)
                    unidades[p.unidad_destino_id] = unidad.nombre if unidad else None
                if p.responsable_id and p.responsable_id not in responsables:
                    usuario = await uow.usuarios.get_by_id(p.responsable_id)
                    responsables[p.responsable_id] = usuario.nombre_completo if usuario else None

        respuestas = [
            {
                "seccion": i,
                "destino": unidades.get(p.unidad_destino_id) or p.ubicacion_actual or "",
                "fecha_recepcion": p.fecha_registro.isoformat() if p.fecha_registro else None,
                "instrucciones": p.notas or "",
                "respuesta": p.respuesta or "",
                "accion": p.accion.value,
                "responsable": responsables.get(p.responsable_id),
            }
            for i, p in enumerate(entries, start=1)
        ]
        resp.media = {"success": True, "total": len(respuestas), "respuestas": respuestas}
        resp.status = falcon.HTTP_200


class ProgresoResource:
    """PUT/DELETE /api/progreso/{progreso_id} - admin corrections."""

    def __init__(
        self,
        actualizar: ActualizarProgresoUseCase,
        eliminar: EliminarProgresoUseCase,
        permission_checker: PermissionChecker,
    ) -> None:
        self._actualizar = actualizar
        self._eliminar = eliminar
        self._permission_checker = permission_checker

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, progreso_id: int
    ) -> None:
        try:
            require(req, self._permission_checker, PermissionAction.ADMIN)
            body = await read_json(req)
            progreso = await self._actualizar.execute(
                progreso_id,
                ubicacion_anterior=body.get("ubicacion_anterior"),
                ubicacion_actual=body.get("ubicacion_actual"),
                notas=body.get("notas"),
            )
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {
            "success": True,
            "message": "Progreso actualizado exitosamente",
            "progreso": progreso_to_dict(progreso),
        }
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, progreso_id: int
    ) -> None:
        try:
            require(req, self._permission_checker, PermissionAction.ADMIN)
            await self._eliminar.execute(progreso_id)
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {"success": True, "message": "Progreso eliminado exitosamente"}
        resp.status = falcon.HTTP_200
