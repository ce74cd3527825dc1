"""Envio (dispatch) API resources."""

import falcon
import falcon.asgi

from hojaruta.application.dto.envio_dto import RoutingResult
from hojaruta.application.use_cases.envio.enviar_a_unidad import EnviarAUnidadUseCase
from hojaruta.application.use_cases.envio.marcar_recibido import MarcarRecibidoUseCase
from hojaruta.application.use_cases.envio.redirigir_envio import RedirigirEnvioUseCase
from hojaruta.application.use_cases.envio.responder_envio import ResponderEnvioUseCase
from hojaruta.domain.exceptions import HojaRutaError
from hojaruta.interfaces.api.errors import render_error
from hojaruta.interfaces.api.serializers import envio_to_dict, unidad_to_dict
from hojaruta.interfaces.api.validators import parse_enviar, parse_redirigir, read_json


def _routing_media(result: RoutingResult, mensaje: str) -> dict:
    media = {
        "success": True,
        "envio": envio_to_dict(result.envio),
        "seccion": result.seccion,
        "mensaje": mensaje,
    }
    if result.advertencia:
        media["advertencia"] = result.advertencia
    return media


class EnviosResource:
    """GET /api/enviar plus the unit-scoped views and the send action."""

    def __init__(self, enviar: EnviarAUnidadUseCase, unit_of_work_factory: type) -> None:
        self._enviar = enviar
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        async with self._uow_factory() as uow:
            envios = await uow.envios.list_all()
        resp.media = {"success": True, "envios": [envio_to_dict(e) for e in envios]}
        resp.status = falcon.HTTP_200

    async def on_post_a_unidad(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """POST /api/enviar/a-unidad - send a document to a unit."""
        try:
            data = parse_enviar(await read_json(req))
            result = await self._enviar.execute(req.context.user.user_id, data)
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = _routing_media(
            result, f"Documento enviado a {result.envio.destinatario_nombre}"
        )
        resp.status = falcon.HTTP_201

    async def on_get_mi_unidad(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /api/enviar/mi-unidad - dispatches addressed to the caller's unit."""
        async with self._uow_factory() as uow:
            usuario = await uow.usuarios.get_by_id(req.context.user.user_id)
            unidad_id = usuario.unidad_id if usuario else None
            envios = await uow.envios.list_by_unidad(unidad_id) if unidad_id else []
        resp.media = {
            "success": True,
            "unidad_id": unidad_id,
            "envios": [envio_to_dict(e) for e in envios],
        }
        resp.status = falcon.HTTP_200

    async def on_get_destinos(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /api/enviar/destinos - active units a document can go to."""
        async with self._uow_factory() as uow:
            unidades = await uow.unidades.list_active()
        resp.media = {"success": True, "destinos": [unidad_to_dict(u) for u in unidades]}
        resp.status = falcon.HTTP_200


class EnvioResource:
    """PUT /api/enviar/{envio_id}/recibir|responder|redirigir."""

    def __init__(
        self,
        marcar_recibido: MarcarRecibidoUseCase,
        responder: ResponderEnvioUseCase,
        redirigir: RedirigirEnvioUseCase,
    ) -> None:
        self._marcar_recibido = marcar_recibido
        self._responder = responder
        self._redirigir = redirigir

    async def on_put_recibir(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, envio_id: int
    ) -> None:
        try:
            result = await self._marcar_recibido.execute(req.context.user.user_id, envio_id)
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = _routing_media(result, "Envío marcado como recibido")
        resp.status = falcon.HTTP_200

    async def on_put_responder(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, envio_id: int
    ) -> None:
        try:
            body = await read_json(req)
            result = await self._responder.execute(
                req.context.user.user_id, envio_id, body.get("respuesta")
            )
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = _routing_media(result, "Respuesta registrada")
        resp.status = falcon.HTTP_200

    async def on_put_redirigir(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, envio_id: int
    ) -> None:
        try:
            data = parse_redirigir(envio_id, await read_json(req))
            result = await self._redirigir.execute(req.context.user.user_id, data)
        except HojaRutaError as e:
            render_error(resp, e)
            return
        media = _routing_media(
            result, f"Documento redirigido a {result.nuevo_envio.destinatario_nombre}"
        )
        media["nuevoEnvio"] = envio_to_dict(result.nuevo_envio)
        resp.media = media
        resp.status = falcon.HTTP_200
