"""Authentication endpoints."""

import logging

import falcon
import falcon.asgi

from hojaruta.application.use_cases.auth.login import LoginUseCase, RefrescarTokenUseCase
from hojaruta.domain.exceptions import HojaRutaError
from hojaruta.interfaces.api.errors import render_error
from hojaruta.interfaces.api.serializers import usuario_to_dict
from hojaruta.interfaces.api.validators import read_json

logger = logging.getLogger(__name__)


class LoginResource:
    """POST /api/auth/login."""

    public = True

    def __init__(self, login: LoginUseCase) -> None:
        self._login = login

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            body = await read_json(req)
            result = await self._login.execute(body.get("username"), body.get("password"))
        except HojaRutaError as e:
            render_error(resp, e)
            return

        resp.media = {
            "token": result.token,
            "refreshToken": result.refresh_token,
            "usuario": usuario_to_dict(result.usuario, result.unidad_nombre),
        }
        resp.status = falcon.HTTP_200


class RefreshResource:
    """POST /api/auth/refresh - new access token from a refresh token."""

    public = True

    def __init__(self, refresh: RefrescarTokenUseCase) -> None:
        self._refresh = refresh

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            body = await read_json(req)
            token = await self._refresh.execute(
                body.get("refreshToken") or body.get("refresh_token")
            )
        except HojaRutaError as e:
            render_error(resp, e)
            return
        resp.media = {"token": token}
        resp.status = falcon.HTTP_200


class SessionResource:
    """GET /api/auth/verify and POST /api/auth/logout.

    Tokens are stateless, so logout only acknowledges; the client drops them.
    """

    async def on_get_verify(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = req.context.user
        resp.media = {
            "valid": True,
            "usuario": {"id": user.user_id, "username": user.username, "rol": user.rol},
        }
        resp.status = falcon.HTTP_200

    async def on_post_logout(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        logger.info("User %s logged out", req.context.user.user_id)
        resp.media = {"message": "Sesión cerrada"}
        resp.status = falcon.HTTP_200
