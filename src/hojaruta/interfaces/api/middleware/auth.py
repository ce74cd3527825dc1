"""Auth middleware - validates the bearer token and sets req.context.user."""

import logging
from dataclasses import dataclass

import falcon
import falcon.asgi

from hojaruta.application.ports import PermissionChecker, TokenProvider
from hojaruta.domain.exceptions import AuthenticationError, PermissionDenied
from hojaruta.domain.value_objects import PermissionAction
from hojaruta.interfaces.api.errors import render_error

logger = logging.getLogger(__name__)


@dataclass
class RequestUser:
    """User from request context."""

    user_id: int
    rol: str
    username: str | None = None


class AuthMiddleware:
    """Middleware that requires a valid access token on every non-public route.

    A resource opts out per HTTP method with a ``public_methods`` attribute,
    e.g. ``public_methods = {"GET"}``, or entirely with ``public = True``.
    """

    def __init__(self, token_provider: TokenProvider) -> None:
        self._tokens = token_provider

    async def process_resource(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, params
    ) -> None:
        req.context.user = None
        if resource is None or req.method == "OPTIONS":
            return
        is_public = getattr(resource, "public", False) or req.method in getattr(
            resource, "public_methods", ()
        )

        auth = req.get_header("Authorization")
        if not auth:
            if is_public:
                return
            logger.warning("Request without token: %s %s", req.method, req.path)
            self._reject(resp, falcon.HTTP_401, "Token de acceso requerido", "NO_TOKEN")
            return
        if not auth.startswith("Bearer "):
            if is_public:
                return
            logger.warning("Malformed Authorization header on %s", req.path)
            self._reject(
                resp,
                falcon.HTTP_401,
                "Formato de Authorization inválido (use Bearer <token>)",
                "INVALID_FORMAT",
            )
            return

        try:
            claims = self._tokens.decode_access(auth[7:].strip())
        except AuthenticationError as e:
            if is_public:
                return
            logger.warning("Token rejected on %s: %s", req.path, e.code)
            render_error(resp, e)
            resp.complete = True
            return

        req.context.user = RequestUser(
            user_id=claims.user_id, rol=claims.rol, username=claims.username
        )

    @staticmethod
    def _reject(resp: falcon.asgi.Response, status: str, message: str, code: str) -> None:
        resp.status = status
        resp.media = {"error": message, "code": code}
        resp.complete = True


def require(
    req: falcon.asgi.Request, checker: PermissionChecker, action: PermissionAction
) -> RequestUser:
    """Return the caller, or raise PermissionDenied if its role may not ``action``."""
    user = getattr(req.context, "user", None)
    if not user or not checker.check(user.rol, action):
        logger.warning(
            "Forbidden %s on %s for rol %r",
            action,
            req.path,
            user.rol if user else None,
        )
        raise PermissionDenied("No tienes permisos para realizar esta acción")
    return user
