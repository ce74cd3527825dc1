"""Map domain exceptions to HTTP responses."""

import logging

import falcon
import falcon.asgi

from hojaruta.domain.exceptions import (
    AuthenticationError,
    Conflict,
    HojaRutaError,
    InvalidToken,
    NotFound,
    PayloadTooLarge,
    PermissionDenied,
    ValidationError,
)

logger = logging.getLogger(__name__)

# First match wins, so subclasses come before their bases.
_STATUS = (
    (InvalidToken, falcon.HTTP_403),
    (AuthenticationError, falcon.HTTP_401),
    (PermissionDenied, falcon.HTTP_403),
    (NotFound, falcon.HTTP_404),
    (ValidationError, falcon.HTTP_400),
    (Conflict, falcon.HTTP_409),
    (PayloadTooLarge, falcon.HTTP_413),
)


def status_for(exc: HojaRutaError) -> str:
    for cls, status in _STATUS:
        if isinstance(exc, cls):
            return status
    return falcon.HTTP_500


def render_error(resp: falcon.asgi.Response, exc: HojaRutaError) -> None:
    """Write ``{"error", "code"}`` with the status matching the exception."""
    resp.status = status_for(exc)
    resp.media = {"error": str(exc), "code": exc.code}
    field = getattr(exc, "field", None)
    if field:
        resp.media["field"] = field


def unexpected_error_handler(expose_detail: bool):
    """App-level handler for anything a resource did not map."""

    async def handle(req: falcon.asgi.Request, resp: falcon.asgi.Response, ex, params) -> None:
        logger.exception("Unhandled error on %s %s", req.method, req.path)
        resp.status = falcon.HTTP_500
        resp.media = {"error": "Error interno del servidor", "code": "INTERNAL_ERROR"}
        if expose_detail:
            resp.media["detalle"] = f"{type(ex).__name__}: {ex}"

    return handle
