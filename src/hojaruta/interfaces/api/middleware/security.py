"""Security headers and request size limit."""

import logging

import falcon.asgi

from hojaruta.domain.exceptions import PayloadTooLarge
from hojaruta.interfaces.api.errors import render_error

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware:
    """Hardening headers on every response; HSTS only in production."""

    def __init__(self, hsts: bool = False) -> None:
        self._hsts = hsts

    async def process_response(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, req_succeeded
    ) -> None:
        resp.set_header("X-Content-Type-Options", "nosniff")
        resp.set_header("X-Frame-Options", "DENY")
        resp.set_header("Referrer-Policy", "strict-origin-when-cross-origin")
        resp.set_header("Permissions-Policy", "camera=(), microphone=(), geolocation=()")
        if self._hsts:
            resp.set_header(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains; preload"
            )
        if req.path.startswith("/api/") and req.method != "OPTIONS":
            resp.set_header("Cache-Control", "no-store, no-cache, must-revalidate, proxy-revalidate")
            resp.set_header("Pragma", "no-cache")
            resp.set_header("Expires", "0")


class PayloadLimitMiddleware:
    """Reject bodies over ``max_bytes``.

    A declared Content-Length is checked up front. The limit is also left in
    ``req.context`` so ``read_json`` can stop reading bodies sent without one.
    """

    def __init__(self, max_bytes: int) -> None:
        self._max_bytes = max_bytes

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        req.context.max_payload_bytes = self._max_bytes
        length = req.content_length
        if length is not None and length > self._max_bytes:
            logger.warning("Payload of %d bytes rejected on %s", length, req.path)
            render_error(resp, PayloadTooLarge(self._max_bytes))
            resp.complete = True
