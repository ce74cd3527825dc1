"""Health check endpoints."""

from collections.abc import Awaitable, Callable

import falcon
import falcon.asgi

from hojaruta import __version__


class HealthResource:
    """Health and readiness endpoints."""

    public = True

    def __init__(self, ready_check: Callable[[], Awaitable[bool]] | None = None) -> None:
        self._ready_check = ready_check

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /api/health - liveness."""
        resp.media = {"status": "ok", "version": __version__}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /api/health/ready - readiness (database reachable)."""
        if self._ready_check and not await self._ready_check():
            resp.media = {"status": "unavailable", "database": "down"}
            resp.status = falcon.HTTP_503
            return
        resp.media = {"status": "ready", "database": "ok"}
        resp.status = falcon.HTTP_200
