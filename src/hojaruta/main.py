"""Application entry point and composition root."""

import logging

from falcon.asgi import App

from hojaruta import __version__
from hojaruta.config import Settings, get_settings
from hojaruta.infrastructure.auth.jwt_provider import JwtTokenProvider
from hojaruta.infrastructure.auth.password_hasher import WerkzeugPasswordHasher
from hojaruta.infrastructure.permission.permission_checker import RolePermissionChecker
from hojaruta.infrastructure.persistence.postgres.connection import create_pool, ping
from hojaruta.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from hojaruta.interfaces.api.app import create_api_app

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings | None = None) -> None:
    """Root logger at the configured level; DEBUG when ``debug`` is set."""
    settings = settings or get_settings()
    level = "DEBUG" if settings.debug else settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("psycopg.pool").setLevel(logging.WARNING)


def create_app() -> App:
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    pool = create_pool(
        settings.database_url,
        min_size=settings.db_pool_min,
        max_size=settings.db_pool_max,
        timeout=settings.db_connect_timeout,
        max_idle=settings.db_idle_timeout,
    )
    uow_factory = create_uow_factory(pool)

    token_provider = JwtTokenProvider(
        secret=settings.jwt_secret,
        refresh_secret=settings.refresh_token_secret,
        expiry_seconds=settings.token_expiry_seconds,
        refresh_expiry_seconds=settings.refresh_token_expiry_seconds,
    )

    async def ready_check() -> bool:
        return await ping(pool)

    logger.info(
        "Hoja de ruta API v%s (%s), ledger capacity %d",
        __version__,
        settings.environment,
        settings.ledger_capacity,
    )
    return create_api_app(
        uow_factory=uow_factory,
        token_provider=token_provider,
        password_hasher=WerkzeugPasswordHasher(),
        permission_checker=RolePermissionChecker(),
        settings=settings,
        pool=pool,
        ready_check=ready_check,
    )


def run_server(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Run uvicorn server."""
    import uvicorn

    configure_logging()
    uvicorn.run(create_app(), host=host, port=port, log_config=None)


def main() -> None:
    """CLI entry point."""
    print(f"hojaruta v{__version__}")
    run_server()


if __name__ == "__main__":
    main()
