"""Fixtures for API tests."""

from datetime import date

import pytest
from falcon.testing import TestClient

from hojaruta.application.ports import TokenClaims
from hojaruta.config import Settings
from hojaruta.domain.entities import Usuario
from hojaruta.infrastructure.auth.jwt_provider import JwtTokenProvider
from hojaruta.infrastructure.auth.password_hasher import WerkzeugPasswordHasher
from hojaruta.infrastructure.permission.permission_checker import RolePermissionChecker
from hojaruta.interfaces.api.app import create_api_app

from tests.conftest import FakeUnitOfWork, shared_uow_factory

PASSWORD = "clave-segura-1"
API_TODAY = date(2024, 3, 15)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jwt_secret="api-test-access-secret-0123456789abcdef",
        refresh_token_secret="api-test-refresh-secret-0123456789abcdef",
        cors_origins="http://localhost:5173",
        max_payload_bytes=4096,
        ledger_capacity=10,
        environment="development",
    )


@pytest.fixture
def token_provider(settings: Settings) -> JwtTokenProvider:
    return JwtTokenProvider(settings.jwt_secret, settings.refresh_token_secret)


@pytest.fixture
def seeded_uow(fake_uow: FakeUnitOfWork) -> FakeUnitOfWork:
    """Two units and one user per role."""
    hasher = WerkzeugPasswordHasher()
    legal = fake_uow.unidades.add("Legal")
    fake_uow.unidades.add("Contabilidad")
    for username, rol in (("admin", "admin"), ("secre", "secretaria"), ("juan", "usuario")):
        fake_uow.usuarios.add(
            Usuario(
                id=None,
                username=username,
                password_hash=hasher.hash(PASSWORD),
                nombre_completo=username.title(),
                rol=rol,
                unidad_id=legal.id,
            )
        )
    return fake_uow


@pytest.fixture
def app(seeded_uow, settings, token_provider):
    """Falcon ASGI app over the in-memory unit of work."""
    return create_api_app(
        uow_factory=shared_uow_factory(seeded_uow),
        token_provider=token_provider,
        password_hasher=WerkzeugPasswordHasher(),
        permission_checker=RolePermissionChecker(),
        settings=settings,
        today=lambda: API_TODAY,
    )


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)


@pytest.fixture
def headers(seeded_uow, token_provider):
    """Bearer headers for a seeded username."""

    def _headers(username: str = "admin") -> dict[str, str]:
        usuario = next(u for u in seeded_uow.usuarios._by_id.values() if u.username == username)
        token = token_provider.issue_access(
            TokenClaims(user_id=usuario.id, username=usuario.username, rol=usuario.rol)
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
