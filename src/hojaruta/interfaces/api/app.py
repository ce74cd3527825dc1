"""Falcon ASGI application."""

from collections.abc import Awaitable, Callable
from datetime import date

import falcon.asgi
from falcon.asgi import App
from psycopg_pool import AsyncConnectionPool

from hojaruta.application.ports import PasswordHasher, PermissionChecker, TokenProvider
from hojaruta.application.use_cases.auth.login import LoginUseCase, RefrescarTokenUseCase
from hojaruta.application.use_cases.envio.enviar_a_unidad import EnviarAUnidadUseCase
from hojaruta.application.use_cases.envio.marcar_recibido import MarcarRecibidoUseCase
from hojaruta.application.use_cases.envio.redirigir_envio import RedirigirEnvioUseCase
from hojaruta.application.use_cases.envio.responder_envio import ResponderEnvioUseCase
from hojaruta.application.use_cases.historial.registrar_actividad import (
    RegistrarActividadUseCase,
)
from hojaruta.application.use_cases.hoja_ruta.actualizar_hoja_ruta import (
    ActualizarHojaRutaUseCase,
)
from hojaruta.application.use_cases.hoja_ruta.cambiar_estado import (
    CambiarEstadoUseCase,
    CambiarUbicacionUseCase,
    EliminarHojaRutaUseCase,
)
from hojaruta.application.use_cases.hoja_ruta.crear_hoja_ruta import CrearHojaRutaUseCase
from hojaruta.application.use_cases.notificacion.generar_avisos import (
    GenerarAvisosVencimientoUseCase,
)
from hojaruta.application.use_cases.notificacion.gestionar_notificaciones import (
    CrearNotificacionUseCase,
    MarcarLeidaUseCase,
    MarcarTodasLeidasUseCase,
)
from hojaruta.application.use_cases.progreso.agregar_progreso import AgregarProgresoUseCase
from hojaruta.application.use_cases.progreso.gestionar_progreso import (
    ActualizarProgresoUseCase,
    EliminarProgresoUseCase,
)
from hojaruta.application.use_cases.unidad.gestionar_unidad import (
    ActualizarUnidadUseCase,
    CrearUnidadUseCase,
    EliminarUnidadUseCase,
)
from hojaruta.application.use_cases.usuario.crear_usuario import CrearUsuarioUseCase
from hojaruta.config import Settings
from hojaruta.interfaces.api.errors import unexpected_error_handler
from hojaruta.interfaces.api.middleware.auth import AuthMiddleware
from hojaruta.interfaces.api.middleware.cors import CORSMiddleware
from hojaruta.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from hojaruta.interfaces.api.middleware.security import (
    PayloadLimitMiddleware,
    SecurityHeadersMiddleware,
)
from hojaruta.interfaces.api.resources.auth import LoginResource, RefreshResource, SessionResource
from hojaruta.interfaces.api.resources.envios import EnvioResource, EnviosResource
from hojaruta.interfaces.api.resources.health import HealthResource
from hojaruta.interfaces.api.resources.historial import HistorialResource
from hojaruta.interfaces.api.resources.hojas_ruta import (
    EstadisticasResource,
    HojaRutaResource,
    HojasRutaResource,
)
from hojaruta.interfaces.api.resources.notificaciones import (
    NotificacionesResource,
    NotificacionesUsuarioResource,
    NotificacionResource,
)
from hojaruta.interfaces.api.resources.progreso import (
    ProgresoHojaResource,
    ProgresoListResource,
    ProgresoResource,
)
from hojaruta.interfaces.api.resources.unidades import (
    UnidadesResource,
    UnidadResource,
    UnidadUsuariosResource,
)
from hojaruta.interfaces.api.resources.usuarios import UsuariosResource


def create_api_app(
    *,
    uow_factory,
    token_provider: TokenProvider,
    password_hasher: PasswordHasher,
    permission_checker: PermissionChecker,
    settings: Settings,
    pool: AsyncConnectionPool | None = None,
    ready_check: Callable[[], Awaitable[bool]] | None = None,
    today: Callable[[], date] = date.today,
) -> App:
    """Build use cases, resources and middleware around the given adapters."""
    capacity = settings.ledger_capacity

    middleware = [CORSMiddleware(settings.cors_origin_list)]
    if pool is not None:
        middleware.append(PoolLifespanMiddleware(pool))
    middleware += [
        SecurityHeadersMiddleware(hsts=settings.environment == "production"),
        PayloadLimitMiddleware(settings.max_payload_bytes),
        AuthMiddleware(token_provider),
    ]
    app = falcon.asgi.App(middleware=middleware)
    app.add_error_handler(
        Exception, unexpected_error_handler(settings.environment == "development")
    )

    health = HealthResource(ready_check)
    app.add_route("/api/health", health)
    app.add_route("/api/health/ready", health, suffix="ready")

    login = LoginUseCase(uow_factory, token_provider, password_hasher)
    session = SessionResource()
    app.add_route("/api/auth/login", LoginResource(login))
    app.add_route("/api/auth/refresh", RefreshResource(RefrescarTokenUseCase(uow_factory, token_provider)))
    app.add_route("/api/auth/verify", session, suffix="verify")
    app.add_route("/api/auth/logout", session, suffix="logout")

    hojas = HojasRutaResource(
        CrearHojaRutaUseCase(uow_factory, capacity),
        uow_factory,
        permission_checker,
        today,
    )
    hoja = HojaRutaResource(
        ActualizarHojaRutaUseCase(uow_factory, capacity),
        CambiarEstadoUseCase(uow_factory),
        CambiarUbicacionUseCase(uow_factory),
        EliminarHojaRutaUseCase(uow_factory),
        uow_factory,
        permission_checker,
        today,
    )
    app.add_route("/api/hojas-ruta", hojas)
    app.add_route("/api/hojas-ruta/estadisticas/dashboard", EstadisticasResource(uow_factory))
    app.add_route("/api/hojas-ruta/{hoja_id:int}", hoja)
    app.add_route("/api/hojas-ruta/{hoja_id:int}/completar", hoja, suffix="completar")
    app.add_route("/api/hojas-ruta/{hoja_id:int}/estado", hoja, suffix="estado")
    app.add_route("/api/hojas-ruta/{hoja_id:int}/ubicacion", hoja, suffix="ubicacion")

    envios = EnviosResource(EnviarAUnidadUseCase(uow_factory, capacity, today), uow_factory)
    envio = EnvioResource(
        MarcarRecibidoUseCase(uow_factory, capacity, today),
        ResponderEnvioUseCase(uow_factory, capacity, today),
        RedirigirEnvioUseCase(uow_factory, capacity, today),
    )
    app.add_route("/api/enviar", envios)
    app.add_route("/api/enviar/a-unidad", envios, suffix="a_unidad")
    app.add_route("/api/enviar/mi-unidad", envios, suffix="mi_unidad")
    app.add_route("/api/enviar/destinos", envios, suffix="destinos")
    app.add_route("/api/enviar/{envio_id:int}/recibir", envio, suffix="recibir")
    app.add_route("/api/enviar/{envio_id:int}/responder", envio, suffix="responder")
    app.add_route("/api/enviar/{envio_id:int}/redirigir", envio, suffix="redirigir")

    progreso_list = ProgresoListResource(AgregarProgresoUseCase(uow_factory), uow_factory)
    progreso_hoja = ProgresoHojaResource(uow_factory)
    app.add_route("/api/progreso", progreso_list)
    app.add_route("/api/progreso/agregar", progreso_list, suffix="agregar")
    app.add_route("/api/progreso/agregar-multiple", progreso_list, suffix="agregar_multiple")
    app.add_route("/api/progreso/historial/{hoja_id:int}", progreso_hoja, suffix="historial")
    app.add_route("/api/progreso/ultimo/{hoja_id:int}", progreso_hoja, suffix="ultimo")
    app.add_route("/api/progreso/respuestas/{hoja_id:int}", progreso_hoja, suffix="respuestas")
    app.add_route(
        "/api/progreso/{progreso_id:int}",
        ProgresoResource(
            ActualizarProgresoUseCase(uow_factory),
            EliminarProgresoUseCase(uow_factory),
            permission_checker,
        ),
    )

    app.add_route(
        "/api/unidades",
        UnidadesResource(CrearUnidadUseCase(uow_factory), uow_factory, permission_checker),
    )
    app.add_route(
        "/api/unidades/{unidad_id:int}",
        UnidadResource(
            ActualizarUnidadUseCase(uow_factory),
            EliminarUnidadUseCase(uow_factory),
            uow_factory,
            permission_checker,
        ),
    )
    app.add_route("/api/unidades/{unidad_id:int}/usuarios", UnidadUsuariosResource(uow_factory))

    usuarios = UsuariosResource(
        CrearUsuarioUseCase(uow_factory, password_hasher), uow_factory, permission_checker
    )
    app.add_route("/api/usuarios", usuarios)
    app.add_route("/api/usuarios/me", usuarios, suffix="me")

    notificaciones = NotificacionesResource(
        CrearNotificacionUseCase(uow_factory),
        GenerarAvisosVencimientoUseCase(uow_factory, today),
        permission_checker,
    )
    por_usuario = NotificacionesUsuarioResource(
        MarcarTodasLeidasUseCase(uow_factory), uow_factory, permission_checker
    )
    app.add_route("/api/notificaciones", notificaciones)
    app.add_route("/api/notificaciones/generar-automaticas", notificaciones, suffix="generar")
    app.add_route("/api/notificaciones/usuario/{usuario_id:int}", por_usuario)
    app.add_route("/api/notificaciones/usuario/{usuario_id:int}/count", por_usuario, suffix="count")
    app.add_route(
        "/api/notificaciones/usuario/{usuario_id:int}/leer-todas", por_usuario, suffix="leer_todas"
    )
    app.add_route(
        "/api/notificaciones/{notificacion_id:int}/leer",
        NotificacionResource(MarcarLeidaUseCase(uow_factory), permission_checker),
        suffix="leer",
    )

    historial = HistorialResource(
        RegistrarActividadUseCase(uow_factory), uow_factory, permission_checker
    )
    app.add_route("/api/historial", historial)
    app.add_route("/api/historial/categorias", historial, suffix="categorias")
    app.add_route("/api/historial/estadisticas", historial, suffix="estadisticas")

    return app
