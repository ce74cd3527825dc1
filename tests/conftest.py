"""Pytest fixtures for hoja de ruta tests."""

from __future__ import annotations

import copy
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime

import pytest

from hojaruta.domain.entities import (
    Actividad,
    Envio,
    HojaRuta,
    Notificacion,
    Progreso,
    Unidad,
    Usuario,
)
from hojaruta.domain.value_objects import EstadoCumplimiento


# --- Fake repositories ---


class FakeHojaRutaRepository:
    """In-memory hoja de ruta repository; ids are assigned on create."""

    def __init__(self) -> None:
        self._by_id: dict[int, HojaRuta] = {}
        self._next_id = 1
        self.locked: list[int] = []

    def add(self, hoja: HojaRuta) -> HojaRuta:
        if hoja.id is None:
            hoja.id = self._next_id
        self._next_id = max(self._next_id, hoja.id + 1)
        self._by_id[hoja.id] = hoja
        return hoja

    async def get_by_id(
        self,
        hoja_id: int,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> HojaRuta | None:
        hoja = self._by_id.get(hoja_id)
        if not hoja or (not include_deleted and hoja.eliminado_en):
            return None
        if for_update:
            self.locked.append(hoja_id)
        return hoja

    async def list(
        self,
        *,
        query: str | None = None,
        estado_cumplimiento: str | None = None,
        incluir_completadas: bool = True,
    ) -> list[HojaRuta]:
        items = [h for h in self._by_id.values() if h.eliminado_en is None]
        if query:
            q = query.lower()
            items = [
                h
                for h in items
                if q in h.numero_hr.lower()
                or q in h.referencia.lower()
                or q in h.procedencia.lower()
            ]
        if estado_cumplimiento:
            items = [h for h in items if h.estado_cumplimiento == estado_cumplimiento]
        if not incluir_completadas:
            items = [
                h for h in items if h.estado_cumplimiento is not EstadoCumplimiento.COMPLETADO
            ]
        return sorted(items, key=lambda h: h.id)

    async def create(self, hoja: HojaRuta) -> HojaRuta:
        hoja.fecha_ingreso = hoja.fecha_ingreso or datetime.now(UTC)
        return self.add(hoja)

    async def update(self, hoja: HojaRuta) -> HojaRuta:
        self._by_id[hoja.id] = hoja
        return hoja

    async def soft_delete(self, hoja_id: int) -> bool:
        hoja = self._by_id.get(hoja_id)
        if not hoja or hoja.eliminado_en:
            return False
        hoja.eliminado_en = datetime.now(UTC)
        return True

    async def estadisticas(self) -> dict[str, int]:
        items = [h for h in self._by_id.values() if h.eliminado_en is None]
        today = date.today()

        def dias(h: HojaRuta) -> int | None:
            return h.dias_para_vencimiento(today)

        abiertas = [
            h
            for h in items
            if h.estado_cumplimiento is not EstadoCumplimiento.COMPLETADO and dias(h) is not None
        ]
        return {
            "total": len(items),
            "pendientes": sum(h.estado_cumplimiento == "pendiente" for h in items),
            "en_proceso": sum(h.estado_cumplimiento == "en_proceso" for h in items),
            "completadas": sum(h.estado_cumplimiento == "completado" for h in items),
            "vencidas": sum(h.estado_cumplimiento == "vencido" for h in items),
            "criticas": sum(dias(h) <= 3 for h in abiertas),
            "proximas_vencer": sum(4 <= dias(h) <= 7 for h in abiertas),
        }


class FakeEnvioRepository:
    """In-memory envio repository."""

    def __init__(self) -> None:
        self._by_id: dict[int, Envio] = {}
        self._next_id = 1

    async def get_by_id(self, envio_id: int, for_update: bool = False) -> Envio | None:
        return self._by_id.get(envio_id)

    async def list_all(self) -> list[Envio]:
        return sorted(self._by_id.values(), key=lambda e: e.id, reverse=True)

    async def list_by_unidad(self, unidad_id: int) -> list[Envio]:
        return [e for e in await self.list_all() if e.unidad_destino_id == unidad_id]

    async def list_by_hoja(self, hoja_id: int) -> list[Envio]:
        return [e for e in await self.list_all() if e.hoja_id == hoja_id]

    async def create(self, envio: Envio) -> Envio:
        envio.id = self._next_id
        self._next_id += 1
        self._by_id[envio.id] = envio
        return envio

    async def update(self, envio: Envio) -> Envio:
        self._by_id[envio.id] = envio
        return envio


class FakeProgresoRepository:
    """In-memory progress ledger; insertion order stands in for fecha_registro."""

    def __init__(self) -> None:
        self._store: list[Progreso] = []
        self._next_id = 1

    async def get_by_id(self, progreso_id: int) -> Progreso | None:
        return next((p for p in self._store if p.id == progreso_id), None)

    async def list_by_hoja(self, hoja_id: int, newest_first: bool = True) -> list[Progreso]:
        items = [p for p in self._store if p.hoja_ruta_id == hoja_id]
        return list(reversed(items)) if newest_first else items

    async def latest_by_hoja(self, hoja_id: int) -> Progreso | None:
        items = await self.list_by_hoja(hoja_id)
        return items[0] if items else None

    async def list_latest(
        self, *, limit: int = 50, offset: int = 0
    ) -> tuple[list[Progreso], int]:
        latest: dict[int, Progreso] = {}
        for p in self._store:
            latest[p.hoja_ruta_id] = p
        items = sorted(latest.values(), key=lambda p: p.id, reverse=True)
        return items[offset : offset + limit], len(latest)

    async def create(self, progreso: Progreso) -> Progreso:
        progreso.id = self._next_id
        self._next_id += 1
        progreso.fecha_registro = progreso.fecha_registro or datetime.now(UTC)
        self._store.append(progreso)
        return progreso

    async def update(self, progreso: Progreso) -> Progreso:
        return progreso

    async def delete(self, progreso_id: int) -> bool:
        before = len(self._store)
        self._store = [p for p in self._store if p.id != progreso_id]
        return len(self._store) < before

    def by_accion(self, accion: str) -> list[Progreso]:
        return [p for p in self._store if p.accion == accion]


class FakeUnidadRepository:
    """In-memory unidad repository."""

    def __init__(self) -> None:
        self._by_id: dict[int, Unidad] = {}
        self._next_id = 1

    def add(self, nombre: str, activo: bool = True) -> Unidad:
        unidad = Unidad(id=self._next_id, nombre=nombre, activo=activo)
        self._next_id += 1
        self._by_id[unidad.id] = unidad
        return unidad

    async def get_by_id(self, unidad_id: int) -> Unidad | None:
        return self._by_id.get(unidad_id)

    async def get_by_nombre(self, nombre: str) -> Unidad | None:
        return next(
            (u for u in self._by_id.values() if u.nombre.lower() == nombre.lower()), None
        )

    async def list_active(self) -> list[Unidad]:
        return sorted((u for u in self._by_id.values() if u.activo), key=lambda u: u.nombre)

    async def create(self, unidad: Unidad) -> Unidad:
        unidad.id = self._next_id
        self._next_id += 1
        self._by_id[unidad.id] = unidad
        return unidad

    async def update(self, unidad: Unidad) -> Unidad:
        self._by_id[unidad.id] = unidad
        return unidad

    async def deactivate(self, unidad_id: int) -> bool:
        unidad = self._by_id.get(unidad_id)
        if not unidad or not unidad.activo:
            return False
        unidad.activo = False
        return True


class FakeUsuarioRepository:
    """In-memory usuario repository."""

    def __init__(self) -> None:
        self._by_id: dict[int, Usuario] = {}
        self._next_id = 1
        self.logins: list[int] = []

    def add(self, usuario: Usuario) -> Usuario:
        usuario.id = self._next_id
        self._next_id += 1
        self._by_id[usuario.id] = usuario
        return usuario

    async def get_by_id(self, usuario_id: int) -> Usuario | None:
        return self._by_id.get(usuario_id)

    async def get_by_username(self, username: str) -> Usuario | None:
        return next(
            (u for u in self._by_id.values() if u.username.lower() == username.lower()),
            None,
        )

    async def list(self, *, unidad_id: int | None = None) -> list[Usuario]:
        items = [u for u in self._by_id.values() if u.activo]
        if unidad_id is not None:
            items = [u for u in items if u.unidad_id == unidad_id]
        return sorted(items, key=lambda u: u.nombre_completo)

    async def create(self, usuario: Usuario) -> Usuario:
        return self.add(usuario)

    async def touch_login(self, usuario_id: int) -> None:
        self.logins.append(usuario_id)


class FakeNotificacionRepository:
    """In-memory notification repository."""

    def __init__(self) -> None:
        self._by_id: dict[int, Notificacion] = {}
        self._next_id = 1

    async def get_by_id(self, notificacion_id: int) -> Notificacion | None:
        return self._by_id.get(notificacion_id)

    async def list_by_usuario(
        self, usuario_id: int, solo_no_leidas: bool = False
    ) -> list[Notificacion]:
        items = [n for n in self._by_id.values() if n.usuario_id == usuario_id]
        if solo_no_leidas:
            items = [n for n in items if not n.leida]
        return sorted(items, key=lambda n: n.id, reverse=True)

    async def count_unread(self, usuario_id: int) -> int:
        return len(await self.list_by_usuario(usuario_id, solo_no_leidas=True))

    async def has_unread(self, usuario_id: int, hoja_ruta_id: int, tipo: str) -> bool:
        return any(
            n.hoja_ruta_id == hoja_ruta_id and n.tipo == tipo
            for n in await self.list_by_usuario(usuario_id, solo_no_leidas=True)
        )

    async def create(self, notificacion: Notificacion) -> Notificacion:
        notificacion.id = self._next_id
        self._next_id += 1
        notificacion.created_at = notificacion.created_at or datetime.now(UTC)
        self._by_id[notificacion.id] = notificacion
        return notificacion

    async def mark_read(self, notificacion: Notificacion) -> Notificacion:
        self._by_id[notificacion.id] = notificacion
        return notificacion

    async def mark_all_read(self, usuario_id: int) -> int:
        unread = await self.list_by_usuario(usuario_id, solo_no_leidas=True)
        now = datetime.now(UTC)
        for n in unread:
            n.marcar_leida(now)
        return len(unread)


class FakeActividadRepository:
    """In-memory activity history; insertion order stands in for fecha_actividad."""

    def __init__(self) -> None:
        self._store: list[Actividad] = []
        self._next_id = 1

    async def list_recent(
        self, *, tipo: str | None = None, limit: int = 50, offset: int = 0
    ) -> list[Actividad]:
        items = [a for a in reversed(self._store) if not tipo or a.tipo == tipo]
        return items[offset : offset + limit]

    async def count_by_tipo(self, since: datetime) -> dict[str, int]:
        counts: dict[str, int] = {}
        for a in self._store:
            if a.fecha_actividad >= since:
                counts[a.tipo.value] = counts.get(a.tipo.value, 0) + 1
        return counts

    async def create(self, actividad: Actividad) -> Actividad:
        actividad.id = self._next_id
        self._next_id += 1
        actividad.fecha_actividad = actividad.fecha_actividad or datetime.now(UTC)
        self._store.append(actividad)
        return actividad

    def by_tipo(self, tipo: str) -> list[Actividad]:
        return [a for a in self._store if a.tipo == tipo]


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories.

    Writes are staged: ``begin`` snapshots every repository, ``commit`` keeps
    the current state and ``rollback`` puts the snapshot back. Entities are
    mutated in place by use cases, so the snapshot is a deep copy.
    """

    def __init__(self) -> None:
        self.hojas = FakeHojaRutaRepository()
        self.envios = FakeEnvioRepository()
        self.progreso = FakeProgresoRepository()
        self.unidades = FakeUnidadRepository()
        self.usuarios = FakeUsuarioRepository()
        self.notificaciones = FakeNotificacionRepository()
        self.actividades = FakeActividadRepository()
        self.commits = 0
        self.rollbacks = 0
        self._snapshots: list[dict[str, dict]] = []

    def _repositories(self) -> dict[str, object]:
        return {
            "hojas": self.hojas,
            "envios": self.envios,
            "progreso": self.progreso,
            "unidades": self.unidades,
            "usuarios": self.usuarios,
            "notificaciones": self.notificaciones,
            "actividades": self.actividades,
        }

    def begin(self) -> None:
        self._snapshots.append(
            {name: copy.deepcopy(vars(repo)) for name, repo in self._repositories().items()}
        )

    async def commit(self) -> None:
        if self._snapshots:
            self._snapshots.pop()
        self.commits += 1

    async def rollback(self) -> None:
        if not self._snapshots:
            return
        snapshot = self._snapshots.pop()
        for name, repo in self._repositories().items():
            state = vars(repo)
            state.clear()
            state.update(snapshot[name])
        self.rollbacks += 1


def shared_uow_factory(uow: FakeUnitOfWork):
    """Factory whose every call yields the same FakeUnitOfWork in a new transaction."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        uow.begin()
        try:
            yield uow
            await uow.commit()
        except BaseException:
            await uow.rollback()
            raise

    return _factory


def make_hoja(numero_hr: str = "HR-001", **kwargs) -> HojaRuta:
    kwargs.setdefault("referencia", "Solicitud de material")
    kwargs.setdefault("procedencia", "Despacho")
    kwargs.setdefault("ubicacion_actual", "SEDEGES - Sede Central")
    return HojaRuta(id=None, numero_hr=numero_hr, **kwargs)


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory sharing ``fake_uow`` across calls, so state survives between use cases."""
    return shared_uow_factory(fake_uow)


@pytest.fixture
def local_today() -> date:
    """Fixed local calendar date for ledger stamps."""
    return date(2024, 3, 15)
