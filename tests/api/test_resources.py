"""API resource tests."""

import pytest
from falcon.testing import TestClient

from tests.api.conftest import PASSWORD

HOJA = {
    "numero_hr": "HR-2024-010",
    "referencia": "Solicitud de material",
    "procedencia": "Despacho",
    "fecha_limite": "2024-03-20",
    "prioridad": "urgente",
    "cite_externo": "CITE-77",
}


def _crear_hoja(client: TestClient, headers, **overrides) -> dict:
    r = client.simulate_post("/api/hojas-ruta", json={**HOJA, **overrides}, headers=headers("secre"))
    assert r.status_code == 201, r.json
    return r.json["hoja"]


def _enviar(client: TestClient, headers, hoja_id: int, unidad_id: int = 1) -> dict:
    r = client.simulate_post(
        "/api/enviar/a-unidad",
        json={"hoja_id": hoja_id, "unidad_id": unidad_id},
        headers=headers("juan"),
    )
    assert r.status_code == 201, r.json
    return r.json


class TestAuthentication:
    def test_missing_token(self, client: TestClient) -> None:
        r = client.simulate_get("/api/hojas-ruta")
        assert r.status_code == 401
        assert r.json["code"] == "NO_TOKEN"

    def test_malformed_header(self, client: TestClient) -> None:
        r = client.simulate_get("/api/hojas-ruta", headers={"Authorization": "Token abc"})
        assert r.status_code == 401
        assert r.json["code"] == "INVALID_FORMAT"

    def test_invalid_token(self, client: TestClient) -> None:
        r = client.simulate_get("/api/hojas-ruta", headers={"Authorization": "Bearer nope"})
        assert r.status_code == 403
        assert r.json["code"] == "INVALID_TOKEN"

    def test_login_returns_tokens_and_profile(self, client: TestClient, seeded_uow) -> None:
        r = client.simulate_post("/api/auth/login", json={"username": "ADMIN", "password": PASSWORD})
        assert r.status_code == 200
        assert r.json["token"]
        assert r.json["refreshToken"]
        usuario = r.json["usuario"]
        assert usuario["username"] == "admin"
        assert usuario["unidad_nombre"] == "Legal"
        assert "password_hash" not in usuario
        assert seeded_uow.usuarios.logins == [usuario["id"]]

    def test_login_bad_password(self, client: TestClient) -> None:
        r = client.simulate_post("/api/auth/login", json={"username": "admin", "password": "x"})
        assert r.status_code == 401
        assert r.json["code"] == "INVALID_CREDENTIALS"

    def test_login_short_username(self, client: TestClient) -> None:
        r = client.simulate_post("/api/auth/login", json={"username": "a", "password": "x"})
        assert r.status_code == 400
        assert r.json["field"] == "username"

    def test_refresh_and_verify(self, client: TestClient) -> None:
        login = client.simulate_post(
            "/api/auth/login", json={"username": "secre", "password": PASSWORD}
        )
        r = client.simulate_post(
            "/api/auth/refresh", json={"refreshToken": login.json["refreshToken"]}
        )
        assert r.status_code == 200

        v = client.simulate_get(
            "/api/auth/verify", headers={"Authorization": f"Bearer {r.json['token']}"}
        )
        assert v.status_code == 200
        assert v.json["usuario"]["rol"] == "secretaria"

    def test_access_token_cannot_refresh(self, client: TestClient, headers) -> None:
        token = headers("admin")["Authorization"][7:]
        r = client.simulate_post("/api/auth/refresh", json={"refreshToken": token})
        assert r.status_code == 403

    def test_logout(self, client: TestClient, headers) -> None:
        r = client.simulate_post("/api/auth/logout", headers=headers())
        assert r.status_code == 200


class TestHojasRuta:
    def test_create_requires_write_role(self, client: TestClient, headers) -> None:
        r = client.simulate_post("/api/hojas-ruta", json=HOJA, headers=headers("juan"))
        assert r.status_code == 403
        assert r.json["code"] == "FORBIDDEN"

    def test_create_validates(self, client: TestClient, headers) -> None:
        r = client.simulate_post(
            "/api/hojas-ruta", json={**HOJA, "fecha_limite": ""}, headers=headers("secre")
        )
        assert r.status_code == 400
        assert r.json["code"] == "VALIDATION_ERROR"
        assert r.json["field"] == "fecha_limite"

    def test_create_and_read_back(self, client: TestClient, headers) -> None:
        hoja = _crear_hoja(client, headers)
        assert hoja["estado"] == "pendiente"
        assert hoja["dias_para_vencimiento"] == 5
        assert hoja["alerta_vencimiento"] == "Próxima a vencer"

        r = client.simulate_get(f"/api/hojas-ruta/{hoja['id']}", headers=headers("juan"))
        assert r.status_code == 200
        assert r.json["hoja"]["cite_externo"] == "CITE-77"
        assert r.json["hoja"]["numero_hr"] == "HR-2024-010"

    def test_list_filters(self, client: TestClient, headers) -> None:
        _crear_hoja(client, headers)
        _crear_hoja(client, headers, numero_hr="HR-2024-011", referencia="Viaje")
        r = client.simulate_get("/api/hojas-ruta", params={"query": "viaje"}, headers=headers("juan"))
        assert r.status_code == 200
        assert [h["numero_hr"] for h in r.json["hojas"]] == ["HR-2024-011"]

    def test_unknown_hoja(self, client: TestClient, headers) -> None:
        r = client.simulate_get("/api/hojas-ruta/999", headers=headers())
        assert r.status_code == 404
        assert r.json["code"] == "NOT_FOUND"

    def test_update_merges_details(self, client: TestClient, headers) -> None:
        hoja = _crear_hoja(client, headers)
        r = client.simulate_put(
            f"/api/hojas-ruta/{hoja['id']}",
            json={"referencia": "Nueva referencia", "nota_interna": "ver anexo"},
            headers=headers("secre"),
        )
        assert r.status_code == 200
        assert r.json["hoja"]["referencia"] == "Nueva referencia"
        assert r.json["hoja"]["nota_interna"] == "ver anexo"
        assert r.json["hoja"]["cite_externo"] == "CITE-77"

    @pytest.mark.parametrize("field", ["estado", "prioridad"])
    def test_update_rejects_null_enum(self, client: TestClient, headers, field: str) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        r = client.simulate_put(
            f"/api/hojas-ruta/{hoja_id}", json={field: None}, headers=headers("secre")
        )
        assert r.status_code == 400
        assert r.json["code"] == "VALIDATION_ERROR"
        assert r.json["field"] == field

    def test_complete_change_state_and_location(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]

        r = client.simulate_patch(
            f"/api/hojas-ruta/{hoja_id}/estado",
            json={"estado_cumplimiento": "terminado"},
            headers=headers("secre"),
        )
        assert r.status_code == 400

        r = client.simulate_patch(
            f"/api/hojas-ruta/{hoja_id}/ubicacion",
            json={"ubicacion_actual": "Archivo central"},
            headers=headers("secre"),
        )
        assert r.json["hoja"]["ubicacion_actual"] == "Archivo central"

        r = client.simulate_patch(f"/api/hojas-ruta/{hoja_id}/completar", headers=headers("secre"))
        assert r.status_code == 200
        assert r.json["hoja"]["estado_cumplimiento"] == "completado"
        assert r.json["hoja"]["fecha_completado"]

    def test_soft_delete(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        r = client.simulate_delete(f"/api/hojas-ruta/{hoja_id}", headers=headers("secre"))
        assert r.status_code == 200
        r = client.simulate_get(f"/api/hojas-ruta/{hoja_id}", headers=headers())
        assert r.status_code == 404

    def test_dashboard(self, client: TestClient, headers) -> None:
        _crear_hoja(client, headers)
        r = client.simulate_get("/api/hojas-ruta/estadisticas/dashboard", headers=headers("juan"))
        assert r.status_code == 200
        assert r.json["estadisticas"]["total"] == 1
        assert r.json["estadisticas"]["pendientes"] == 1


class TestEnvios:
    def test_send_receive_respond(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        sent = _enviar(client, headers, hoja_id)
        assert sent["success"] is True
        assert sent["seccion"] == 1
        assert sent["envio"]["estado"] == "enviado"
        assert sent["mensaje"] == "Documento enviado a Legal"
        envio_id = sent["envio"]["id"]

        r = client.simulate_put(f"/api/enviar/{envio_id}/recibir", headers=headers("juan"))
        assert r.status_code == 200
        assert r.json["seccion"] == 1
        assert r.json["envio"]["estado"] == "recibido"

        r = client.simulate_put(
            f"/api/enviar/{envio_id}/responder", json={"respuesta": "OK"}, headers=headers("juan")
        )
        assert r.status_code == 200
        assert r.json["seccion"] == 2
        assert r.json["envio"]["respuesta"] == "OK"

        hoja = client.simulate_get(f"/api/hojas-ruta/{hoja_id}", headers=headers()).json["hoja"]
        assert hoja["estado"] == "respondida"
        secciones = hoja["secciones_adicionales"]
        assert secciones[0]["fecha_recepcion"] == "2024-03-15"
        assert secciones[1]["respuesta"] == "OK"

    def test_receive_with_numeric_destination_in_ledger(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(
            client,
            headers,
            secciones_adicionales=[{"seccion": 2, "fecha_enviado": "2024-03-01", "destino": 7}],
        )["id"]
        sent = _enviar(client, headers, hoja_id)
        assert sent["seccion"] == 1

        r = client.simulate_put(f"/api/enviar/{sent['envio']['id']}/recibir", headers=headers("juan"))
        assert r.status_code == 200
        assert r.json["seccion"] == 1

    def test_receive_twice_is_invalid_transition(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        envio_id = _enviar(client, headers, hoja_id)["envio"]["id"]
        client.simulate_put(f"/api/enviar/{envio_id}/recibir", headers=headers("juan"))
        r = client.simulate_put(f"/api/enviar/{envio_id}/recibir", headers=headers("juan"))
        assert r.status_code == 400
        assert r.json["code"] == "INVALID_TRANSITION"

    def test_redirect(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        envio_id = _enviar(client, headers, hoja_id)["envio"]["id"]

        r = client.simulate_put(
            f"/api/enviar/{envio_id}/redirigir",
            json={"unidad_destino_id": 2, "notas": "Por competencia"},
            headers=headers("juan"),
        )
        assert r.status_code == 200
        assert r.json["envio"]["estado"] == "redirigido"
        assert r.json["envio"]["redirigido_a_unidad_id"] == 2
        assert r.json["nuevoEnvio"]["estado"] == "enviado"
        assert r.json["nuevoEnvio"]["unidad_destino_id"] == 2

        hoja = client.simulate_get(f"/api/hojas-ruta/{hoja_id}", headers=headers()).json["hoja"]
        assert hoja["unidad_actual_id"] == 2
        assert hoja["ubicacion_actual"] == "Contabilidad"

    def test_redirect_requires_destination(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        envio_id = _enviar(client, headers, hoja_id)["envio"]["id"]
        r = client.simulate_put(f"/api/enviar/{envio_id}/redirigir", json={}, headers=headers())
        assert r.status_code == 400
        assert r.json["field"] == "unidad_destino_id"

    def test_send_validation_and_unknown_references(self, client: TestClient, headers) -> None:
        r = client.simulate_post("/api/enviar/a-unidad", json={"hoja_id": 1}, headers=headers())
        assert r.status_code == 400
        assert r.json["error"] == "hoja_id y unidad_id son requeridos"

        r = client.simulate_post(
            "/api/enviar/a-unidad", json={"hoja_id": 99, "unidad_id": 1}, headers=headers()
        )
        assert r.status_code == 404

        r = client.simulate_put("/api/enviar/99/recibir", headers=headers())
        assert r.status_code == 404

    def test_ledger_full_is_a_warning(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        for _ in range(10):
            _enviar(client, headers, hoja_id)
        r = client.simulate_post(
            "/api/enviar/a-unidad", json={"hoja_id": hoja_id, "unidad_id": 1}, headers=headers()
        )
        assert r.status_code == 201
        assert r.json["seccion"] is None
        assert r.json["advertencia"] == "LEDGER_FULL"

    def test_my_unit_and_destinations(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        _enviar(client, headers, hoja_id, unidad_id=1)
        _enviar(client, headers, hoja_id, unidad_id=2)

        r = client.simulate_get("/api/enviar/mi-unidad", headers=headers("juan"))
        assert r.status_code == 200
        assert r.headers["Cache-Control"].startswith("no-store")
        assert [e["unidad_destino_id"] for e in r.json["envios"]] == [1]

        r = client.simulate_get("/api/enviar", headers=headers("juan"))
        assert len(r.json["envios"]) == 2

        r = client.simulate_get("/api/enviar/destinos", headers=headers("juan"))
        assert [d["nombre"] for d in r.json["destinos"]] == ["Contabilidad", "Legal"]


class TestProgreso:
    def test_add_and_read(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        r = client.simulate_post(
            "/api/progreso/agregar",
            json={"hoja_ruta_id": hoja_id, "ubicacion_actual": "Archivo", "notas": "Recibido"},
            headers=headers("juan"),
        )
        assert r.status_code == 201
        progreso_id = r.json["progreso"]["id"]

        r = client.simulate_get(f"/api/progreso/ultimo/{hoja_id}", headers=headers("juan"))
        assert r.json["progreso"]["id"] == progreso_id

        r = client.simulate_get(f"/api/progreso/historial/{hoja_id}", headers=headers("juan"))
        assert r.json["total"] == 1

        r = client.simulate_get("/api/progreso", params={"limite": 5}, headers=headers("juan"))
        assert r.json["total"] == 1

    def test_add_requires_fields(self, client: TestClient, headers) -> None:
        r = client.simulate_post("/api/progreso/agregar", json={}, headers=headers())
        assert r.status_code == 400

    def test_bulk_partial_success(self, client: TestClient, headers) -> None:
        ids = [_crear_hoja(client, headers, numero_hr=f"HR-{i}")["id"] for i in range(3)]
        hojas = [{"hoja_ruta_id": i, "ubicacion_actual": "Archivo"} for i in ids + [98, 99]]

        r = client.simulate_post(
            "/api/progreso/agregar-multiple", json={"hojas": hojas}, headers=headers("juan")
        )
        assert r.status_code == 201
        assert r.json["success"] is False
        assert len(r.json["registrados"]) == 3
        assert [e["hoja_ruta_id"] for e in r.json["errores"]] == [98, 99]

    def test_latest_for_document_without_entries(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        r = client.simulate_get(f"/api/progreso/ultimo/{hoja_id}", headers=headers())
        assert r.status_code == 404

    def test_responses_numbered_as_sections(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        envio_id = _enviar(client, headers, hoja_id)["envio"]["id"]
        client.simulate_put(f"/api/enviar/{envio_id}/recibir", headers=headers("juan"))
        client.simulate_put(
            f"/api/enviar/{envio_id}/responder", json={"respuesta": "Visto"}, headers=headers("juan")
        )
        client.simulate_post(
            "/api/progreso/agregar",
            json={"hoja_ruta_id": hoja_id, "ubicacion_actual": "Archivo"},
            headers=headers(),
        )

        r = client.simulate_get(f"/api/progreso/respuestas/{hoja_id}", headers=headers())
        assert r.status_code == 200
        respuestas = r.json["respuestas"]
        assert [x["seccion"] for x in respuestas] == [1, 2, 3]
        assert [x["accion"] for x in respuestas] == ["enviado", "recibido", "respondido"]
        assert respuestas[0]["destino"] == "Legal"
        assert respuestas[2]["respuesta"] == "Visto"
        assert respuestas[0]["responsable"] == "Juan"

    def test_corrections_are_admin_only(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        progreso_id = client.simulate_post(
            "/api/progreso/agregar",
            json={"hoja_ruta_id": hoja_id, "ubicacion_actual": "Archivo"},
            headers=headers(),
        ).json["progreso"]["id"]

        r = client.simulate_put(
            f"/api/progreso/{progreso_id}", json={"notas": "x"}, headers=headers("secre")
        )
        assert r.status_code == 403

        r = client.simulate_put(
            f"/api/progreso/{progreso_id}", json={"ubicacion_actual": "Biblioteca"}, headers=headers()
        )
        assert r.status_code == 200
        assert r.json["progreso"]["ubicacion_actual"] == "Biblioteca"

        r = client.simulate_delete(f"/api/progreso/{progreso_id}", headers=headers())
        assert r.status_code == 200
        r = client.simulate_delete(f"/api/progreso/{progreso_id}", headers=headers())
        assert r.status_code == 404


class TestUnidades:
    def test_list_is_public(self, client: TestClient) -> None:
        r = client.simulate_get("/api/unidades")
        assert r.status_code == 200
        assert len(r.json["unidades"]) == 2

    def test_create_requires_write_role(self, client: TestClient, headers) -> None:
        r = client.simulate_post("/api/unidades", json={"nombre": "Archivo"})
        assert r.status_code == 401
        r = client.simulate_post("/api/unidades", json={"nombre": "Archivo"}, headers=headers("juan"))
        assert r.status_code == 403

    def test_create_update_delete(self, client: TestClient, headers) -> None:
        r = client.simulate_post("/api/unidades", json={"nombre": "Archivo"}, headers=headers("secre"))
        assert r.status_code == 201
        unidad_id = r.json["unidad"]["id"]

        r = client.simulate_post("/api/unidades", json={"nombre": "archivo"}, headers=headers("secre"))
        assert r.status_code == 409
        assert r.json["code"] == "CONFLICT"

        r = client.simulate_put(
            f"/api/unidades/{unidad_id}", json={"telefono": "2-222"}, headers=headers("secre")
        )
        assert r.status_code == 200
        assert r.json["unidad"]["telefono"] == "2-222"

        r = client.simulate_delete(f"/api/unidades/{unidad_id}", headers=headers("secre"))
        assert r.status_code == 200
        assert len(client.simulate_get("/api/unidades").json["unidades"]) == 2

    def test_members(self, client: TestClient, headers) -> None:
        r = client.simulate_get("/api/unidades/1/usuarios", headers=headers("juan"))
        assert r.status_code == 200
        assert [u["username"] for u in r.json["usuarios"]] == ["admin", "juan", "secre"]


class TestUsuarios:
    def test_me(self, client: TestClient, headers) -> None:
        r = client.simulate_get("/api/usuarios/me", headers=headers("juan"))
        assert r.status_code == 200
        assert r.json["usuario"]["username"] == "juan"
        assert r.json["usuario"]["unidad_nombre"] == "Legal"

    def test_list_and_create_are_admin_only(self, client: TestClient, headers) -> None:
        assert client.simulate_get("/api/usuarios", headers=headers("secre")).status_code == 403

        r = client.simulate_get("/api/usuarios", headers=headers())
        assert len(r.json["usuarios"]) == 3

        r = client.simulate_post(
            "/api/usuarios",
            json={"username": "Maria", "password": "pw-123456", "nombre_completo": "María", "unidad_id": 2},
            headers=headers(),
        )
        assert r.status_code == 201
        assert r.json["usuario"]["username"] == "maria"
        assert r.json["usuario"]["rol"] == "usuario"

        r = client.simulate_post(
            "/api/usuarios",
            json={"username": "maria", "password": "x", "nombre_completo": "Otra"},
            headers=headers(),
        )
        assert r.status_code == 409


class TestNotificaciones:
    def _notificar(self, client: TestClient, headers, usuario_id: int = 3) -> dict:
        r = client.simulate_post(
            "/api/notificaciones",
            json={"usuario_id": usuario_id, "tipo": "aviso", "mensaje": "Revisar anexo"},
            headers=headers(),
        )
        assert r.status_code == 201, r.json
        return r.json["notificacion"]

    def test_create_list_count_and_read(self, client: TestClient, headers) -> None:
        notificacion = self._notificar(client, headers)
        assert notificacion["leida"] is False

        r = client.simulate_get("/api/notificaciones/usuario/3", headers=headers("juan"))
        assert r.status_code == 200
        assert [n["id"] for n in r.json["notificaciones"]] == [notificacion["id"]]
        r = client.simulate_get("/api/notificaciones/usuario/3/count", headers=headers("juan"))
        assert r.json["no_leidas"] == 1

        r = client.simulate_patch(
            f"/api/notificaciones/{notificacion['id']}/leer", headers=headers("juan")
        )
        assert r.status_code == 200
        assert r.json["notificacion"]["leida"] is True
        assert r.json["notificacion"]["leida_en"]
        r = client.simulate_get("/api/notificaciones/usuario/3/count", headers=headers("juan"))
        assert r.json["no_leidas"] == 0

    def test_create_validates(self, client: TestClient, headers) -> None:
        r = client.simulate_post(
            "/api/notificaciones", json={"tipo": "aviso", "mensaje": "x"}, headers=headers()
        )
        assert r.status_code == 400
        assert r.json["field"] == "usuario_id"
        r = client.simulate_post(
            "/api/notificaciones",
            json={"usuario_id": 99, "tipo": "aviso", "mensaje": "x"},
            headers=headers(),
        )
        assert r.status_code == 404
        r = client.simulate_post(
            "/api/notificaciones",
            json={"usuario_id": 3, "tipo": "aviso", "mensaje": "x"},
            headers=headers("juan"),
        )
        assert r.status_code == 403

    def test_notifications_are_private_to_their_user(self, client: TestClient, headers) -> None:
        notificacion = self._notificar(client, headers)

        r = client.simulate_get("/api/notificaciones/usuario/2", headers=headers("juan"))
        assert r.status_code == 403
        r = client.simulate_patch(
            f"/api/notificaciones/{notificacion['id']}/leer", headers=headers("secre")
        )
        assert r.status_code == 403
        r = client.simulate_get("/api/notificaciones/usuario/3", headers=headers("admin"))
        assert r.status_code == 200
        assert r.json["total"] == 1

    def test_deadline_notices(self, client: TestClient, headers) -> None:
        hoja = _crear_hoja(client, headers, fecha_limite="2024-03-16")

        r = client.simulate_post("/api/notificaciones/generar-automaticas", headers=headers("secre"))
        assert r.status_code == 200
        assert r.json["nuevas_notificaciones"] == 1
        r = client.simulate_post("/api/notificaciones/generar-automaticas", headers=headers("secre"))
        assert r.json["nuevas_notificaciones"] == 0

        r = client.simulate_get(
            "/api/notificaciones/usuario/2",
            params={"solo_no_leidas": "true"},
            headers=headers("secre"),
        )
        [aviso] = r.json["notificaciones"]
        assert aviso["tipo"] == "vencimiento_proximo"
        assert aviso["hoja_ruta_id"] == hoja["id"]
        assert aviso["numero_hr"] == "HR-2024-010"

        r = client.simulate_patch(
            "/api/notificaciones/usuario/2/leer-todas", headers=headers("secre")
        )
        assert r.status_code == 200
        assert r.json["marcadas"] == 1


class TestHistorial:
    def test_routing_is_recorded(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        client.simulate_put(
            f"/api/hojas-ruta/{hoja_id}", json={"referencia": "Otra"}, headers=headers("secre")
        )
        _enviar(client, headers, hoja_id)

        r = client.simulate_get("/api/historial", headers=headers("juan"))
        assert r.status_code == 200
        assert [a["tipo"] for a in r.json["data"]] == ["enviado", "editado", "añadido"]
        enviado = r.json["data"][0]
        assert enviado["destinatario"] == "Legal"
        assert enviado["usuario_nombre"] == "Juan"

        r = client.simulate_get("/api/historial", params={"tipo": "editado"}, headers=headers())
        assert r.json["data"][0]["datos_nuevos"] == {"referencia": "Otra"}
        r = client.simulate_get("/api/historial", params={"tipo": "borrado"}, headers=headers())
        assert r.status_code == 400

    def test_categories_and_statistics(self, client: TestClient, headers) -> None:
        hoja_id = _crear_hoja(client, headers)["id"]
        _enviar(client, headers, hoja_id)

        r = client.simulate_get("/api/historial/categorias", headers=headers())
        assert r.status_code == 200
        data = r.json["data"]
        assert (len(data["añadidos"]), len(data["editados"]), len(data["enviados"])) == (1, 0, 1)

        r = client.simulate_get("/api/historial/estadisticas", headers=headers())
        assert r.json["data"] == {"añadidos": 1, "editados": 0, "enviados": 1, "total": 2}
        assert r.json["periodo"] == "7 días"
        r = client.simulate_get(
            "/api/historial/estadisticas", params={"periodo": "0"}, headers=headers()
        )
        assert r.status_code == 400

    def test_register_by_hand(self, client: TestClient, headers) -> None:
        r = client.simulate_post(
            "/api/historial",
            json={"tipo": "enviado", "descripcion": "Entrega en mano", "destinatario": "Archivo"},
            headers=headers("secre"),
        )
        assert r.status_code == 201
        assert r.json["data"]["destinatario"] == "Archivo"

        r = client.simulate_post(
            "/api/historial", json={"tipo": "enviado", "descripcion": "x"}, headers=headers("juan")
        )
        assert r.status_code == 403
        r = client.simulate_post(
            "/api/historial", json={"tipo": "borrado", "descripcion": "x"}, headers=headers("secre")
        )
        assert r.status_code == 400
        assert r.json["field"] == "tipo"


class TestMiddleware:
    def test_security_headers(self, client: TestClient) -> None:
        r = client.simulate_get("/api/health")
        assert r.headers["X-Content-Type-Options"] == "nosniff"
        assert r.headers["X-Frame-Options"] == "DENY"
        assert "Strict-Transport-Security" not in r.headers

    def test_cors_allow_list(self, client: TestClient) -> None:
        r = client.simulate_options(
            "/api/hojas-ruta", headers={"Origin": "http://localhost:5173"}
        )
        assert r.status_code == 200
        assert r.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"

        r = client.simulate_get("/api/health", headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in r.headers

    def test_payload_too_large(self, client: TestClient, headers) -> None:
        r = client.simulate_post(
            "/api/hojas-ruta",
            json={**HOJA, "observaciones": "x" * 5000},
            headers=headers("secre"),
        )
        assert r.status_code == 413
        assert r.json["code"] == "PAYLOAD_TOO_LARGE"

    def test_malformed_json(self, client: TestClient, headers) -> None:
        r = client.simulate_post(
            "/api/hojas-ruta",
            body="{no json",
            headers={**headers("secre"), "Content-Type": "application/json"},
        )
        assert r.status_code == 400

    def test_unexpected_error(self, client: TestClient, headers, seeded_uow, monkeypatch: pytest.MonkeyPatch) -> None:
        async def boom():
            raise RuntimeError("db exploded")

        monkeypatch.setattr(seeded_uow.hojas, "estadisticas", boom)
        r = client.simulate_get("/api/hojas-ruta/estadisticas/dashboard", headers=headers())
        assert r.status_code == 500
        assert r.json["code"] == "INTERNAL_ERROR"
        assert "db exploded" in r.json["detalle"]
