"""Unit tests for SectionLedger."""

from datetime import date

import pytest

from hojaruta.domain.exceptions import LedgerFull
from hojaruta.domain.value_objects import SectionLedger
from hojaruta.domain.value_objects.section_ledger import SECTIONS_KEY

DAY = date(2024, 3, 15)


def test_empty_details_give_empty_ledger() -> None:
    ledger = SectionLedger.from_details(None)
    assert len(ledger) == 0
    assert ledger.capacity == 10


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SectionLedger(capacity=0)


def test_record_send_fills_indices_in_order() -> None:
    ledger = SectionLedger()
    assert ledger.record_send(DAY, "Contabilidad") == 1
    assert ledger.record_send(DAY, "Legal") == 2
    assert [s.destino for s in ledger] == ["Contabilidad", "Legal"]
    assert ledger.get(1).fecha_enviado == "2024-03-15"


def test_record_send_raises_when_full() -> None:
    ledger = SectionLedger(capacity=3)
    for i in range(3):
        ledger.record_send(DAY, f"Unidad {i}")
    with pytest.raises(LedgerFull) as exc:
        ledger.record_send(DAY, "Otra")
    assert exc.value.capacity == 3
    assert len(ledger) == 3


def test_record_send_skips_sealed_sections() -> None:
    ledger = SectionLedger.from_details(
        {SECTIONS_KEY: [{"seccion": 1, "respuesta": "Visto"}]}
    )
    assert ledger.record_send(DAY, "Legal") == 2


def test_record_send_reuses_section_with_only_instructions() -> None:
    ledger = SectionLedger.from_details(
        {SECTIONS_KEY: [{"seccion": 1, "instrucciones_adicionales": "Urgente"}]}
    )
    assert ledger.record_send(DAY, "Legal") == 1
    assert ledger.get(1).instrucciones_adicionales == "Urgente"


def test_mark_received_picks_latest_matching_section() -> None:
    ledger = SectionLedger()
    ledger.record_send(DAY, "Contabilidad")
    ledger.record_send(DAY, "Legal")
    ledger.record_send(DAY, "Contabilidad")
    assert ledger.mark_received("Contabilidad", DAY) == 3
    assert ledger.mark_received("Contabilidad", DAY) == 1
    assert ledger.mark_received("Contabilidad", DAY) is None


def test_mark_received_matches_by_substring() -> None:
    ledger = SectionLedger()
    ledger.record_send(DAY, "Unidad de Contabilidad - Piso 2")
    assert ledger.mark_received("Contabilidad", DAY) == 1


def test_record_response_uses_first_section_without_send_date() -> None:
    ledger = SectionLedger()
    ledger.record_send(DAY, "Legal")
    ledger.mark_received("Legal", DAY)
    index = ledger.record_response("Legal", "Aprobado", DAY)
    seccion = ledger.get(index)
    assert index == 2
    assert seccion.destino == "RESPUESTA de Legal"
    assert seccion.respuesta == "Aprobado"
    assert seccion.instrucciones_adicionales == "Aprobado"


def test_record_redirect_keeps_origin() -> None:
    ledger = SectionLedger()
    ledger.record_send(DAY, "Legal")
    index = ledger.record_redirect("Archivo", "Legal", DAY, notas="Por competencia")
    assert index == 2
    assert ledger.get(2).redirigido_desde == "Legal"
    assert ledger.get(2).instrucciones_adicionales == "Por competencia"


def test_legacy_flat_keys_are_folded_in() -> None:
    detalles = {
        "fecha_enviado_1": "2024-01-02",
        "destino_1": "Legal",
        "instrucciones_1": "Revisar",
        "fecha_recepcion_1": "2024-01-03",
        "destino_3": "Archivo",
        "destinos_3": ["archivo"],
        "cite": "CITE-9",
    }
    ledger = SectionLedger.from_details(detalles)
    assert [s.seccion for s in ledger] == [1, 3]
    uno = ledger.get(1)
    assert uno.destino == "Legal"
    assert uno.instrucciones_adicionales == "Revisar"
    assert uno.fecha_recepcion == "2024-01-03"
    assert ledger.get(3).destinos == ["archivo"]


def test_array_entry_wins_over_legacy_key() -> None:
    detalles = {
        SECTIONS_KEY: [{"seccion": 1, "destino": "Legal"}],
        "destino_1": "Otro",
        "fecha_enviado_1": "2024-01-02",
    }
    seccion = SectionLedger.from_details(detalles).get(1)
    assert seccion.destino == "Legal"
    assert seccion.fecha_enviado == "2024-01-02"


def test_blank_and_malformed_entries_are_dropped() -> None:
    detalles = {
        SECTIONS_KEY: [
            {"seccion": 1},
            {"seccion": "x", "destino": "Legal"},
            "basura",
            {"seccion": 2, "destino": "Archivo"},
        ]
    }
    ledger = SectionLedger.from_details(detalles)
    assert [s.seccion for s in ledger] == [2]


def test_duplicate_indices_are_merged() -> None:
    detalles = {
        SECTIONS_KEY: [
            {"seccion": 1, "destino": "Legal"},
            {"seccion": 1, "fecha_recepcion": "2024-01-03"},
        ]
    }
    ledger = SectionLedger.from_details(detalles)
    assert len(ledger) == 1
    assert ledger.get(1).fecha_recepcion == "2024-01-03"


def test_to_details_drops_legacy_keys_and_keeps_the_rest() -> None:
    detalles = {"destino_1": "Legal", "fecha_enviado_1": "2024-01-02", "cite": "CITE-9"}
    ledger = SectionLedger.from_details(detalles)
    out = ledger.to_details(detalles)
    assert "destino_1" not in out
    assert out["cite"] == "CITE-9"
    assert out[SECTIONS_KEY][0]["destino"] == "Legal"


def test_unknown_section_fields_survive_a_rewrite() -> None:
    detalles = {SECTIONS_KEY: [{"seccion": 1, "destino": "Legal", "firma": "JP"}]}
    ledger = SectionLedger.from_details(detalles)
    ledger.mark_received("Legal", DAY)
    assert ledger.to_details(detalles)[SECTIONS_KEY][0]["firma"] == "JP"


def test_non_text_section_values_are_read_as_text() -> None:
    detalles = {
        SECTIONS_KEY: [
            {"seccion": 1, "fecha_enviado": "2024-03-01", "destino": 7, "instrucciones_adicionales": 12},
            {"seccion": 2, "fecha_enviado": "2024-03-02", "destino": "Legal"},
        ]
    }
    ledger = SectionLedger.from_details(detalles)
    assert ledger.get(1).destino == "7"
    assert ledger.get(1).instrucciones_adicionales == "12"

    assert ledger.mark_received("Legal", DAY) == 2
    assert ledger.mark_received("Archivo", DAY) is None
