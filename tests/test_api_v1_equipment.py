import pytest

import inventario.api.v1.equipment as equipment_api
from inventario.errors import FetchFailure, WriteFailure
from inventario.services.equipment_store import InMemoryEquipmentStore

from conftest import SCENARIO_ROW


class BrokenStore(InMemoryEquipmentStore):
    def _list(self):
        raise FetchFailure("timeout")

    def _create(self, draft):
        raise WriteFailure("rejected")

    def _update(self, equipment_id, payload):
        raise WriteFailure("rejected")


@pytest.fixture
def broken(monkeypatch):
    store = BrokenStore([SCENARIO_ROW])
    monkeypatch.setattr(equipment_api, "get_store", lambda: store)
    return store


def test_list_returns_records_and_summary(client, seeded):
    res = client.get("/api/v1/equipment")
    assert res.status_code == 200
    data = res.get_json()
    assert data["summary"] == {"total": 1, "available": 1, "loaned": 0, "inactive": 0}
    assert data["equipment"][0]["serial_number"] == "SN1"
    assert data["equipment"][0]["type"] == "laptop"


def test_list_search_keeps_full_summary(client, seeded):
    seeded.create({"type": "printer", "model": "P1", "serial_number": "SN2", "status": "loaned"})
    data = client.get("/api/v1/equipment?q=printer").get_json()
    assert [e["serial_number"] for e in data["equipment"]] == ["SN2"]
    assert data["summary"]["total"] == 2
    assert data["summary"]["loaned"] == 1


def test_create_defaults_status(client, store):
    res = client.post(
        "/api/v1/equipment",
        json={"type": "printer", "model": "P1", "serial_number": "SN2"},
    )
    assert res.status_code == 201
    body = res.get_json()["equipment"]
    assert body["status"] == "available"
    assert body["images"] == []
    assert body["id"] is not None
    assert len(store.list()) == 1


@pytest.mark.parametrize("payload", [
    {"type": "printer", "model": "", "serial_number": "SN2"},
    {"type": "tablet", "model": "T", "serial_number": "SN2"},
    {"type": "laptop", "model": "X", "serial_number": "S", "status": "retired"},
])
def test_create_rejects_invalid_drafts(client, store, payload):
    res = client.post("/api/v1/equipment", json=payload)
    assert res.status_code == 400
    assert res.get_json()["error"]["code"] == 400
    assert store.list() == []


def test_create_requires_json_object(client):
    res = client.post("/api/v1/equipment", data="[]", content_type="application/json")
    assert res.status_code == 400


def test_patch_updates_status(client, seeded):
    res = client.patch("/api/v1/equipment/1", json={"status": "loaned"})
    assert res.status_code == 200
    body = res.get_json()["equipment"]
    assert body["status"] == "loaned"
    assert body["type"] == "laptop"
    assert seeded.list()[0].status.value == "loaned"


def test_patch_rejects_type_change(client, seeded):
    res = client.patch("/api/v1/equipment/1", json={"type": "printer"})
    assert res.status_code == 400
    assert seeded.list()[0].type.value == "laptop"


def test_patch_rejects_empty_changes(client, seeded):
    assert client.patch("/api/v1/equipment/1", json={}).status_code == 400


def test_patch_unknown_id_is_backend_rejection(client, seeded):
    res = client.patch("/api/v1/equipment/999", json={"status": "lost"})
    assert res.status_code == 502
    assert res.get_json()["error"]["message"] == "Error al guardar el equipo"


def test_backend_failures_map_to_502(client, broken):
    res = client.get("/api/v1/equipment")
    assert res.status_code == 502
    assert res.get_json()["error"]["message"] == "Error al cargar el inventario"

    res = client.post("/api/v1/equipment", json={"type": "laptop", "model": "X", "serial_number": "S"})
    assert res.status_code == 502

    res = client.patch("/api/v1/equipment/1", json={"status": "lost"})
    assert res.status_code == 502


def test_api_requires_login_when_enabled(client, app):
    app.config["LOGIN_DISABLED"] = False
    res = client.get("/api/v1/equipment")
    assert res.status_code in (302, 401)
