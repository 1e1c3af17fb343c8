import json
from datetime import datetime, timezone

import httpx
import pytest

from inventario.errors import FetchFailure, StoreError, WriteFailure
from inventario.models.equipment import EquipmentDraft, EquipmentStatus, EquipmentType
from inventario.services.equipment_store import (
    InMemoryEquipmentStore,
    SupabaseEquipmentStore,
    get_store,
)

from conftest import SCENARIO_ROW


def _supabase(handler, **kwargs):
    return SupabaseEquipmentStore(
        "https://demo.supabase.co/",
        "anon-key",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_list_requests_ordered_rows_with_api_key():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=[SCENARIO_ROW])

    records = _supabase(handler).list()

    assert [r.serial_number for r in records] == ["SN1"]
    request = calls[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/equipment"
    assert request.url.params["order"] == "created_at.desc"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["authorization"] == "Bearer anon-key"


def test_session_token_is_sent_as_bearer():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["authorization"]
        return httpx.Response(200, json=[])

    assert _supabase(handler, access_token="user-jwt").list() == []
    assert seen["auth"] == "Bearer user-jwt"


@pytest.mark.parametrize("response", [
    httpx.Response(500, json={"message": "boom"}),
    httpx.Response(200, json={"not": "a list"}),
    httpx.Response(200, content=b"<html>"),
    httpx.Response(200, json=[{**SCENARIO_ROW, "type": "tablet"}]),
])
def test_list_failures_raise_fetch_failure(response):
    with pytest.raises(FetchFailure):
        _supabase(lambda request: response).list()


def test_list_connection_error_keeps_cause():
    def handler(request):
        raise httpx.ConnectError("no route to host", request=request)

    with pytest.raises(FetchFailure) as err:
        _supabase(handler).list()
    assert isinstance(err.value.__cause__, httpx.ConnectError)


def test_create_posts_payload_and_returns_backend_ids():
    captured = {}

    def handler(request):
        captured["method"] = request.method
        captured["prefer"] = request.headers.get("prefer")
        captured["body"] = json.loads(request.content)
        row = {**captured["body"], "id": 42, "created_at": "2024-05-01T08:00:00+00:00",
               "updated_at": "2024-05-01T08:00:00+00:00"}
        return httpx.Response(201, json=[row])

    draft = EquipmentDraft(EquipmentType.PRINTER, "P1", "SN2")
    record = _supabase(handler).create(draft)

    assert captured["method"] == "POST"
    assert captured["prefer"] == "return=representation"
    assert captured["body"] == {
        "type": "printer",
        "model": "P1",
        "serial_number": "SN2",
        "status": "available",
        "imagenes": [],
    }
    assert record.id == 42
    assert record.created_at is not None


def test_create_with_invalid_mapping_is_a_write_failure():
    def handler(request):  # pragma: no cover - never reached
        raise AssertionError("backend should not be called")

    with pytest.raises(WriteFailure):
        _supabase(handler).create({"type": "laptop", "model": "", "serial_number": "S"})


def test_update_patches_by_id_with_partial_payload():
    captured = {}

    def handler(request):
        captured["method"] = request.method
        captured["id"] = request.url.params["id"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=[{**SCENARIO_ROW, "status": "loaned",
                                          "updated_at": "2024-03-02T10:00:00+00:00"}])

    record = _supabase(handler).update(1, {"status": "loaned"})

    assert captured == {"method": "PATCH", "id": "eq.1", "body": {"status": "loaned"}}
    assert record.status is EquipmentStatus.LOANED


@pytest.mark.parametrize("response", [
    httpx.Response(200, json=[]),
    httpx.Response(409, json={"message": "duplicate key"}),
])
def test_update_rejections_raise_write_failure(response):
    with pytest.raises(WriteFailure):
        _supabase(lambda request: response).update(99, {"status": "lost"})


def test_missing_url_is_a_store_error():
    with pytest.raises(StoreError):
        SupabaseEquipmentStore("", "key")


def test_memory_create_then_list_scenario():
    store = InMemoryEquipmentStore([SCENARIO_ROW])
    created = store.create(
        {"type": "printer", "model": "P1", "serial_number": "SN2", "status": "available", "images": []}
    )
    records = store.list()

    assert len(records) == 2
    assert created.id not in (None, 1)
    assert created in records
    assert records[0] == created


def test_memory_update_scenario_advances_updated_at():
    frozen = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
    store = InMemoryEquipmentStore([SCENARIO_ROW], clock=lambda: frozen)
    before = store.list()[0]

    store.update(1, {"status": "loaned"})
    after = store.list()[0]

    assert after.id == 1
    assert after.status is EquipmentStatus.LOANED
    assert after.updated_at > before.updated_at
    assert after.created_at == before.created_at
    assert after.type is before.type


def test_memory_update_keeps_images_when_not_changed():
    store = InMemoryEquipmentStore([{**SCENARIO_ROW, "imagenes": ["https://a", "https://b"]}])
    store.update("1", {"status": "maintenance"})
    assert store.list()[0].images == ("https://a", "https://b")


def test_memory_update_unknown_id_fails():
    with pytest.raises(WriteFailure):
        InMemoryEquipmentStore().update(7, {"status": "lost"})


def test_get_store_returns_shared_memory_store(app):
    assert get_store(app) is get_store(app)
    assert isinstance(get_store(app), InMemoryEquipmentStore)


def test_get_store_builds_supabase_client(app):
    app.config["EQUIPMENT_BACKEND"] = "supabase"
    store = get_store(app)
    assert isinstance(store, SupabaseEquipmentStore)
    assert store.base_url == "https://example.supabase.co"
    assert store.table == "equipment"
