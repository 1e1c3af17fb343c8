"""Cliente del backend de equipos (Supabase/PostgREST) y variante en memoria."""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator

import httpx
from flask import Flask, current_app, has_request_context

from inventario.errors import FetchFailure, StoreError, WriteFailure
from inventario.metrics import store_request_seconds, store_requests_total
from inventario.models.equipment import (
    DraftError,
    Equipment,
    EquipmentDraft,
    RecordFormatError,
    changes_payload,
    validate_changes,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

Changes = EquipmentDraft | Mapping[str, Any]


@contextmanager
def _observed(operation: str) -> Iterator[None]:
    started = time.perf_counter()
    outcome = "ok"
    try:
        yield
    except Exception:
        outcome = "error"
        raise
    finally:
        store_request_seconds.labels(operation).observe(time.perf_counter() - started)
        store_requests_total.labels(operation, outcome).inc()


def _draft_for_create(draft: Changes) -> EquipmentDraft:
    if isinstance(draft, EquipmentDraft):
        return draft
    try:
        return EquipmentDraft.from_mapping(draft)
    except DraftError as exc:
        raise WriteFailure(f"borrador inválido: {exc}") from exc


def _payload_for_update(changes: Changes) -> dict[str, Any]:
    if isinstance(changes, EquipmentDraft):
        return changes.to_payload()
    try:
        validated = validate_changes(changes)
    except DraftError as exc:
        raise WriteFailure(f"cambios inválidos: {exc}") from exc
    if not validated:
        raise WriteFailure("no hay cambios que guardar")
    return changes_payload(validated)


class EquipmentStore:
    """Contrato común: ``list``, ``create`` y ``update``.

    Las subclases implementan ``_list``, ``_create`` y ``_update``; aquí se
    normalizan los borradores y se miden las llamadas.
    """

    backend_name = "base"

    def list(self) -> list[Equipment]:
        with _observed("list"):
            records = self._list()
        logger.debug("%s: %d equipos recibidos", self.backend_name, len(records))
        return records

    def create(self, draft: Changes) -> Equipment:
        with _observed("create"):
            record = self._create(_draft_for_create(draft))
        logger.info("Equipo creado id=%s serial=%s", record.id, record.serial_number)
        return record

    def update(self, equipment_id: int | str, changes: Changes) -> Equipment:
        with _observed("update"):
            record = self._update(equipment_id, _payload_for_update(changes))
        logger.info("Equipo actualizado id=%s status=%s", record.id, record.status.value)
        return record

    def _list(self) -> list[Equipment]:
        raise NotImplementedError

    def _create(self, draft: EquipmentDraft) -> Equipment:
        raise NotImplementedError

    def _update(self, equipment_id: int | str, payload: dict[str, Any]) -> Equipment:
        raise NotImplementedError


class SupabaseEquipmentStore(EquipmentStore):
    """Habla con la API REST de Supabase (PostgREST)."""

    backend_name = "supabase"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        table: str = "equipment",
        access_token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise StoreError("SUPABASE_URL no configurado")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.table = table
        self.access_token = access_token
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=f"{self.base_url}/rest/v1",
            headers=self._headers(),
            timeout=self.timeout,
            transport=self._transport,
        )

    def _rows(self, response: httpx.Response) -> list[Mapping[str, Any]]:
        response.raise_for_status()
        rows = response.json()
        if not isinstance(rows, list):
            raise ValueError(f"se esperaba una lista, llegó {type(rows).__name__}")
        return rows

    def _list(self) -> list[Equipment]:
        try:
            with self._client() as client:
                response = client.get(
                    f"/{self.table}",
                    params={"select": "*", "order": "created_at.desc"},
                )
                rows = self._rows(response)
            return [Equipment.from_row(row) for row in rows]
        except httpx.HTTPError as exc:
            raise FetchFailure(f"no se pudo leer {self.table}: {exc}") from exc
        except (ValueError, RecordFormatError) as exc:
            raise FetchFailure(f"respuesta inválida de {self.table}: {exc}") from exc

    def _write(self, method: str, params: dict[str, str], payload: dict[str, Any]) -> Equipment:
        try:
            with self._client() as client:
                response = client.request(
                    method,
                    f"/{self.table}",
                    params=params,
                    json=payload,
                    headers={"Prefer": "return=representation"},
                )
                rows = self._rows(response)
            if not rows:
                raise WriteFailure(f"el equipo no existe en {self.table}")
            return Equipment.from_row(rows[0])
        except httpx.HTTPError as exc:
            raise WriteFailure(f"escritura rechazada en {self.table}: {exc}") from exc
        except (ValueError, RecordFormatError) as exc:
            raise WriteFailure(f"respuesta inválida de {self.table}: {exc}") from exc

    def _create(self, draft: EquipmentDraft) -> Equipment:
        return self._write("POST", {"select": "*"}, draft.to_payload())

    def _update(self, equipment_id: int | str, payload: dict[str, Any]) -> Equipment:
        return self._write("PATCH", {"id": f"eq.{equipment_id}", "select": "*"}, payload)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryEquipmentStore(EquipmentStore):
    """Backend falso para desarrollo y pruebas; conserva datos en el proceso."""

    backend_name = "memory"

    def __init__(
        self,
        rows: Iterable[Mapping[str, Any]] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._lock = threading.Lock()
        self._clock = clock
        self._records: dict[int | str, Equipment] = {}
        self._next_id = 1
        for row in rows or ():
            record = Equipment.from_row(row)
            self._records[record.id] = record
            if isinstance(record.id, int):
                self._next_id = max(self._next_id, record.id + 1)

    def _tick(self, previous: datetime | None = None) -> datetime:
        now = self._clock()
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    def _list(self) -> list[Equipment]:
        with self._lock:
            # Más recientes primero, igual que ``order=created_at.desc``.
            return list(reversed(list(self._records.values())))

    def _create(self, draft: EquipmentDraft) -> Equipment:
        with self._lock:
            now = self._tick()
            record = Equipment(
                id=self._next_id,
                type=draft.type,
                model=draft.model,
                serial_number=draft.serial_number,
                status=draft.status,
                images=tuple(draft.images),
                created_at=now,
                updated_at=now,
            )
            self._records[record.id] = record
            self._next_id += 1
            return record

    def _update(self, equipment_id: int | str, payload: dict[str, Any]) -> Equipment:
        with self._lock:
            current = self._find(equipment_id)
            if current is None:
                raise WriteFailure(f"el equipo {equipment_id} no existe")
            row = current.to_dict()
            row["imagenes"] = row.pop("images")
            row.update(payload)
            record = replace(
                Equipment.from_row(row),
                created_at=current.created_at,
                updated_at=self._tick(current.updated_at),
            )
            self._records[current.id] = record
            return record

    def _find(self, equipment_id: int | str) -> Equipment | None:
        if equipment_id in self._records:
            return self._records[equipment_id]
        for key, record in self._records.items():
            if str(key) == str(equipment_id):
                return record
        return None


def _use_memory(app: Flask) -> bool:
    if app.config.get("EQUIPMENT_BACKEND") == "memory":
        return True
    return os.getenv("FAKE_EQUIPMENT") == "1"


def get_store(app: Flask | None = None) -> EquipmentStore:
    """Devuelve el cliente configurado para la app (o la actual)."""

    app = app or current_app._get_current_object()  # type: ignore[attr-defined]
    if _use_memory(app):
        store = app.extensions.get("equipment_store")
        if store is None:
            store = InMemoryEquipmentStore(app.config.get("EQUIPMENT_SEED") or ())
            app.extensions["equipment_store"] = store
        return store

    access_token = None
    if has_request_context():
        from inventario.security.session import current_context

        context = current_context()
        access_token = context.access_token if context else None

    return SupabaseEquipmentStore(
        app.config.get("SUPABASE_URL", ""),
        app.config.get("SUPABASE_KEY", ""),
        table=app.config.get("EQUIPMENT_TABLE", "equipment"),
        access_token=access_token,
        timeout=float(app.config.get("BACKEND_TIMEOUT", DEFAULT_TIMEOUT)),
    )


__all__ = [
    "EquipmentStore",
    "InMemoryEquipmentStore",
    "SupabaseEquipmentStore",
    "get_store",
]
