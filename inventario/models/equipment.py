"""Registro de equipo y borradores de alta/edición."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any


class EquipmentType(str, Enum):
    LAPTOP = "laptop"
    PRINTER = "printer"
    DESKTOP = "desktop"

    @property
    def label(self) -> str:
        return TYPE_LABELS[self]


class EquipmentStatus(str, Enum):
    AVAILABLE = "available"
    LOANED = "loaned"
    MAINTENANCE = "maintenance"
    LOST = "lost"
    DAMAGED = "damaged"
    INACTIVE = "inactive"
    UNAVAILABLE = "unavailable"
    # Cualquier valor del backend fuera del catálogo.
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: object) -> "EquipmentStatus":
        """Convierte el valor crudo del backend sin fallar nunca."""

        if isinstance(raw, cls):
            return raw
        value = str(raw or "").strip().lower()
        try:
            status = cls(value)
        except ValueError:
            return cls.UNKNOWN
        return status

    @property
    def label(self) -> str:
        return STATUS_BADGES[self].label


@dataclass(frozen=True)
class Badge:
    css_class: str
    label: str


TYPE_LABELS: dict[EquipmentType, str] = {
    EquipmentType.LAPTOP: "Laptop",
    EquipmentType.PRINTER: "Impresora",
    EquipmentType.DESKTOP: "Computador de mesa",
}

TYPE_ICONS: dict[EquipmentType, str] = {
    EquipmentType.LAPTOP: "laptop",
    EquipmentType.PRINTER: "printer",
    EquipmentType.DESKTOP: "monitor",
}

STATUS_BADGES: dict[EquipmentStatus, Badge] = {
    EquipmentStatus.AVAILABLE: Badge("badge-green", "Disponible"),
    EquipmentStatus.LOANED: Badge("badge-yellow", "En préstamo"),
    EquipmentStatus.MAINTENANCE: Badge("badge-blue", "En mantenimiento"),
    EquipmentStatus.LOST: Badge("badge-red", "Extraviado"),
    EquipmentStatus.DAMAGED: Badge("badge-red", "Dañado"),
    EquipmentStatus.INACTIVE: Badge("badge-purple", "Inactivo"),
    EquipmentStatus.UNAVAILABLE: Badge("badge-gray", "No disponible"),
    EquipmentStatus.UNKNOWN: Badge("badge-gray", "Desconocido"),
}

# Estados que el formulario ofrece; "loaned" y "unavailable" los fija el flujo de préstamos.
FORM_STATUSES: tuple[EquipmentStatus, ...] = (
    EquipmentStatus.AVAILABLE,
    EquipmentStatus.MAINTENANCE,
    EquipmentStatus.LOST,
    EquipmentStatus.DAMAGED,
    EquipmentStatus.INACTIVE,
)


def status_badge(status: object) -> Badge:
    return STATUS_BADGES[EquipmentStatus.parse(status)]


class DraftError(ValueError):
    """Borrador inválido; ``field`` indica el campo culpable."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class RecordFormatError(ValueError):
    """Fila del backend que no se puede interpretar como equipo."""


# PostgREST recorta ceros finales de los microsegundos (".12345") y puede usar "Z".
_FRACTION = re.compile(r"\.(\d+)")


def _normalize_iso(text: str) -> str:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)


def _parse_timestamp(raw: object) -> datetime | None:
    if raw in (None, ""):
        return None
    if isinstance(raw, datetime):
        return raw
    try:
        return datetime.fromisoformat(_normalize_iso(str(raw).strip()))
    except ValueError as exc:
        raise RecordFormatError(f"timestamp inválido: {raw!r}") from exc


def _clean_images(raw: object) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        raw = raw.splitlines()
    if not isinstance(raw, Iterable):
        raise DraftError("images", "debe ser una lista de URLs")
    return tuple(str(item).strip() for item in raw if str(item).strip())


@dataclass(frozen=True)
class Equipment:
    id: int | str
    type: EquipmentType
    model: str
    serial_number: str
    status: EquipmentStatus = EquipmentStatus.AVAILABLE
    images: tuple[str, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Equipment":
        """Construye el registro a partir de una fila del backend."""

        try:
            record_id = row["id"]
            raw_type = row["type"]
        except KeyError as exc:
            raise RecordFormatError(f"falta la columna {exc.args[0]!r}") from exc
        try:
            equipment_type = EquipmentType(str(raw_type).strip().lower())
        except ValueError as exc:
            raise RecordFormatError(f"tipo desconocido: {raw_type!r}") from exc
        images = row.get("imagenes")
        if images is None:
            images = row.get("images")
        try:
            images = _clean_images(images)
        except DraftError as exc:
            raise RecordFormatError(exc.message) from exc
        return cls(
            id=record_id,
            type=equipment_type,
            model=str(row.get("model") or ""),
            serial_number=str(row.get("serial_number") or ""),
            status=EquipmentStatus.parse(row.get("status")),
            images=images,
            created_at=_parse_timestamp(row.get("created_at")),
            updated_at=_parse_timestamp(row.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "model": self.model,
            "serial_number": self.serial_number,
            "status": self.status.value,
            "images": list(self.images),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @property
    def badge(self) -> Badge:
        return STATUS_BADGES[self.status]

    @property
    def icon(self) -> str:
        return TYPE_ICONS[self.type]


DRAFT_FIELDS = ("type", "model", "serial_number", "status", "images")


@dataclass
class EquipmentDraft:
    type: EquipmentType = EquipmentType.LAPTOP
    model: str = ""
    serial_number: str = ""
    status: EquipmentStatus = EquipmentStatus.AVAILABLE
    images: list[str] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Equipment) -> "EquipmentDraft":
        return cls(
            type=record.type,
            model=record.model,
            serial_number=record.serial_number,
            status=record.status,
            images=list(record.images),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EquipmentDraft":
        """Valida un borrador completo; ``status`` ausente vale ``available``."""

        values = validate_changes(data)
        for name in ("model", "serial_number"):
            if not values.get(name):
                raise DraftError(name, "es obligatorio")
        return cls(**values)

    def with_type(self, equipment_type: EquipmentType) -> "EquipmentDraft":
        return replace(self, type=equipment_type)

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "model": self.model,
            "serial_number": self.serial_number,
            "status": self.status.value,
            "imagenes": list(self.images),
        }


def validate_changes(data: Mapping[str, Any]) -> dict[str, Any]:
    """Valida sólo las claves presentes (edición parcial).

    Devuelve los valores normalizados con los nombres del borrador; las claves
    desconocidas se rechazan.
    """

    unknown = sorted(set(data) - set(DRAFT_FIELDS) - {"imagenes"})
    if unknown:
        raise DraftError(unknown[0], "campo no permitido")

    values: dict[str, Any] = {}
    if "type" in data:
        raw_type = data["type"]
        if isinstance(raw_type, Enum):
            raw_type = raw_type.value
        try:
            values["type"] = EquipmentType(str(raw_type or "").strip().lower())
        except ValueError as exc:
            raise DraftError("type", "tipo inválido") from exc
    for name in ("model", "serial_number"):
        if name in data:
            text = str(data[name] or "").strip()
            if not text:
                raise DraftError(name, "es obligatorio")
            values[name] = text
    if "status" in data:
        status = EquipmentStatus.parse(data["status"])
        if status is EquipmentStatus.UNKNOWN:
            raise DraftError("status", "estado inválido")
        values["status"] = status
    if "images" in data or "imagenes" in data:
        raw = data["images"] if "images" in data else data["imagenes"]
        values["images"] = list(_clean_images(raw))
    return values


def changes_payload(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Traduce cambios validados a columnas del backend."""

    payload: dict[str, Any] = {}
    for name, value in changes.items():
        if name == "images":
            payload["imagenes"] = list(value)
        elif isinstance(value, Enum):
            payload[name] = value.value
        else:
            payload[name] = value
    return payload
