"""Modelos de dominio del inventario."""

from __future__ import annotations

from .equipment import (
    Badge,
    DraftError,
    Equipment,
    EquipmentDraft,
    EquipmentStatus,
    EquipmentType,
    FORM_STATUSES,
    RecordFormatError,
    STATUS_BADGES,
    TYPE_LABELS,
    status_badge,
)

__all__ = [
    "Badge",
    "DraftError",
    "Equipment",
    "EquipmentDraft",
    "EquipmentStatus",
    "EquipmentType",
    "FORM_STATUSES",
    "RecordFormatError",
    "STATUS_BADGES",
    "TYPE_LABELS",
    "status_badge",
]
