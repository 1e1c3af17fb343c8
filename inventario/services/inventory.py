"""Estado de la vista de inventario: carga, resumen, búsqueda y modales.

La vista pasa por ``LOADING`` y termina en ``READY`` o ``ERROR``. En ``READY``
hay como mucho un modal abierto, representado por uno de los estados
:class:`Idle`, :class:`EditModalOpen` o :class:`ImageModalOpen`; abrir otro
modal sin cerrar el actual es una :class:`InvalidTransition`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, NamedTuple, Union

from inventario.errors import FetchFailure, InvalidTransition, WriteFailure
from inventario.models.equipment import Equipment, EquipmentDraft, EquipmentStatus
from inventario.services.equipment_store import EquipmentStore

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Error al cargar el inventario"
SAVE_ERROR_MESSAGE = "Error al guardar el equipo"


class Phase(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class Idle:
    kind: ClassVar[str] = "idle"


@dataclass(frozen=True)
class EditModalOpen:
    kind: ClassVar[str] = "edit"
    record: Equipment | None = None

    @property
    def is_new(self) -> bool:
        return self.record is None


@dataclass(frozen=True)
class ImageModalOpen:
    kind: ClassVar[str] = "images"
    record: Equipment


ModalState = Union[Idle, EditModalOpen, ImageModalOpen]


class InventorySummary(NamedTuple):
    total: int
    available: int
    loaned: int
    inactive: int

    @property
    def other(self) -> int:
        return self.total - self.available - self.loaned - self.inactive


def summarize(records: Sequence[Equipment]) -> InventorySummary:
    counts = {EquipmentStatus.AVAILABLE: 0, EquipmentStatus.LOANED: 0, EquipmentStatus.INACTIVE: 0}
    for record in records:
        if record.status in counts:
            counts[record.status] += 1
    return InventorySummary(
        total=len(records),
        available=counts[EquipmentStatus.AVAILABLE],
        loaned=counts[EquipmentStatus.LOANED],
        inactive=counts[EquipmentStatus.INACTIVE],
    )


def filter_records(records: Sequence[Equipment], term: str) -> list[Equipment]:
    """Coincidencia sin mayúsculas en modelo, placa o tipo; conserva el orden."""

    needle = (term or "").lower()
    if not needle:
        return list(records)
    return [
        record
        for record in records
        if needle in record.model.lower()
        or needle in record.serial_number.lower()
        or needle in record.type.value.lower()
    ]


@dataclass
class InventoryView:
    search: str = ""
    phase: Phase = Phase.LOADING
    records: list[Equipment] = field(default_factory=list)
    error: str | None = None
    modal: ModalState = field(default_factory=Idle)

    @property
    def summary(self) -> InventorySummary:
        return summarize(self.records)

    @property
    def filtered(self) -> list[Equipment]:
        return filter_records(self.records, self.search)

    def find(self, equipment_id: int | str) -> Equipment | None:
        for record in self.records:
            if str(record.id) == str(equipment_id):
                return record
        return None

    def load(self, store: EquipmentStore) -> "InventoryView":
        self.phase = Phase.LOADING
        try:
            self.records = store.list()
        except FetchFailure as exc:
            logger.error("Error loading equipment: %s", exc, exc_info=exc)
            self.records = []
            self.error = LOAD_ERROR_MESSAGE
            self.phase = Phase.ERROR
            self.modal = Idle()
            return self
        self.error = None
        self.phase = Phase.READY
        return self

    def _require_idle(self, action: str) -> None:
        if self.phase is not Phase.READY:
            raise InvalidTransition(f"{action}: la vista está en {self.phase.value}")
        if not isinstance(self.modal, Idle):
            raise InvalidTransition(f"{action}: ya hay un modal abierto")

    def open_new(self) -> EditModalOpen:
        self._require_idle("open_new")
        self.modal = EditModalOpen()
        return self.modal

    def open_edit(self, record: Equipment) -> EditModalOpen:
        self._require_idle("open_edit")
        self.modal = EditModalOpen(record)
        return self.modal

    def open_images(self, record: Equipment) -> ImageModalOpen:
        self._require_idle("open_images")
        self.modal = ImageModalOpen(record)
        return self.modal

    def close(self) -> None:
        self.modal = Idle()

    def submit(
        self, store: EquipmentStore, draft: EquipmentDraft, reload: bool = True
    ) -> Equipment | None:
        """Guarda el borrador del modal de edición y lo cierra.

        Si el backend falla, la vista pasa a ``ERROR`` y el borrador se
        descarta; el usuario debe abrir el modal otra vez.
        """

        if not isinstance(self.modal, EditModalOpen):
            raise InvalidTransition("submit: el formulario no está abierto")

        existing = self.modal.record
        try:
            if existing is None:
                saved = store.create(draft)
            else:
                saved = store.update(existing.id, draft.with_type(existing.type))
        except WriteFailure as exc:
            logger.error("Error saving equipment: %s", exc, exc_info=exc)
            self.error = SAVE_ERROR_MESSAGE
            self.phase = Phase.ERROR
            self.close()
            return None

        if reload:
            self.load(store)
        self.close()
        return saved


class Carousel:
    """Navegación de imágenes con vuelta al principio en ambos extremos."""

    EMPTY = "empty"
    SINGLE = "single"
    MULTIPLE = "carousel"

    def __init__(self, images: Sequence[str]) -> None:
        self.images = tuple(images)

    def __len__(self) -> int:
        return len(self.images)

    @property
    def mode(self) -> str:
        if not self.images:
            return self.EMPTY
        if len(self.images) == 1:
            return self.SINGLE
        return self.MULTIPLE

    @property
    def has_controls(self) -> bool:
        return self.mode == self.MULTIPLE

    def position(self, index: int) -> int:
        if not self.images:
            return 0
        return index % len(self.images)

    def next_index(self, index: int) -> int:
        return self.position(index + 1)

    def prev_index(self, index: int) -> int:
        return self.position(index - 1)

    def current(self, index: int) -> str | None:
        if not self.images:
            return None
        return self.images[self.position(index)]
