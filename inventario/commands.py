"""Comandos CLI (``flask equipos ...``)."""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import AppGroup

from inventario.errors import StoreError
from inventario.models.equipment import EquipmentDraft, EquipmentStatus, EquipmentType
from inventario.services.equipment_store import get_store
from inventario.services.inventory import filter_records, summarize

equipos_cli = AppGroup("equipos", help="Consulta y carga del inventario.")

DEMO_DRAFTS = (
    EquipmentDraft(EquipmentType.LAPTOP, "Lenovo ThinkPad X1 SN-PF3K2", "PL-0001"),
    EquipmentDraft(EquipmentType.LAPTOP, "Dell Latitude 5420 SN-7GH21", "PL-0002", EquipmentStatus.LOANED),
    EquipmentDraft(EquipmentType.PRINTER, "HP LaserJet M404 SN-VNB3", "PL-0003"),
    EquipmentDraft(EquipmentType.DESKTOP, "HP ProDesk 400 SN-MXL91", "PL-0004", EquipmentStatus.MAINTENANCE),
    EquipmentDraft(EquipmentType.DESKTOP, "Dell OptiPlex 3080 SN-4KQ8", "PL-0005", EquipmentStatus.INACTIVE),
)


@equipos_cli.command("listar")
@click.option("--q", "term", default="", help="Filtra por modelo, placa o tipo.")
def listar(term: str) -> None:
    """Imprime el inventario y el resumen por estado."""

    try:
        records = get_store().list()
    except StoreError as exc:
        current_app.logger.error("Error loading equipment: %s", exc, exc_info=exc)
        raise click.ClickException("Error al cargar el inventario") from exc

    for record in filter_records(records, term):
        click.echo(
            f"{record.id}\t{record.type.value}\t{record.model}\t"
            f"{record.serial_number}\t{record.status.value}"
        )
    summary = summarize(records)
    click.echo(
        f"Total: {summary.total} | Disponibles: {summary.available} | "
        f"En préstamo: {summary.loaned} | Inactivos: {summary.inactive}"
    )


@equipos_cli.command("seed-demo")
def seed_demo() -> None:
    """Crea equipos de ejemplo en el backend configurado."""

    store = get_store()
    created = 0
    for draft in DEMO_DRAFTS:
        try:
            store.create(draft)
        except StoreError as exc:
            raise click.ClickException(f"No se pudo crear {draft.serial_number}: {exc}") from exc
        created += 1
    click.echo(f"Equipos creados: {created}")


def register_commands(app):
    if "equipos" not in app.cli.commands:
        app.cli.add_command(equipos_cli)
