from flask import Blueprint, abort, current_app, jsonify, request

from inventario.errors import FetchFailure, WriteFailure
from inventario.models.equipment import DraftError, EquipmentDraft, validate_changes
from inventario.security import require_login
from inventario.services.equipment_store import get_store
from inventario.services.inventory import filter_records, summarize

bp = Blueprint("equipment_v1", __name__, url_prefix="/api/v1")


def _body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description="Se esperaba un objeto JSON.")
    return data


@bp.get("/equipment")
@require_login
def list_equipment():
    try:
        records = get_store().list()
    except FetchFailure as exc:
        current_app.logger.error("Error loading equipment: %s", exc, exc_info=exc)
        abort(502, description="Error al cargar el inventario")
    q = (request.args.get("q") or "").strip()
    return jsonify(
        equipment=[r.to_dict() for r in filter_records(records, q)],
        summary=summarize(records)._asdict(),
    ), 200


@bp.post("/equipment")
@require_login
def create_equipment():
    try:
        draft = EquipmentDraft.from_mapping(_body())
    except DraftError as exc:
        abort(400, description=str(exc))
    try:
        record = get_store().create(draft)
    except WriteFailure as exc:
        current_app.logger.error("Error saving equipment: %s", exc, exc_info=exc)
        abort(502, description="Error al guardar el equipo")
    return jsonify(equipment=record.to_dict()), 201


@bp.patch("/equipment/<equipment_id>")
@require_login
def update_equipment(equipment_id: str):
    data = _body()
    if "type" in data:
        abort(400, description="type: no se puede cambiar después de crear el equipo")
    try:
        changes = validate_changes(data)
    except DraftError as exc:
        abort(400, description=str(exc))
    if not changes:
        abort(400, description="No hay cambios que guardar.")
    try:
        record = get_store().update(equipment_id, changes)
    except WriteFailure as exc:
        current_app.logger.error("Error saving equipment: %s", exc, exc_info=exc)
        abort(502, description="Error al guardar el equipo")
    return jsonify(equipment=record.to_dict()), 200
