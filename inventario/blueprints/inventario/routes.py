from __future__ import annotations

from flask import abort, flash, redirect, render_template, request, url_for

from inventario.forms import EquipmentForm
from inventario.models.equipment import Equipment
from inventario.security import require_login
from inventario.services.equipment_store import EquipmentStore, get_store
from inventario.services.inventory import Carousel, InventoryView, Phase

from . import bp


def _search_term() -> str:
    return (request.values.get("q") or "").strip()


def _load(store: EquipmentStore | None = None) -> InventoryView:
    return InventoryView(search=_search_term()).load(store or get_store())


def _record_or_404(view: InventoryView, equipment_id: str) -> Equipment:
    record = view.find(equipment_id)
    if record is None:
        abort(404, description="Equipo no encontrado")
    return record


def _render(
    view: InventoryView,
    form: EquipmentForm | None = None,
    carousel: Carousel | None = None,
    image_index: int = 0,
    status: int = 200,
):
    if view.phase is Phase.ERROR:
        status = 502
    return (
        render_template(
            "inventario/index.html",
            view=view,
            form=form,
            carousel=carousel,
            image_index=image_index,
        ),
        status,
    )


@bp.get("/")
@require_login
def index():
    return _render(_load())


@bp.get("/nuevo")
@require_login
def nuevo():
    view = _load()
    if view.phase is not Phase.READY:
        return _render(view)
    view.open_new()
    return _render(view, form=EquipmentForm())


@bp.get("/<equipment_id>/editar")
@require_login
def editar(equipment_id: str):
    view = _load()
    if view.phase is not Phase.READY:
        return _render(view)
    record = _record_or_404(view, equipment_id)
    view.open_edit(record)
    return _render(view, form=EquipmentForm(record=record))


@bp.get("/<equipment_id>/imagenes")
@require_login
def imagenes(equipment_id: str):
    view = _load()
    if view.phase is not Phase.READY:
        return _render(view)
    record = _record_or_404(view, equipment_id)
    view.open_images(record)
    carousel = Carousel(record.images)
    index = carousel.position(request.args.get("i", 0, type=int) or 0)
    return _render(view, carousel=carousel, image_index=index)


def _submit(equipment_id: str | None):
    store = get_store()
    view = _load(store)
    if view.phase is not Phase.READY:
        return _render(view)

    if equipment_id is None:
        view.open_new()
        form = EquipmentForm()
    else:
        record = _record_or_404(view, equipment_id)
        view.open_edit(record)
        form = EquipmentForm(record=record)

    if not form.validate_on_submit():
        return _render(view, form=form, status=400)

    saved = view.submit(store, form.to_draft(), reload=False)
    if saved is None:
        return _render(view)

    flash("Equipo actualizado" if equipment_id else "Equipo creado", "success")
    return redirect(url_for("inventario.index", q=view.search or None))


@bp.post("/guardar")
@require_login
def crear():
    return _submit(None)


@bp.post("/<equipment_id>/guardar")
@require_login
def actualizar(equipment_id: str):
    return _submit(equipment_id)
