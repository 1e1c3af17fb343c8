from __future__ import annotations

from flask import Blueprint

bp = Blueprint("inventario", __name__, url_prefix="/inventario")

from . import routes  # noqa: E402,F401
