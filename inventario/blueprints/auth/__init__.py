from __future__ import annotations

from flask import Blueprint

bp_auth = Blueprint("auth", __name__, url_prefix="/auth")

from . import routes  # noqa: E402,F401
