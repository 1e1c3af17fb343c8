"""Blueprint mínimo para healthchecks y la portada."""

from __future__ import annotations

from flask import Blueprint, Response, current_app, redirect, url_for

bp_ping = Blueprint("ping", __name__)


@bp_ping.get("/")
def home():
    return redirect(url_for("inventario.index"))


@bp_ping.get("/ping")
def ping() -> Response:
    """Responde con un texto plano para los healthchecks externos."""
    return Response("pong", 200, {"Content-Type": "text/plain; charset=utf-8"})


@bp_ping.get("/healthz")
def healthz():
    return {
        "ok": True,
        "backend": current_app.config.get("EQUIPMENT_BACKEND"),
        "version": current_app.config.get("APP_VERSION"),
    }, 200
