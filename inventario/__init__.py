"""Fábrica de la app Flask del inventario de equipos."""

from __future__ import annotations

import os

from flask import Flask

from .commands import register_commands
from .config import load_config
from .errors import register_error_handlers
from .extensions import csrf, init_extensions, limiter
from .models.equipment import STATUS_BADGES, TYPE_LABELS, status_badge
from .registry import register_blueprints
from .security.headers import set_security_headers
from .telemetry import setup_logging
from .utils.formatting import local_date


def create_app(config_name: str | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(load_config(config_name))
    app.config.setdefault("LOG_LEVEL", "INFO")

    if app.config.get("AUTH_DISABLED") and not app.config.get("LOGIN_DISABLED"):
        app.config["LOGIN_DISABLED"] = True

    setup_logging(app)
    init_extensions(app)

    set_security_headers(app)
    register_error_handlers(app)

    @app.template_filter("fecha")
    def _fecha(value):
        return local_date(value, app.config.get("APP_TZ", "UTC"))

    # Global de Jinja: los macros importados no ven el contexto de la petición.
    app.add_template_global(status_badge, "status_badge")

    @app.context_processor
    def inject_globals():
        return {
            "APP_NAME": app.config.get("APP_NAME"),
            "DEV_MODE": bool(
                app.config.get("AUTH_DISABLED") or app.config.get("LOGIN_DISABLED")
            ),
            "TYPE_LABELS": TYPE_LABELS,
            "STATUS_BADGES": STATUS_BADGES,
        }

    blueprints = register_blueprints(app)

    # La API JSON no usa formularios; queda fuera del CSRF global.
    api_bp = blueprints.get("equipment_v1")
    if api_bp is not None:
        csrf.exempt(api_bp)

    ping_bp = blueprints.get("ping")
    if ping_bp is not None:
        limiter.exempt(ping_bp)

    register_commands(app)

    secret_key = app.config.get("SECRET_KEY", "")
    if not secret_key or len(secret_key) < 32:
        app.logger.warning(
            "SECRET_KEY is shorter than 32 characters. Provide a secure 32+ byte key for production.",
        )
    if os.getenv("FAKE_EQUIPMENT") == "1" or app.config.get("EQUIPMENT_BACKEND") == "memory":
        app.logger.info("Backend de equipos en memoria (los datos no se persisten).")

    return app
