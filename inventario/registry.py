"""Centraliza el registro de blueprints de la aplicación."""

from __future__ import annotations

from flask import Blueprint, Flask

from inventario.api.metrics import bp as metrics_bp
from inventario.api.v1.equipment import bp as equipment_v1_bp
from inventario.blueprints.auth import bp_auth
from inventario.blueprints.inventario import bp as inventario_bp
from inventario.blueprints.ping import bp_ping


def register_blueprints(app: Flask) -> dict[str, Blueprint]:
    """Registra todos los blueprints conocidos y devuelve un índice por nombre."""

    entries: list[tuple[Blueprint, dict[str, object]]] = [
        (bp_ping, {}),
        (bp_auth, {}),
        (inventario_bp, {}),
        (equipment_v1_bp, {}),
        (metrics_bp, {}),
    ]

    registry: dict[str, Blueprint] = {}
    for blueprint, options in entries:
        app.register_blueprint(blueprint, **options)
        registry[blueprint.name] = blueprint

    return registry
