from __future__ import annotations

import logging
import uuid

from flask import g, jsonify, render_template, request
from werkzeug.exceptions import HTTPException


class StoreError(RuntimeError):
    """Fallo al hablar con el backend de datos."""


class FetchFailure(StoreError):
    """``list()`` no pudo obtener el inventario."""


class WriteFailure(StoreError):
    """``create()``/``update()`` fue rechazado o no llegó al backend."""


class AuthFailure(RuntimeError):
    """Credenciales rechazadas o proveedor de autenticación inaccesible."""


class InvalidTransition(RuntimeError):
    """Transición no permitida en la máquina de estados de la vista."""


def _wants_json() -> bool:
    return request.path.startswith("/api/") or (
        request.accept_mimetypes.best == "application/json"
    )


def _json_error(status: int, message: str | None = None):
    return (
        jsonify(
            error={
                "code": status,
                "message": message or "error",
                "path": request.path,
                "request_id": getattr(g, "request_id", None),
            }
        ),
        status,
    )


def _error_response(status: int, message: str):
    if _wants_json():
        return _json_error(status, message)
    return (
        render_template(
            "errors/error.html",
            code=status,
            message=message,
            request_id=getattr(g, "request_id", None),
        ),
        status,
    )


def register_instrumentation(app):
    @app.before_request
    def _assign_request_id():
        rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex
        g.request_id = rid

    @app.after_request
    def _attach_request_id(resp):
        rid = getattr(g, "request_id", None)
        if rid:
            resp.headers["X-Request-Id"] = rid
        return resp


def register_error_handlers(app):
    register_instrumentation(app)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return _error_response(e.code or 500, e.description or e.name)

    @app.errorhandler(StoreError)
    def _store(e: StoreError):
        # Las vistas capturan sus propios fallos; esto cubre rutas sin manejo.
        app.logger.error("Backend no disponible: %s", e, exc_info=e)
        return _error_response(502, "Backend no disponible")

    @app.errorhandler(Exception)
    def _500(e):
        try:
            app.logger.exception("Unhandled exception", exc_info=e)
        except Exception:
            logging.exception("Unhandled exception (fallback)")
        return _error_response(500, "Internal Server Error")
