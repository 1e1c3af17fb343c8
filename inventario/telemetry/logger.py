"""Logs estructurados (JSON en producción, texto en desarrollo y pruebas)."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from flask import g, has_request_context

TEXT_FORMAT = "%(asctime)s %(levelname)s %(request_id)s %(name)s: %(message)s"

# Campos que las vistas y el cliente del backend pasan vía ``extra=``.
EXTRA_FIELDS = ("event", "user_id", "email", "equipment_id", "operation")


class RequestContextFilter(logging.Filter):
    """Añade ``request_id`` a cada registro ("-" fuera de una petición)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = getattr(g, "request_id", "-") if has_request_context() else "-"
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        request_id = getattr(record, "request_id", None)
        if request_id is not None:
            payload["request_id"] = request_id
        payload.update(
            (key, getattr(record, key))
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _formatter_for(log_format: str) -> logging.Formatter:
    if log_format.lower() == "json":
        return JsonFormatter()
    return logging.Formatter(TEXT_FORMAT)


def setup_logging(app) -> None:
    """Reemplaza los handlers del logger raíz según ``LOG_LEVEL`` y ``LOG_FORMAT``."""

    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(_formatter_for(str(app.config.get("LOG_FORMAT", "json"))))
    handler.addFilter(RequestContextFilter())
    root_logger.addHandler(handler)

    # El logger de Flask propaga al raíz para no duplicar salidas.
    app.logger.handlers.clear()
    app.logger.propagate = True
    app.logger.setLevel(level)
