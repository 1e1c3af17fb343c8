"""Filtros de presentación para plantillas."""

from __future__ import annotations

from datetime import datetime

import pytz


def local_date(value: datetime | None, tz_name: str = "UTC", fmt: str = "%d/%m/%Y") -> str:
    """Fecha en la zona horaria de la app; cadena vacía si no hay valor."""

    if value is None:
        return ""
    try:
        tz = pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        tz = pytz.utc
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    return value.astimezone(tz).strftime(fmt)
