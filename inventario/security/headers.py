"""Cabeceras de seguridad para las respuestas del inventario."""

from __future__ import annotations

from flask import Flask, request

# Las fotos de los equipos viven en el storage de Supabase (https).
DEFAULT_CSP = "default-src 'self'; img-src 'self' https: data:"

BASE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}


def set_security_headers(app: Flask) -> None:
    """Registra un ``after_request`` que completa las cabeceras de seguridad.

    La CSP sale de ``CONTENT_SECURITY_POLICY``; HSTS sólo se envía en
    peticiones https con cookies seguras.
    """

    csp = app.config.get("CONTENT_SECURITY_POLICY") or DEFAULT_CSP

    @app.after_request  # type: ignore[misc]
    def _headers(resp):
        for name, value in BASE_HEADERS.items():
            resp.headers.setdefault(name, value)
        resp.headers.setdefault("Content-Security-Policy", csp)
        if request.is_secure and app.config.get("SESSION_COOKIE_SECURE"):
            resp.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        # Las páginas del inventario muestran datos vivos del backend.
        if resp.mimetype == "text/html":
            resp.headers.setdefault("Cache-Control", "no-store")
        return resp
