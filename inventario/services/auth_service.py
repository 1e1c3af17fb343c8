"""Inicio y cierre de sesión contra Supabase Auth (GoTrue)."""

from __future__ import annotations

import hashlib
import hmac
import logging
import time

import httpx
from flask import Flask, current_app

from inventario.errors import AuthFailure
from inventario.security.session import SessionContext

logger = logging.getLogger(__name__)


class SupabaseAuthClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=f"{self.base_url}/auth/v1",
            headers={"apikey": self.api_key, "Content-Type": "application/json"},
            timeout=self.timeout,
            transport=self._transport,
        )

    def sign_in(self, email: str, password: str) -> SessionContext:
        try:
            with self._client() as client:
                response = client.post(
                    "/token",
                    params={"grant_type": "password"},
                    json={"email": email, "password": password},
                )
        except httpx.HTTPError as exc:
            raise AuthFailure("proveedor de autenticación inaccesible") from exc

        if response.status_code in (400, 401, 403):
            raise AuthFailure("credenciales inválidas")
        try:
            response.raise_for_status()
            data = response.json()
            user = data["user"]
            expires_in = int(data.get("expires_in") or 0)
            return SessionContext(
                user_id=str(user["id"]),
                email=str(user.get("email") or email),
                access_token=data["access_token"],
                refresh_token=data.get("refresh_token"),
                expires_at=int(time.time()) + expires_in if expires_in else None,
            )
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            raise AuthFailure("respuesta inválida del proveedor") from exc

    def sign_out(self, context: SessionContext) -> None:
        if not context.access_token:
            return
        try:
            with self._client() as client:
                client.post(
                    "/logout",
                    headers={"Authorization": f"Bearer {context.access_token}"},
                )
        except httpx.HTTPError as exc:
            # El contexto local se destruye igual; el token caduca solo.
            logger.warning("No se pudo revocar la sesión de %s: %s", context.email, exc)


class DevAuthClient:
    """Autenticación local para desarrollo: cualquier email con ``DEV_PASSWORD``."""

    def __init__(self, password: str) -> None:
        self.password = password

    def sign_in(self, email: str, password: str) -> SessionContext:
        if not self.password or not hmac.compare_digest(
            password.encode("utf-8"), self.password.encode("utf-8")
        ):
            raise AuthFailure("credenciales inválidas")
        user_id = hashlib.sha1(email.encode("utf-8")).hexdigest()[:12]
        return SessionContext(user_id=user_id, email=email)

    def sign_out(self, context: SessionContext) -> None:
        return None


def get_auth_client(app: Flask | None = None) -> SupabaseAuthClient | DevAuthClient:
    app = app or current_app._get_current_object()  # type: ignore[attr-defined]
    if app.config.get("AUTH_BACKEND") == "memory":
        return DevAuthClient(app.config.get("DEV_PASSWORD", ""))
    return SupabaseAuthClient(
        app.config.get("SUPABASE_URL", ""),
        app.config.get("SUPABASE_KEY", ""),
        timeout=float(app.config.get("BACKEND_TIMEOUT", 10.0)),
    )
