"""Contexto de sesión explícito: se crea al iniciar sesión y se destruye al salir."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from flask import session
from flask_login import UserMixin, login_user, logout_user

SESSION_KEY = "auth_context"


@dataclass(frozen=True)
class SessionContext:
    user_id: str
    email: str
    access_token: str | None = None
    refresh_token: str | None = None
    expires_at: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionContext":
        return cls(
            user_id=str(data["user_id"]),
            email=str(data.get("email") or ""),
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
            expires_at=data.get("expires_at"),
        )


class SessionUser(UserMixin):
    """Usuario de Flask-Login respaldado por un :class:`SessionContext`."""

    def __init__(self, context: SessionContext) -> None:
        self.context = context
        self.id = context.user_id
        self.email = context.email


def current_context() -> SessionContext | None:
    data = session.get(SESSION_KEY)
    if not data:
        return None
    try:
        return SessionContext.from_dict(data)
    except KeyError:
        session.pop(SESSION_KEY, None)
        return None


def load_user(user_id: str) -> SessionUser | None:
    context = current_context()
    if context is None or context.user_id != str(user_id):
        return None
    return SessionUser(context)


def sign_in(context: SessionContext, remember: bool = False) -> SessionUser:
    session[SESSION_KEY] = context.to_dict()
    user = SessionUser(context)
    login_user(user, remember=remember)
    return user


def sign_out() -> SessionContext | None:
    context = current_context()
    logout_user()
    session.pop(SESSION_KEY, None)
    return context


__all__ = [
    "SessionContext",
    "SessionUser",
    "current_context",
    "load_user",
    "sign_in",
    "sign_out",
]
