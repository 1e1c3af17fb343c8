"""Security helpers: login guard, session context and response headers."""

from __future__ import annotations

from .authz import auth_disabled, require_login  # noqa: F401
from .session import (  # noqa: F401
    SessionContext,
    SessionUser,
    current_context,
    sign_in,
    sign_out,
)

__all__ = [
    "auth_disabled",
    "require_login",
    "SessionContext",
    "SessionUser",
    "current_context",
    "sign_in",
    "sign_out",
]
