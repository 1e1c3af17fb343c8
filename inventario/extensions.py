"""Extensiones compartidas para autenticación y utilidades globales."""

from __future__ import annotations

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_wtf import CSRFProtect

csrf = CSRFProtect()

login_manager = LoginManager()
login_manager.login_view = "auth.login"
login_manager.login_message = "Inicia sesión para continuar."
login_manager.login_message_category = "warning"

# Rate limiting (lazy init, se inicializa en create_app)
limiter = Limiter(key_func=get_remote_address, headers_enabled=True, default_limits=[])


def init_extensions(app):
    """Inicializa CSRF, sesión de usuario y rate limiting."""

    from inventario.security.session import load_user

    csrf.init_app(app)
    login_manager.init_app(app)
    login_manager.user_loader(load_user)
    limiter.init_app(app)
