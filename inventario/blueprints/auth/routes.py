from __future__ import annotations

from urllib.parse import urlsplit

from flask import current_app, flash, redirect, render_template, request, url_for
from flask_login import current_user

from inventario.errors import AuthFailure
from inventario.extensions import limiter
from inventario.forms import LoginForm
from inventario.metrics import login_attempts_total
from inventario.security.session import sign_in, sign_out
from inventario.services.auth_service import get_auth_client

from . import bp_auth


def _safe_next(target: str | None) -> str:
    # Sólo rutas locales; nada de redirecciones abiertas.
    if target:
        parts = urlsplit(target)
        if not parts.scheme and not parts.netloc and target.startswith("/"):
            return target
    return url_for("inventario.index")


def _login_limit() -> str:
    return current_app.config.get("LOGIN_RATE_LIMIT", "10 per minute")


@bp_auth.route("/login", methods=["GET", "POST"])
@limiter.limit(_login_limit, methods=["POST"])
def login():
    if current_user.is_authenticated:
        return redirect(_safe_next(request.args.get("next")))

    form = LoginForm()
    if not form.validate_on_submit():
        status = 400 if request.method == "POST" else 200
        return render_template("auth/login.html", form=form), status

    try:
        context = get_auth_client().sign_in(form.email.data, form.password.data)
    except AuthFailure as exc:
        login_attempts_total.labels("rejected").inc()
        current_app.logger.warning(
            "Inicio de sesión rechazado: %s", exc, extra={"email": form.email.data}
        )
        flash("Correo o contraseña inválidos.", "error")
        return render_template("auth/login.html", form=form), 401

    sign_in(context)
    login_attempts_total.labels("ok").inc()
    current_app.logger.info(
        "Sesión iniciada", extra={"event": "login", "user_id": context.user_id}
    )
    return redirect(_safe_next(request.args.get("next")))


@bp_auth.post("/logout")
def logout():
    context = sign_out()
    if context is not None:
        get_auth_client().sign_out(context)
        current_app.logger.info(
            "Sesión cerrada", extra={"event": "logout", "user_id": context.user_id}
        )
    flash("Sesión cerrada.", "success")
    return redirect(url_for("auth.login"))
