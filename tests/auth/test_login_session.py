import pytest

from inventario.security.session import SESSION_KEY


@pytest.fixture
def secured(app):
    app.config.update(LOGIN_DISABLED=False, AUTH_DISABLED=False)
    return app


def _login(client, email="ana@inventario.co", password="admin123", next_url=None):
    url = "/auth/login" if next_url is None else f"/auth/login?next={next_url}"
    return client.post(url, data={"email": email, "password": password})


def test_inventory_redirects_to_login(client, secured):
    res = client.get("/inventario/")
    assert res.status_code == 302
    assert "/auth/login" in res.headers["Location"]


def test_login_page_renders(client, secured):
    res = client.get("/auth/login")
    assert res.status_code == 200
    assert 'name="email"' in res.get_data(as_text=True)


def test_login_creates_session_context(client, secured):
    res = _login(client)
    assert res.status_code == 302
    assert res.headers["Location"].endswith("/inventario/")

    with client.session_transaction() as sess:
        context = sess[SESSION_KEY]
    assert context["email"] == "ana@inventario.co"
    assert context["user_id"]

    res = client.get("/inventario/")
    assert res.status_code == 200
    assert "ana@inventario.co" in res.get_data(as_text=True)


def test_login_follows_local_next_only(client, secured):
    res = _login(client, next_url="/inventario/nuevo")
    assert res.headers["Location"].endswith("/inventario/nuevo")

    client.post("/auth/logout")
    res = _login(client, next_url="https://evil.example/")
    assert res.headers["Location"].endswith("/inventario/")


def test_wrong_password_is_rejected(client, secured):
    res = _login(client, password="nope")
    assert res.status_code == 401
    assert "Correo o contraseña inválidos." in res.get_data(as_text=True)
    with client.session_transaction() as sess:
        assert SESSION_KEY not in sess


def test_invalid_email_is_bad_request(client, secured):
    res = _login(client, email="no-es-correo")
    assert res.status_code == 400


def test_logout_destroys_session_context(client, secured):
    _login(client)
    res = client.post("/auth/logout")
    assert res.status_code == 302
    assert res.headers["Location"].endswith("/auth/login")

    with client.session_transaction() as sess:
        assert SESSION_KEY not in sess
    assert client.get("/inventario/").status_code == 302



def test_non_ascii_password_is_rejected_not_crashing(client, secured):
    res = _login(client, password="contraseña")
    assert res.status_code == 401
    assert "Correo o contraseña inválidos." in res.get_data(as_text=True)
