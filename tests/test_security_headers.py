from inventario import create_app


def test_html_pages_are_not_cached(client, seeded):
    res = client.get("/inventario/")
    assert res.headers["Cache-Control"] == "no-store"
    assert res.headers["X-Frame-Options"] == "DENY"
    assert "Strict-Transport-Security" not in res.headers


def test_json_responses_keep_default_caching(client):
    res = client.get("/healthz")
    assert "Cache-Control" not in res.headers


def test_hsts_only_over_https_with_secure_cookies(app, client):
    app.config["SESSION_COOKIE_SECURE"] = True
    res = client.get("/ping", base_url="https://localhost")
    assert res.headers["Strict-Transport-Security"].startswith("max-age=")


def test_csp_comes_from_config(monkeypatch):
    monkeypatch.setenv("CONTENT_SECURITY_POLICY", "default-src 'none'")
    res = create_app("testing").test_client().get("/ping")
    assert res.headers["Content-Security-Policy"] == "default-src 'none'"
