import os
import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from inventario import create_app
from inventario.services.equipment_store import get_store


SCENARIO_ROW = {
    "id": 1,
    "type": "laptop",
    "model": "X1",
    "serial_number": "SN1",
    "status": "available",
    "imagenes": [],
    "created_at": "2024-03-01T10:00:00+00:00",
    "updated_at": "2024-03-01T10:00:00+00:00",
}


@pytest.fixture()
def app():
    os.environ.setdefault("APP_ENV", "testing")
    os.environ.setdefault("SECRET_KEY", "test")

    flask_app = create_app("testing")
    flask_app.config.update(TESTING=True, WTF_CSRF_ENABLED=False)

    with flask_app.app_context():
        yield flask_app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


@pytest.fixture()
def store(app):
    """Backend en memoria de la app de pruebas."""

    return get_store(app)


@pytest.fixture()
def seeded(store):
    """Inventario con un único portátil disponible (id=1)."""

    store.create(
        {
            "type": SCENARIO_ROW["type"],
            "model": SCENARIO_ROW["model"],
            "serial_number": SCENARIO_ROW["serial_number"],
            "status": SCENARIO_ROW["status"],
            "images": [],
        }
    )
    return store
