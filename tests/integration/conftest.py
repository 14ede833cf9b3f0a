import importlib
import uuid

import pytest

pytest.importorskip("httpx")
from fastapi.testclient import TestClient

from ZonePark.middleware.performance_tracer import get_performance_logger


@pytest.fixture()
def app_module(tmp_path, monkeypatch):
    monkeypatch.setenv("ZONEPARK_DB_DIR", str(tmp_path))
    monkeypatch.setenv("ZONEPARK_LOG_DIR", str(tmp_path / "logs"))

    from ZonePark.api import app as app_module

    importlib.reload(app_module)
    yield app_module

    app_module.logger.close()
    app_module.connection.close_connection()

    perf_logger = get_performance_logger(tmp_path / "logs")
    for handler in list(perf_logger.handlers):
        handler.close()
        perf_logger.removeHandler(handler)

    from ZonePark.api import session_manager
    session_manager._SESSIONS.clear()


@pytest.fixture()
def client(app_module):
    with TestClient(app_module.app) as c:
        yield c


@pytest.fixture()
def register(client):
    def _register(password: str = "StrongPassw0rd!") -> tuple[str, dict]:
        email = f"it_{uuid.uuid4().hex[:8]}@example.com"
        r = client.post(
            "/api/v1/auth/register",
            json={
                "name": "Integration User",
                "email": email,
                "password": password,
                "password_confirmation": password,
            },
        )
        assert r.status_code == 201, r.text
        token = r.json().get("access_token")
        assert token
        return email, {"Authorization": f"Bearer {token}"}

    return _register


@pytest.fixture()
def create_vehicle(client):
    def _create(headers: dict, plate: str = None) -> dict:
        plate = plate or f"IT-{uuid.uuid4().hex[:6].upper()}"
        r = client.post("/api/v1/vehicles", json={"plate_number": plate}, headers=headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _create
