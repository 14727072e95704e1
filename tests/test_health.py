# tests/test_health.py
from fastapi.testclient import TestClient

from app.config import get_settings
from app.main import app

client = TestClient(app)


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] in ("ok", "degraded")
    assert data["app"] == get_settings().APP_NAME
    assert data["env"]
    assert data["database"] in ("ok", "error")


def test_unknown_route_is_404():
    assert client.get("/nope").status_code == 404
