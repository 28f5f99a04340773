"""Tests for application wiring: health, metrics, errors, static client."""
from fastapi.testclient import TestClient
from mangum import Mangum

from companion_chat.config import Settings
from companion_chat.main import create_app
from companion_chat.storage import MemoryStorage
from tests.helpers import FakeCompanionAI, register


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["companion_ai"] is True


def test_root_without_frontend(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["health"] == "/health"


def test_metrics_count_requests_and_registrations(client):
    before = client.get("/metrics").json()["counters"]

    register(client, "metrics-user")
    client.post("/api/login", json={"username": "metrics-user", "password": "wrong"})

    after = client.get("/metrics").json()["counters"]
    assert after["registrations_total"] == before["registrations_total"] + 1
    assert after["logins_failed_total"] == before["logins_failed_total"] + 1
    assert after["requests_total"] > before["requests_total"]


def test_validation_errors_use_400_with_details(client):
    response = client.post("/api/register", json={"username": "x" * 51, "password": "pw"})

    assert response.status_code == 400
    body = response.json()
    assert body["detail"].startswith("username")
    assert body["errors"][0]["loc"] == ["body", "username"]


def test_unhandled_errors_return_generic_500(settings):
    app = create_app(settings=settings, storage=MemoryStorage(), companion_ai=FakeCompanionAI())

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database on fire")

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal Server Error"}


def test_static_frontend_is_served(tmp_path):
    (tmp_path / "index.html").write_text("<html><body>companion</body></html>")
    settings = Settings(storage_backend="memory", session_secret="s", frontend_dir=str(tmp_path))
    app = create_app(settings=settings, storage=MemoryStorage(), companion_ai=FakeCompanionAI())

    with TestClient(app) as client:
        page = client.get("/")
        assert page.status_code == 200
        assert "companion" in page.text
        # API routes still win over the static mount
        assert client.get("/api/user").status_code == 401


def test_cors_allows_configured_frontend(client):
    response = client.options(
        "/api/user",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )

    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert response.headers["access-control-allow-credentials"] == "true"


def test_serverless_handler():
    from companion_chat import wsgi

    assert isinstance(wsgi.handler, Mangum)
