"""Shared fixtures for the Companion Chat test suite."""
import os

# Configure the environment before the application module is imported
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["ENVIRONMENT"] = "development"
os.environ.pop("FRONTEND_DIR", None)

import pytest
from fastapi.testclient import TestClient

from companion_chat.config import Settings
from companion_chat.main import create_app
from companion_chat.storage import DatabaseStorage, MemoryStorage
from tests.helpers import COMPANION_SETTINGS, FakeCompanionAI, register


@pytest.fixture(params=["memory", "database"])
def storage(request, tmp_path):
    if request.param == "memory":
        yield MemoryStorage()
    else:
        db_storage = DatabaseStorage.from_url(f"sqlite:///{tmp_path / 'test.db'}")
        yield db_storage
        db_storage.close()


@pytest.fixture
def settings():
    return Settings(storage_backend="memory", session_secret="test-session-secret", frontend_dir=None)


@pytest.fixture
def fake_ai():
    return FakeCompanionAI()


@pytest.fixture
def app(settings, storage, fake_ai):
    return create_app(settings=settings, storage=storage, companion_ai=fake_ai)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_client(app):
    """Factory for extra clients with their own cookie jars."""
    clients = []

    def _make():
        test_client = TestClient(app)
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        test_client.close()


@pytest.fixture
def logged_in(client):
    response = register(client)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def configured(client, logged_in):
    response = client.post("/api/preferences", json=COMPANION_SETTINGS)
    assert response.status_code == 200
    return response.json()
