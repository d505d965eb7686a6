"""Shared fixtures: settings, in-memory repository and a TestClient over create_app."""

import pytest
from fastapi.testclient import TestClient

from user_api.core.config import Settings
from user_api.main import create_app
from tests.fake_repository import InMemoryUserRepository


@pytest.fixture
def settings():
    return Settings(
        ENVIRONMENT="development",
        MONGODB_URI="mongodb://localhost:27017",
        MONGODB_DB_NAME="user_api_test",
        LOG_LEVEL="WARNING",
        _env_file=None,
    )


@pytest.fixture
def repository():
    return InMemoryUserRepository()


@pytest.fixture
def app(settings, repository):
    return create_app(settings, repository=repository)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def jane(client):
    """A stored user created through the API."""
    response = client.post(
        "/users",
        json={"name": "Jane Doe", "email": "JANE@Example.com", "age": 28, "phone": " 555-0100 "}
    )
    assert response.status_code == 201
    return response.json()["data"]
