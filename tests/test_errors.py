import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from user_api.core.config import Settings
from user_api.core.exceptions import ResourceNotFoundError, StoreUnavailableError
from user_api.main import create_app
from user_api.services.user_service import MongoUserRepository
from tests.fake_repository import InMemoryUserRepository


class BrokenRepository(InMemoryUserRepository):
    """Fails every read the way a lost MongoDB connection does."""

    async def list_all(self):
        raise StoreUnavailableError("Error fetching users", error="connection refused")

    async def get_by_id(self, user_id):
        raise RuntimeError("boom")


def make_client(environment="development", repository=None):
    settings = Settings(ENVIRONMENT=environment, LOG_LEVEL="WARNING", _env_file=None)
    app = create_app(settings, repository=repository or BrokenRepository())
    return app, TestClient(app, raise_server_exceptions=False)


def test_404_not_found():
    _, client = make_client()
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Route not found"
    assert data["code"] == "ROUTE_NOT_FOUND"
    assert "error" in data


def test_store_error_is_500_with_message():
    _, client = make_client()
    response = client.get("/users")
    assert response.status_code == 500
    data = response.json()
    assert data == {
        "success": False,
        "message": "Error fetching users",
        "error": "connection refused",
        "code": "STORE_UNAVAILABLE",
    }


def test_unclassified_error_is_500():
    _, client = make_client()
    response = client.get("/users/65a1f0c2e4b0a1b2c3d4e5f6")
    assert response.status_code == 500
    data = response.json()
    assert data["message"] == "Internal server error"
    assert data["error"] == "boom"
    assert data["code"] == "INTERNAL_ERROR"


def test_unclassified_error_hides_detail_in_production():
    _, client = make_client(environment="production")
    response = client.get("/users/65a1f0c2e4b0a1b2c3d4e5f6")
    assert response.status_code == 500
    assert response.json()["error"] == "An internal error occurred. Please try again later."


def test_custom_exception():
    app, client = make_client(repository=InMemoryUserRepository())

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise ResourceNotFoundError(error="Item not found")

    response = client.get("/test-custom-error")
    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "NOT_FOUND"
    assert data["message"] == "User not found"
    assert data["error"] == "Item not found"


def test_request_validation_error_structure():
    app, client = make_client(repository=InMemoryUserRepository())

    @app.get("/test-validation/{count}")
    def typed_route(count: int):
        return {"count": count}

    response = client.get("/test-validation/abc")
    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert len(data["details"]) > 0


@pytest.fixture
def offline_store_client():
    """App over a Mongo repository whose reads time out; built before log capture starts."""
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
    collection = MagicMock()
    collection.find.return_value = cursor
    _, client = make_client(repository=MongoUserRepository(collection))
    return client


def test_store_failure_is_logged_once(offline_store_client, caplog):
    response = offline_store_client.get("/users")
    assert response.status_code == 500

    errors = [record for record in caplog.records if record.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert errors[0].exc_info is not None


@pytest.fixture
def unconfigured_client():
    app, client = make_client(repository=InMemoryUserRepository())
    app.state.user_repository = None
    return client


def test_missing_repository_is_logged_once(unconfigured_client, caplog):
    response = unconfigured_client.get("/users")
    assert response.status_code == 500
    assert response.json()["error"] == "User repository is not configured"

    errors = [record.getMessage() for record in caplog.records if record.levelno >= logging.ERROR]
    assert errors == ["User repository is not configured"]
