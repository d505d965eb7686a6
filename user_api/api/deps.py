"""
user_api/api/deps.py

Purpose: Request dependencies

- Resolves the UserRepository attached to the running app
- Decodes and checks JSON write bodies
"""

import json
from typing import Any, Dict

from fastapi import Request

from user_api.core.exceptions import InvalidBodyError, StoreUnavailableError
from user_api.core.logging import get_logger
from user_api.services.user_service import UserRepository

logger = get_logger(__name__)


def get_user_repository(request: Request) -> UserRepository:
    """Returns the repository the app factory installed on app.state."""
    repository = getattr(request.app.state, "user_repository", None)
    if repository is None:
        logger.error("User repository is not configured")
        raise StoreUnavailableError(error="User repository is not configured")
    return repository


async def get_json_body(request: Request) -> Dict[str, Any]:
    """
    Reads a write request body as a JSON object.

    Raises:
        InvalidBodyError: On a non-JSON content type, malformed JSON,
            or a body that is not an object
    """
    content_type = request.headers.get("content-type", "")
    if content_type.split(";")[0].strip().lower() != "application/json":
        raise InvalidBodyError("Content-Type must be application/json")

    raw = await request.body()
    if not raw.strip():
        return {}

    try:
        payload = json.loads(raw)
    except RecursionError as e:
        raise InvalidBodyError("Malformed JSON: nesting too deep") from e
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidBodyError(f"Malformed JSON: {e}") from e

    if not isinstance(payload, dict):
        raise InvalidBodyError()

    return payload
