"""
user_api/services/user_service.py

Purpose: User data management

- UserRepository contract (list, get, create, update, delete)
- MongoDB implementation on a Motor collection
- Runs field validation before every write
- Maps driver errors to the API error taxonomy
"""

from typing import Any, Callable, Dict, List, Protocol
from datetime import datetime

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from user_api.core.exceptions import (
    DuplicateKeyError as DuplicateEmailError,
    InvalidIdError,
    ResourceNotFoundError,
    StoreUnavailableError,
)
from user_api.core.logging import get_logger, LogContext
from user_api.db.indexes import create_indexes
from user_api.models.user import User
from user_api.utils.time_utils import utc_now
from user_api.utils.validation_utils import validate_user_payload

logger = get_logger(__name__)

Clock = Callable[[], datetime]


class UserRepository(Protocol):
    """Contract for user persistence; any store (or an in-memory fake) can implement it."""
    async def list_all(self) -> List[User]: ...
    async def get_by_id(self, user_id: str) -> User: ...
    async def create(self, payload: Dict[str, Any]) -> User: ...
    async def update_by_id(self, user_id: str, payload: Dict[str, Any]) -> User: ...
    async def delete_by_id(self, user_id: str) -> User: ...


def to_object_id(user_id: str) -> ObjectId:
    """
    Converts a path identifier into an ObjectId.

    Raises:
        InvalidIdError: If the value is not 24 hex characters
    """
    if not isinstance(user_id, str) or not ObjectId.is_valid(user_id):
        raise InvalidIdError(str(user_id))
    return ObjectId(user_id)


def not_found(user_id: str) -> ResourceNotFoundError:
    return ResourceNotFoundError(error=f"No user with id '{user_id}'")


def split_changes(changes: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """
    Builds a MongoDB update document from validated partial fields.

    None values clear optional fields ($unset); updatedAt is always refreshed.
    """
    to_set = {field: value for field, value in changes.items() if value is not None}
    to_set["updatedAt"] = now
    update: Dict[str, Any] = {"$set": to_set}

    to_unset = {field: "" for field, value in changes.items() if value is None}
    if to_unset:
        update["$unset"] = to_unset

    return update


class MongoUserRepository:
    """UserRepository backed by a Motor collection with a unique email index."""

    def __init__(self, collection: AsyncIOMotorCollection, clock: Clock = utc_now):
        self.collection = collection
        self.clock = clock
        self._indexes_ready = False

    async def ensure_indexes(self, action: str = "Error preparing users collection"):
        """
        Creates the collection indexes once, before the first write.

        A failed attempt leaves the flag unset, so the next write retries.
        Writes never run without the unique email index.

        Raises:
            StoreUnavailableError: If the indexes could not be created
        """
        if self._indexes_ready:
            return

        try:
            await create_indexes(self.collection)
        except PyMongoError as e:
            raise StoreUnavailableError(action, error=str(e)) from e

        self._indexes_ready = True

    async def list_all(self) -> List[User]:
        """
        Returns every stored user in insertion order.

        Returns:
            List of users (empty if none exist)
        """
        try:
            cursor = self.collection.find({}).sort([("createdAt", ASCENDING), ("_id", ASCENDING)])
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Error fetching users: {e}", exc_info=True)
            raise StoreUnavailableError("Error fetching users", error=str(e)) from e

        return [User.from_document(doc) for doc in documents]

    async def get_by_id(self, user_id: str) -> User:
        object_id = to_object_id(user_id)

        try:
            document = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Error fetching user {user_id}: {e}", exc_info=True)
            raise StoreUnavailableError("Error fetching user", error=str(e)) from e

        if document is None:
            raise not_found(user_id)
        return User.from_document(document)

    async def create(self, payload: Dict[str, Any]) -> User:
        """
        Validates and inserts a new user.

        Args:
            payload: Decoded request body

        Returns:
            The stored user with its new id and timestamps

        Raises:
            ValidationError: If any field rule fails
            DuplicateKeyError: If the email is already registered
            StoreUnavailableError: On any other driver failure
        """
        fields = validate_user_payload(payload)
        await self.ensure_indexes("Error creating user")
        now = self.clock()
        document = {**fields, "createdAt": now, "updatedAt": now}

        with LogContext(email=fields["email"]):
            try:
                result = await self.collection.insert_one(document)
            except DuplicateKeyError as e:
                logger.warning("Duplicate email on create")
                raise DuplicateEmailError() from e
            except PyMongoError as e:
                logger.error(f"Error creating user: {e}", exc_info=True)
                raise StoreUnavailableError("Error creating user", error=str(e)) from e

            document["_id"] = result.inserted_id
            logger.info(f"User created: {result.inserted_id}")

        return User.from_document(document)

    async def update_by_id(self, user_id: str, payload: Dict[str, Any]) -> User:
        """
        Applies the supplied fields to an existing user.

        Only fields present in the payload change. The write is a single
        find_one_and_update, so it is atomic per document.

        Timestamps are truncated to milliseconds, so an update landing in the
        same millisecond as the insert leaves updatedAt equal to createdAt.
        updatedAt is never earlier than createdAt.

        Raises:
            InvalidIdError: If user_id is malformed
            ValidationError: If a supplied field fails its rule
            ResourceNotFoundError: If no user has that id
            DuplicateKeyError: If the new email belongs to another user
        """
        object_id = to_object_id(user_id)
        changes = validate_user_payload(payload, partial=True)
        await self.ensure_indexes("Error updating user")
        update = split_changes(changes, self.clock())

        with LogContext(user_id=user_id):
            try:
                document = await self.collection.find_one_and_update(
                    {"_id": object_id},
                    update,
                    return_document=ReturnDocument.AFTER
                )
            except DuplicateKeyError as e:
                logger.warning("Duplicate email on update")
                raise DuplicateEmailError() from e
            except PyMongoError as e:
                logger.error(f"Error updating user: {e}", exc_info=True)
                raise StoreUnavailableError("Error updating user", error=str(e)) from e

            if document is None:
                logger.info("Update target not found")
                raise not_found(user_id)

            logger.info(f"User updated: {sorted(changes)}")

        return User.from_document(document)

    async def delete_by_id(self, user_id: str) -> User:
        """
        Removes a user and returns the removed record.

        Raises:
            InvalidIdError: If user_id is malformed
            ResourceNotFoundError: If no user has that id
        """
        object_id = to_object_id(user_id)

        with LogContext(user_id=user_id):
            try:
                document = await self.collection.find_one_and_delete({"_id": object_id})
            except PyMongoError as e:
                logger.error(f"Error deleting user: {e}", exc_info=True)
                raise StoreUnavailableError("Error deleting user", error=str(e)) from e

            if document is None:
                raise not_found(user_id)

            logger.info("User deleted")

        return User.from_document(document)
