"""
user_api/db/mongo.py

Purpose: MongoDB connection setup

- Owns the Motor client and database handles
- Startup ping with retry and exponential backoff
- Lenient startup: an unreachable store is logged, not fatal (unless strict)
- Health checks and connection lifecycle management
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from typing import Optional
import asyncio

from user_api.core.config import Settings
from user_api.core.logging import get_logger

logger = get_logger(__name__)


class MongoConnection:
    """
    Holds the MongoDB client for one application instance.

    Created by the app factory and closed on shutdown; nothing else
    keeps a module-level client.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self.connected = False

    async def connect(self, retry_delay: float = 2) -> bool:
        """
        Creates the client and verifies the server with a ping.

        The client is kept even when every ping fails, so later
        operations fail individually instead of the whole process.

        Args:
            retry_delay: Seconds before the first retry (doubles each time)

        Returns:
            True if the server answered a ping

        Raises:
            ConnectionError: If the store is unreachable and STRICT_STARTUP is set
        """
        if self.client is not None:
            logger.warning("MongoDB client already initialized")
            return self.connected

        self.client = AsyncIOMotorClient(
            self.settings.MONGODB_URI,
            serverSelectionTimeoutMS=self.settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
            tz_aware=True,
            retryWrites=True,
            retryReads=True,
        )
        self.database = self.client[self.settings.MONGODB_DB_NAME]

        max_retries = self.settings.MONGODB_CONNECT_RETRIES

        for attempt in range(1, max_retries + 1):
            try:
                logger.info(
                    f"Attempting to connect to MongoDB (attempt {attempt}/{max_retries})"
                )
                await self.client.admin.command("ping")
                self.connected = True
                logger.info(
                    f"✅ Successfully connected to MongoDB: {self.settings.MONGODB_DB_NAME}"
                )
                return True

            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                logger.error(
                    f"Failed to connect to MongoDB (attempt {attempt}/{max_retries}): {e}"
                )

                if attempt < max_retries:
                    logger.info(f"Retrying in {retry_delay} seconds...")
                    await asyncio.sleep(retry_delay)
                    retry_delay *= 2
                elif self.settings.STRICT_STARTUP:
                    logger.critical("Failed to connect to MongoDB after all retries")
                    raise ConnectionError("Could not establish MongoDB connection") from e
                else:
                    logger.warning(
                        "MongoDB unreachable after all retries; continuing without a "
                        "verified connection. Requests will fail until it recovers."
                    )

        return False

    async def close(self):
        """
        Closes the MongoDB connection.
        Called during application shutdown.
        """
        if self.client:
            logger.info("Closing MongoDB connection")
            self.client.close()
            self.client = None
            self.database = None
            self.connected = False
            logger.info("MongoDB connection closed")

    async def check_health(self) -> bool:
        """
        Checks if the database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            if self.client is None:
                logger.error("MongoDB client not initialized")
                return False

            await self.client.admin.command("ping")
            return True

        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}")
            return False

    def get_users_collection(self) -> AsyncIOMotorCollection:
        """
        Returns the users collection.

        Document fields:
        - _id: ObjectId
        - name: str
        - email: str (unique, lower-case)
        - age: int (optional)
        - phone: str (optional)
        - createdAt: datetime
        - updatedAt: datetime
        """
        if self.database is None:
            raise RuntimeError(
                "Database not initialized. Call connect() during startup."
            )
        return self.database[self.settings.MONGODB_USERS_COLLECTION]
