"""
user_api/db/indexes.py

Purpose: Database index management

- Unique index on users.email (uniqueness is enforced by the store)
- Index on createdAt for insertion-ordered listing
"""

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING

from user_api.core.logging import get_logger

logger = get_logger(__name__)

EMAIL_INDEX_NAME = "email_unique"


async def create_indexes(users: AsyncIOMotorCollection):
    """
    Creates the indexes the users collection relies on.
    This function is idempotent - safe to run multiple times.
    """
    try:
        logger.info("Creating database indexes...")

        await users.create_index(
            [("email", ASCENDING)],
            unique=True,
            name=EMAIL_INDEX_NAME
        )
        logger.debug("Created unique index on users.email")

        await users.create_index(
            [("createdAt", ASCENDING)],
            name="created_at_idx"
        )
        logger.debug("Created index on users.createdAt")

        indexes = await users.index_information()
        logger.info(f"✅ Database indexes ready: {sorted(indexes.keys())}")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


async def drop_user_indexes(users: AsyncIOMotorCollection):
    """
    Drops all custom indexes (keeps _id index).
    Use with caution! Only for maintenance/migration.
    """
    try:
        logger.warning("Dropping users indexes...")
        await users.drop_indexes()
        logger.info("✅ All indexes dropped successfully")

    except Exception as e:
        logger.error(f"Failed to drop indexes: {str(e)}", exc_info=True)
        raise
