"""
Database initialization script - users collection

Run once to create the collection indexes:
    python scripts/init_db.py
    python scripts/init_db.py --reset   # drop custom indexes first
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from user_api.core.config import load_settings, validate_settings
from user_api.core.logging import setup_logging, get_logger
from user_api.db.indexes import create_indexes, drop_user_indexes
from user_api.db.mongo import MongoConnection

logger = get_logger("scripts.init_db")


async def init_db(reset: bool = False):
    """Create the users indexes and print collection stats"""
    settings = load_settings()
    validate_settings(settings)
    setup_logging(settings)

    logger.info("=" * 60)
    logger.info("  User API Database Setup")
    logger.info("=" * 60)

    # Setup must not run against an unreachable server
    mongo = MongoConnection(settings.model_copy(update={"STRICT_STARTUP": True}))

    try:
        await mongo.connect()
        users = mongo.get_users_collection()

        if reset:
            await drop_user_indexes(users)

        await create_indexes(users)

        indexes = await users.index_information()
        for idx_name in indexes.keys():
            if idx_name != "_id_":
                logger.info(f"  ✅ {idx_name}")

        user_count = await users.count_documents({})
        logger.info(f"📊 Users: {user_count}")
        logger.info("✅ Database initialization complete!")

    except Exception as e:
        logger.error(f"❌ Error: {e}")
        raise

    finally:
        await mongo.close()


def main():
    parser = argparse.ArgumentParser(description="Create MongoDB indexes for the User API")
    parser.add_argument("--reset", action="store_true", help="drop custom indexes before creating them")
    args = parser.parse_args()
    asyncio.run(init_db(reset=args.reset))


if __name__ == "__main__":
    main()
