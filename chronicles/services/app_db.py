"""Database client helpers for application services."""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from chronicles.shared.storage.mongo import get_mongo_client

# MongoDB label for the site database (MONGO_URL_CHRONICLES_PRIMARY)
CHRONICLES_MONGO_LABEL = "chronicles_primary"
CHRONICLES_DEFAULT_DB = "chronicles"


def get_chronicles_mongo_client() -> AsyncIOMotorClient:
    """Get MongoDB client for the site database."""
    return get_mongo_client(CHRONICLES_MONGO_LABEL)


def get_chronicles_db() -> AsyncIOMotorDatabase:
    """Get the database named in the connection string of the site database.

    Falls back to `chronicles` when the URL carries no database path.
    """
    return get_chronicles_mongo_client().get_default_database(CHRONICLES_DEFAULT_DB)
