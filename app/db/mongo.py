"""
app/db/mongo.py

Purpose: Motor client lifecycle for the accounts database

- connect_to_mongo / close_mongo_connection run from the app lifespan
- get_users_collection is the only collection accessor
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from typing import Optional
import asyncio
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

USERS_COLLECTION = "users"

CONNECT_ATTEMPTS = 3
FIRST_RETRY_DELAY = 2  # seconds, doubled after each failure

_client: Optional[AsyncIOMotorClient] = None
_database: Optional[AsyncIOMotorDatabase] = None


def _new_client() -> AsyncIOMotorClient:
    return AsyncIOMotorClient(
        settings.MONGODB_URL,
        tz_aware=True,
        maxPoolSize=50,
        minPoolSize=5,
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=10000,
        retryWrites=True,
        retryReads=True,
    )


async def connect_to_mongo():
    """
    Opens the shared client, pinging the server before accepting it.
    
    Raises:
        ConnectionError: When every attempt fails
    """
    global _client, _database
    
    if _client is not None:
        logger.warning("connect_to_mongo called twice; keeping the existing client")
        return
    
    delay = FIRST_RETRY_DELAY
    for attempt in range(1, CONNECT_ATTEMPTS + 1):
        client = _new_client()
        try:
            await client.admin.command("ping")
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            client.close()
            logger.error(f"MongoDB ping failed ({attempt}/{CONNECT_ATTEMPTS}): {e}")
            if attempt == CONNECT_ATTEMPTS:
                raise ConnectionError("Could not establish MongoDB connection") from e
            await asyncio.sleep(delay)
            delay *= 2
            continue
        
        _client = client
        _database = client[settings.MONGODB_DB_NAME]
        logger.info(f"Connected to MongoDB database '{settings.MONGODB_DB_NAME}'")
        return


async def close_mongo_connection():
    global _client, _database
    
    if _client:
        _client.close()
        _client = None
        _database = None
        logger.info("MongoDB connection closed")


async def check_database_health() -> bool:
    """
    Pings the server; False when not connected or the ping fails.
    """
    if _client is None:
        return False
    try:
        await _client.admin.command("ping")
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
    return True


def get_database() -> AsyncIOMotorDatabase:
    if _database is None:
        raise RuntimeError("Database not initialized. Call connect_to_mongo() during startup.")
    return _database


def get_users_collection():
    """
    Users collection. Documents hold name, email (unique, lower-cased),
    phone (unique), password and salt (never returned), email_verified,
    phone_verified, avatar, created_at and updated_at.
    """
    return get_database()[USERS_COLLECTION]
