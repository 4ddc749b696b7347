"""
Process-wide MongoDB and Redis clients.

Clients are created lazily on first use and shared until
`close_connections()` runs at shutdown.
"""
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from redis.asyncio import Redis

from lifeline.config import get_settings

logger = logging.getLogger(__name__)

_mongo_client: Optional[AsyncIOMotorClient] = None
_redis_client: Optional[Redis] = None


async def get_mongo_client() -> AsyncIOMotorClient:
    """Shared Motor client; server selection gives up after the configured timeout."""
    global _mongo_client
    if _mongo_client is None:
        settings = get_settings()
        _mongo_client = AsyncIOMotorClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
        )
    return _mongo_client


async def get_redis_client() -> Redis:
    """Shared Redis client (string responses)."""
    global _redis_client
    if _redis_client is None:
        settings = get_settings()
        _redis_client = Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            decode_responses=True,
        )
    return _redis_client


async def get_database(db_name: Optional[str] = None) -> AsyncIOMotorDatabase:
    """Database handle, the application database unless `db_name` is given."""
    client = await get_mongo_client()
    return client[db_name or get_settings().mongo_db_name]


async def ping_database(db: AsyncIOMotorDatabase) -> bool:
    """True when the server behind `db` answers a ping."""
    try:
        await db.command("ping")
    except PyMongoError as e:
        logger.error("MongoDB unreachable: %s", e)
        return False
    return True


async def close_connections():
    """Close the shared clients, if they were ever opened."""
    global _mongo_client, _redis_client

    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
