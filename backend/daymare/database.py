"""
Daymare Backend: MongoDB Connection Management
================================================

What:  Builds the single Motor client used by the whole process and resolves
       the article collection from it.
How:   ``connect_mongo`` creates the client and pings the server. The
       application lifespan owns the client: connect, wire, serve, close.
Who:   Called by ``daymare.main.lifespan``.

Connection model:
    One ``AsyncIOMotorClient`` per process, shared by every request task.
    The driver pools connections internally and is safe for concurrent use;
    the application adds no pooling, retry or backpressure of its own.
    Timestamps come back timezone-aware (``tz_aware=True``) so ``ctime``
    round-trips as UTC.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from daymare.config import Settings
from daymare.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


def create_mongo_client(config: Settings) -> AsyncIOMotorClient:
    """Create (but do not contact) the Motor client for ``config.mongo_url``."""
    return AsyncIOMotorClient(
        config.mongo_url,
        tz_aware=True,
        serverSelectionTimeoutMS=config.mongo_server_selection_timeout_ms,
    )


async def connect_mongo(config: Settings) -> AsyncIOMotorClient:
    """
    Create the client and verify the server answers.

    Motor connects lazily, so a ping is the first real round-trip. A failure
    here is fatal: the caller lets it escape the lifespan and the process
    exits without serving a request.

    Raises:
        StoreUnavailableError: The server could not be reached.
    """
    client = create_mongo_client(config)
    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        logger.error("Cannot reach MongoDB at startup: %s", e)
        raise StoreUnavailableError(
            message=f"Cannot connect to MongoDB: {e}",
            context={"database": config.mongo_database},
        ) from e

    logger.info(
        "Connected to MongoDB (database=%s, collection=%s)",
        config.mongo_database,
        config.mongo_collection,
    )
    return client


def get_article_collection(client: AsyncIOMotorClient, config: Settings) -> AsyncIOMotorCollection:
    """Resolve the configured database and collection on ``client``."""
    return client[config.mongo_database][config.mongo_collection]


def close_mongo(client: AsyncIOMotorClient) -> None:
    """Release the client's pooled connections on shutdown."""
    client.close()
    logger.info("MongoDB client closed")
