"""
CatTrack Backend — Document Store Connection Management
========================================================

What:  Async MongoDB client, database accessor, index setup and shutdown.
How:   One `AsyncMongoClient` per process (it owns its own connection pool),
       created lazily on first use and closed in the app lifespan.
Who:   Used by the dependency providers in `cattrack.dependencies` and by the
       lifespan handler in `cattrack.main`.
When:  Client is created on first access; indexes are ensured at startup.

Collections:
    users  — unique index on `email`
    cats   — unique index on `filename`, 2dsphere index on `location`

The 2dsphere index is what makes `$geoWithin` queries over `location` cheap;
the unique indexes turn duplicate registrations into store errors, which the
services report as "User creation failed" / "Cat creation failed".
"""

import logging
from typing import Optional

from pymongo import ASCENDING, GEOSPHERE, AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from cattrack.config import settings

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
CATS_COLLECTION = "cats"

_client: Optional[AsyncMongoClient] = None


def get_client() -> AsyncMongoClient:
    """
    Return the process-wide Mongo client, creating it on first use.

    timeoutMS bounds every operation (server selection included), so a store
    that stops answering turns into a per-request failure instead of a hang.
    """
    global _client
    if _client is None:
        _client = AsyncMongoClient(
            settings.mongodb_url,
            timeoutMS=settings.mongodb_timeout_ms,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
            tz_aware=True,
        )
    return _client


def get_database() -> AsyncDatabase:
    return get_client()[settings.mongodb_database]


async def ensure_indexes(db: AsyncDatabase) -> None:
    """
    What:  Creates the indexes the services rely on.
    When:  Called once during application startup.
    How:   create_index is idempotent, so restarts are harmless.
    """
    await db[USERS_COLLECTION].create_index([("email", ASCENDING)], unique=True)
    await db[CATS_COLLECTION].create_index([("filename", ASCENDING)], unique=True)
    await db[CATS_COLLECTION].create_index([("location", GEOSPHERE)])
    logger.info("Indexes ensured on '%s' and '%s'", USERS_COLLECTION, CATS_COLLECTION)


async def close_client() -> None:
    """
    What:  Closes the client and every pooled connection.
    When:  Called during application shutdown (lifespan handler).
    """
    global _client
    if _client is not None:
        await _client.close()
        _client = None
