import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .config import Settings
from .core import StoreError

# This file holds the single process-wide store connection.

logger = logging.getLogger(__name__)

_CLIENT: Optional[MongoClient] = None
_COLLECTION: Optional[Collection] = None


def connect(settings: Settings) -> Collection:
    """
    Open the MongoDB connection once and verify it with a ping.
    Raises StoreError when the server cannot be reached.
    """
    global _CLIENT, _COLLECTION
    if _COLLECTION is not None:
        return _COLLECTION

    client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=settings.mongodb_timeout_ms)
    try:
        client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        raise StoreError(f"MongoDB connection error: {e}") from e

    db = client.get_default_database(default=settings.mongodb_db)
    _CLIENT = client
    _COLLECTION = db[settings.mongodb_collection]
    logger.info(f"MongoDB connected successfully ({db.name}.{settings.mongodb_collection})")
    return _COLLECTION


def get_collection() -> Collection:
    """FastAPI dependency: the shared products collection."""
    if _COLLECTION is None:
        raise StoreError("MongoDB is not connected")
    return _COLLECTION
