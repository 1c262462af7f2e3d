"""MongoDB database configuration and connection management."""

from __future__ import annotations

from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from auth_api import config


# Global MongoDB client instance
_client: Optional[MongoClient] = None
_database: Optional[Database] = None

VERIFICATIONS_COLLECTION = "verifications"
ATTEMPTS_COLLECTION = "verification_attempts"


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client instance."""
    global _client
    if _client is None:
        _client = MongoClient(
            config.MONGODB_URI,
            serverSelectionTimeoutMS=int(config.REQUEST_TIMEOUT_SECONDS * 1000),
        )
    return _client


def get_database() -> Database:
    """Get the MongoDB database instance."""
    global _database
    if _database is None:
        client = get_mongo_client()
        _database = client[config.MONGODB_DATABASE]
    return _database


def create_indexes() -> None:
    """Create the indexes the verification collections rely on."""
    db = get_database()
    db[VERIFICATIONS_COLLECTION].create_index([("user_id", ASCENDING)])
    db[ATTEMPTS_COLLECTION].create_index([("verification_id", ASCENDING)], unique=True)
