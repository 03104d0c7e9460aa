"""
MongoDB Connection Utility

MongoDB stores:
- Projects (student-authored collaboration listings)
- Internships (user-posted and synced from external aggregators)
- Applications (collaboration / internship requests)
- Profiles (keyed by the auth provider's user id)

WHY MongoDB for these?
- Schema-flexible: listings carry optional, kind-specific fields
- Document-oriented: skills are stored as an embedded ordered list
- Atomic upserts: find_one_and_update(upsert=True) gives dedup on sync
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from app.core.config import Settings, get_settings

logger = logging.getLogger("internhub.db")

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None


def get_mongo_client(settings: Settings = None) -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        settings = settings or get_settings()
        _client = MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms
        )
    return _client


def test_mongo_connection(client: MongoClient = None) -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = client or get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


def close_mongo_client() -> None:
    """Close the shared client (used on shutdown)."""
    global _client
    if _client is not None:
        _client.close()
    _client = None


# Collection name constants (avoid typos)
COLLECTIONS = {
    "projects": "projects",
    "internships": "internships",
    "applications": "applications",
    "profiles": "profiles"
}


def init_mongo_indexes(db: Database):
    """
    Create indexes for better query performance.
    Called once when the Mongo store starts.
    """
    for name in (COLLECTIONS["projects"], COLLECTIONS["internships"]):
        # Default listing order is newest first
        db[name].create_index([("created_at", DESCENDING)])
        # Natural key for synced records; manual records carry neither field
        db[name].create_index(
            [("source", ASCENDING), ("source_id", ASCENDING)],
            unique=True,
            sparse=True
        )

    db[COLLECTIONS["applications"]].create_index("target_id")
    db[COLLECTIONS["profiles"]].create_index("id", unique=True)

    logger.info("MongoDB indexes created successfully")
