"""
Database module - MongoDB connection.
"""
from app.db.mongodb import close_mongo_client, get_mongo_client, test_mongo_connection

__all__ = [
    "close_mongo_client",
    "get_mongo_client",
    "test_mongo_connection"
]
