"""
Database module - MongoDB connection and helpers.
"""
from placement_api.db.mongodb import (
    COLLECTIONS,
    create_mongo_client,
    get_collection,
    get_database,
    init_mongo_indexes,
    test_mongo_connection,
)

__all__ = [
    "COLLECTIONS",
    "create_mongo_client",
    "get_collection",
    "get_database",
    "init_mongo_indexes",
    "test_mongo_connection",
]
