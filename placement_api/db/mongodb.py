"""
MongoDB Connection Utility

MongoDB stores every entity of the platform:
- User profiles (students, keyed by identity id)
- Institutions and their coordinators
- Job postings created by coordinators
- Applications linking a student to a job

The client is built once per application (see `create_app`) and handed to
services through FastAPI dependencies, never kept as a module global.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from placement_api.core.config import Settings
from placement_api.core.errors import ValidationError

logger = logging.getLogger(__name__)


# Collection name constants (avoid typos)
COLLECTIONS = {
    "profiles": "userprofiles",
    "institutions": "institutions",
    "jobs": "jobs",
    "applications": "applications",
}


def create_mongo_client(settings: Settings) -> MongoClient:
    """Build a client. Connection pooling is handled internally by pymongo."""
    return MongoClient(settings.mongodb_uri)


def get_database(client: MongoClient, settings: Settings) -> Database:
    return client[settings.mongodb_db]


def get_collection(db: Database, name: str) -> Collection:
    """Get a collection by its key in COLLECTIONS."""
    return db[COLLECTIONS[name]]


def test_mongo_connection(client: MongoClient) -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


def init_mongo_indexes(db: Database) -> None:
    """
    Create indexes. The unique ones carry the data invariants:
    one profile per identity id, one profile per roll number,
    one application per (student, job), one institution per (name, city).
    """
    profiles = get_collection(db, "profiles")
    profiles.create_index("clerkUserId", unique=True)
    profiles.create_index("rollNumber", unique=True)
    profiles.create_index("institutionId")

    get_collection(db, "institutions").create_index(
        [("name", ASCENDING), ("city", ASCENDING)], unique=True
    )

    jobs = get_collection(db, "jobs")
    jobs.create_index("postedBy")
    jobs.create_index([("isActive", ASCENDING), ("applicationDeadline", DESCENDING)])

    applications = get_collection(db, "applications")
    applications.create_index(
        [("studentId", ASCENDING), ("jobId", ASCENDING)], unique=True
    )
    applications.create_index("jobId")

    logger.info("MongoDB indexes created successfully")


# ============================================================
# HELPERS
# ============================================================

def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def parse_object_id(value: str, label: str = "id") -> ObjectId:
    """Parse a path id, rejecting malformed values with a 400."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {label}: {value}")


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """MongoDB hands back naive UTC datetimes; store them the same way."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
