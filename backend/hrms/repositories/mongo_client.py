"""MongoDB Client - Shared connection, collections and index setup"""
from typing import Any, Dict, List, Optional, Tuple
from pymongo import ASCENDING, DESCENDING, IndexModel, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError

from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

# One client per process
_client: Optional[MongoClient] = None


# collection -> indexes; repositories own the documents, this owns the indexes
INDEXES: List[Tuple[str, List[IndexModel]]] = [
    ("employees", [
        IndexModel("employee_id", unique=True),
        IndexModel("department_code"),
    ]),
    ("roles", [
        IndexModel("role_id", unique=True),
        IndexModel("name", unique=True),
    ]),
    ("role_assignments", [
        IndexModel("assignment_id", unique=True),
        IndexModel("employee_id"),
        IndexModel("role_id"),
        IndexModel("org_unit_id"),
        IndexModel([("department_code", ASCENDING), ("status", ASCENDING)]),
        # At most one active assignment per employee
        IndexModel(
            [("employee_id", ASCENDING), ("is_active", ASCENDING)],
            unique=True,
            partialFilterExpression={"is_active": True}
        ),
    ]),
    ("notification_rules", [
        IndexModel("rule_id", unique=True),
        IndexModel([("event_type", ASCENDING), ("enabled", ASCENDING)]),
    ]),
    ("notifications", [
        IndexModel("notification_id", unique=True),
        IndexModel([("recipients.employee_id", ASCENDING), ("created_at", DESCENDING)]),
        IndexModel("event_type"),
    ]),
    ("salary_breakups", [
        IndexModel("breakup_id", unique=True),
        IndexModel(
            [("employee_id", ASCENDING), ("month", ASCENDING), ("year", ASCENDING)],
            unique=True
        ),
        IndexModel([("employee_id", ASCENDING), ("created_at", DESCENDING)]),
    ]),
    ("org_units", [
        IndexModel("org_unit_id", unique=True),
        IndexModel([("parent_id", ASCENDING), ("level", ASCENDING)]),
        IndexModel("path"),
    ]),
    ("sellers", [
        IndexModel("seller_id", unique=True),
        IndexModel("business_seller_id", unique=True),
    ]),
    ("breakup_rules", [
        IndexModel("rule_id", unique=True),
        IndexModel("transaction_type"),
    ]),
]


def get_client() -> MongoClient:
    """
    Shared client, created and pinged on first use

    Raises:
        ConnectionFailure: when the server cannot be reached
    """
    global _client
    if _client is not None:
        return _client

    logger.info(f"Connecting to MongoDB at {settings.mongo_uri} (db={settings.mongo_db})")
    client = MongoClient(
        settings.mongo_uri,
        tz_aware=True,
        serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        connectTimeoutMS=settings.mongo_timeout_ms,
    )
    try:
        client.admin.command("ping")
    except ConnectionFailure as e:
        client.close()
        logger.error(f"MongoDB unreachable: {e}")
        raise
    _client = client
    return _client


def get_database() -> Database:
    return get_client()[settings.mongo_db]


def get_collection(name: str) -> Collection:
    return get_database()[name]


def close_connection() -> None:
    """Close the shared client if one was opened"""
    global _client
    if _client is None:
        return
    _client.close()
    _client = None
    logger.info("MongoDB connection closed")


def create_indexes() -> None:
    """Ensure every index in INDEXES exists; safe to run on each startup"""
    db = get_database()
    for collection, indexes in INDEXES:
        db[collection].create_indexes(indexes)
    logger.info(f"Ensured indexes on {len(INDEXES)} collections")


def health_check() -> Dict[str, Any]:
    """Ping the server; never raises"""
    try:
        get_client().admin.command("ping")
    except PyMongoError as e:
        logger.error(f"MongoDB health check failed: {e}")
        return {"status": "unhealthy", "database": settings.mongo_db, "error": str(e)}
    return {"status": "healthy", "database": settings.mongo_db}
