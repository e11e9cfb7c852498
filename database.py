"""
Database access for YouPower

A single pymongo database handle configured from DATABASE_URL and
DATABASE_NAME, plus the small helpers the models share.
"""
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient

load_dotenv()

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")

db = None

if DATABASE_URL and DATABASE_NAME:
    client = MongoClient(DATABASE_URL)
    db = client[DATABASE_NAME]

UNIQUE_INDEXES = {
    "action": "name",
    "community": "name",
    "cooperative": "name",
    "user": "email",
}


class DatabaseUnavailable(RuntimeError):
    pass


def collection(name: str):
    if db is None:
        raise DatabaseUnavailable("Database not available")
    return db[name]


def create_document(collection_name: str, data: Union[BaseModel, dict]) -> str:
    """Insert a document, stamping created_at/updated_at, and return its id."""
    if isinstance(data, BaseModel):
        data_dict = data.model_dump()
    else:
        data_dict = dict(data)

    now = datetime.now(timezone.utc)
    data_dict["created_at"] = now
    data_dict["updated_at"] = now

    result = collection(collection_name).insert_one(data_dict)
    return str(result.inserted_id)


def get_documents(collection_name: str, filter_dict: Optional[Dict[str, Any]] = None,
                  limit: Optional[int] = None) -> List[dict]:
    cursor = collection(collection_name).find(filter_dict or {})
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def ensure_indexes():
    for name, field in UNIQUE_INDEXES.items():
        collection(name).create_index([(field, ASCENDING)], unique=True)
        logger.debug("unique index on %s.%s", name, field)
