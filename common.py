from datetime import datetime
from typing import Any

from bson import ObjectId
from fastapi import HTTPException


def serialize_doc(doc: Any) -> Any:
    # ObjectIds become strings and datetimes isoformat, at any depth
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, datetime):
        return doc.isoformat()
    if isinstance(doc, dict):
        return {k: serialize_doc(v) for k, v in doc.items()}
    if isinstance(doc, (list, tuple)):
        return [serialize_doc(v) for v in doc]
    return doc


def check_mongo_id(value: str, message: str) -> ObjectId:
    if not ObjectId.is_valid(value):
        raise HTTPException(status_code=500, detail=f"There have been validation errors: {message}")
    return ObjectId(value)


def to_object_id(value: Any) -> Any:
    """Best-effort conversion of an id string to ObjectId; other values pass through."""
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value
