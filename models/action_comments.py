from datetime import datetime, timezone
from typing import Any, List, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument

import database
from errors import NotFoundError, YouPowerError
from schemas import ActionComment


def _comments():
    return database.collection("actioncomment")


def calc_rating(comment: dict, user_id: Any = None) -> dict:
    """Reduce the per-user like map to numLikes and the caller's own userRating."""
    ratings = comment.pop("ratings", None) or {}
    comment["numLikes"] = sum(1 for r in ratings.values() if r.get("value"))
    if user_id is not None and str(user_id) in ratings:
        comment["userRating"] = ratings[str(user_id)].get("value")
    return comment


def create(action_id: Any, user: dict, text: str) -> dict:
    if not database.collection("action").find_one({"_id": action_id}, {"_id": 1}):
        raise NotFoundError("Action not found")
    doc = ActionComment(
        actionId=action_id,
        userId=user["_id"],
        name=user["profile"]["name"],
        email=user["email"],
        comment=text,
        date=datetime.now(timezone.utc),
    )
    new_id = database.create_document("actioncomment", doc)
    created = _comments().find_one({"_id": ObjectId(new_id)})
    return calc_rating(created, user["_id"])


def _paged(query: dict, limit: Optional[int], skip: int):
    cursor = _comments().find(query).sort([("date", DESCENDING), ("_id", DESCENDING)]).skip(skip or 0)
    if limit:
        cursor = cursor.limit(limit)
    return cursor


def get(action_id: Any, limit: Optional[int] = None, skip: int = 0, user: Optional[dict] = None) -> List[dict]:
    user_id = user["_id"] if user else None
    return [calc_rating(c, user_id) for c in _paged({"actionId": action_id}, limit, skip)]


def get_by_user(user: dict, limit: Optional[int] = None, skip: int = 0) -> List[dict]:
    return [calc_rating(c, user["_id"]) for c in _paged({"userId": user["_id"]}, limit, skip)]


def count(action_id: Any) -> int:
    return _comments().count_documents({"actionId": action_id})


def delete(action_id: Any, comment_id: Any) -> dict:
    result = _comments().delete_one({"actionId": action_id, "_id": comment_id})
    return {"n": result.deleted_count, "ok": 1}


def rate(action_id: Any, comment_id: Any, user: Optional[dict], rating: Optional[int]) -> dict:
    if not user or not user.get("_id"):
        raise YouPowerError("Missing/invalid user")
    if rating is None:
        raise YouPowerError("Missing/invalid rating")
    if not _comments().find_one({"actionId": action_id, "_id": comment_id}, {"_id": 1}):
        raise NotFoundError("Action comment not found")
    if rating not in (0, 1):
        raise YouPowerError("invalid rating! should be 0 or 1")

    updated = _comments().find_one_and_update(
        {"actionId": action_id, "_id": comment_id},
        {"$set": {f"ratings.{user['_id']}": {"value": rating, "date": datetime.now(timezone.utc)}}},
        return_document=ReturnDocument.AFTER,
    )
    return calc_rating(updated, user["_id"])
