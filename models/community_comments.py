from datetime import datetime, timezone
from typing import Any, List, Optional

from bson import ObjectId
from pymongo import DESCENDING

import database
from errors import NotFoundError
from schemas import CommunityComment


def _comments():
    return database.collection("communitycomment")


def create(community_id: Any, user: dict, text: str) -> dict:
    if not database.collection("community").find_one({"_id": community_id}, {"_id": 1}):
        raise NotFoundError("Community not found")
    doc = CommunityComment(
        communityId=community_id,
        userId=user["_id"],
        name=user["profile"]["name"],
        email=user["email"],
        comment=text,
        date=datetime.now(timezone.utc),
    )
    new_id = database.create_document("communitycomment", doc)
    return _comments().find_one({"_id": ObjectId(new_id)})


def _paged(query: dict, limit: Optional[int], skip: int) -> List[dict]:
    cursor = _comments().find(query).sort([("date", DESCENDING), ("_id", DESCENDING)]).skip(skip or 0)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def get(community_id: Any, limit: Optional[int] = None, skip: int = 0) -> List[dict]:
    return _paged({"communityId": community_id}, limit, skip)


def get_by_user(user: dict, limit: Optional[int] = None, skip: int = 0) -> List[dict]:
    return _paged({"userId": user["_id"]}, limit, skip)


def delete(community_id: Any, comment_id: Any) -> dict:
    result = _comments().delete_one({"communityId": community_id, "_id": comment_id})
    return {"n": result.deleted_count, "ok": 1}
