"""
Communities group users around shared challenges and actions.

Members are stored as user ObjectIds; ratings are keyed by user id like
action ratings and reduced to numLikes/userRating on every read.
"""
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument

import database
from common import to_object_id
from errors import NotFoundError, YouPowerError
from models import actions as actions_model
from schemas import Community

logger = logging.getLogger(__name__)

DEFAULT_TOP_LIMIT = 10


def _communities():
    return database.collection("community")


def reduce_ratings(community: dict, user_id: Any = None) -> dict:
    ratings = community.pop("ratings", None) or {}
    community["numLikes"] = sum(1 for r in ratings.values() if r.get("rating"))
    if user_id is not None and str(user_id) in ratings:
        community["userRating"] = ratings[str(user_id)].get("rating")
    return community


def create(fields: dict, owner_id: Any) -> dict:
    members = [to_object_id(m) for m in fields.pop("members", None) or []]
    if owner_id not in members:
        members.insert(0, owner_id)
    doc = Community(**fields, members=members, ownerId=owner_id, date=datetime.now(timezone.utc))
    new_id = database.create_document("community", doc)
    logger.info("created community %s (%s)", new_id, doc.name)
    return reduce_ratings(_communities().find_one({"_id": ObjectId(new_id)}), owner_id)


def _find(community_id: Any) -> dict:
    community = _communities().find_one({"_id": community_id})
    if not community:
        raise NotFoundError("Community not found")
    return community


def get_community_info(community_id: Any, user: Optional[dict] = None) -> dict:
    community = _find(community_id)
    members = database.collection("user").find(
        {"_id": {"$in": community.get("members") or []}}, {"profile.name": 1})
    community["members"] = [
        {"_id": m["_id"], "name": (m.get("profile") or {}).get("name")} for m in members
    ]
    return reduce_ratings(community, user["_id"] if user else None)


def get_user_communities(user_id: Any) -> List[dict]:
    return [reduce_ratings(c, user_id) for c in _communities().find({"members": user_id})]


def delete(community_id: Any) -> dict:
    result = _communities().delete_one({"_id": community_id})
    return {"n": result.deleted_count, "ok": 1}


def add_member(community_id: Any, user_id: Any) -> dict:
    community = _communities().find_one_and_update(
        {"_id": community_id},
        {"$addToSet": {"members": user_id}},
        return_document=ReturnDocument.AFTER,
    )
    if not community:
        raise NotFoundError("Community not found")
    return reduce_ratings(community, user_id)


def top_actions(community_id: Any, limit: Optional[int] = None) -> List[dict]:
    """The community's actions, most liked first."""
    community = _find(community_id)
    ids = [to_object_id(a.get("id")) for a in community.get("actions") or []]
    ranked = []
    for action in database.collection("action").find({"_id": {"$in": ids}}):
        actions_model.include_rating_stats(action)
        actions_model.include_median_effort(action)
        action.pop("ratings", None)
        ranked.append(action)
    ranked.sort(key=lambda a: a["numLikes"], reverse=True)
    return ranked[:limit or DEFAULT_TOP_LIMIT]


def rate(community_id: Any, user: dict, rating: Any, comment: Optional[str] = None) -> dict:
    if not user or not user.get("_id"):
        raise YouPowerError("Missing/invalid user")
    if rating not in (0, 1) or isinstance(rating, bool):
        raise YouPowerError("Missing/invalid rating")

    entry = {
        "rating": rating,
        "comment": comment,
        "name": (user.get("profile") or {}).get("name"),
        "date": datetime.now(timezone.utc),
    }
    community = _communities().find_one_and_update(
        {"_id": community_id},
        {"$set": {f"ratings.{user['_id']}": entry}},
        return_document=ReturnDocument.AFTER,
    )
    if not community:
        raise NotFoundError("Community not found")
    return reduce_ratings(community, user["_id"])
