"""
Actions: the energy-saving behaviours users rate, adopt and complete.

Stats are never stored. Every read derives numLikes, the median-weighted
effort and the caller's own userRating from the raw `ratings` map.
"""
import logging
import random
import re
from datetime import datetime, timezone
from typing import Any, List, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument

import database
from errors import NotFoundError, YouPowerError
from models import action_comments
from schemas import ACTION_STATES, Action

logger = logging.getLogger(__name__)

# Weight of the author's own effort estimate in the median
AUTHOR_EFFORT_WEIGHT = 5
MAX_SUGGESTED = 5

LOCALIZED_FIELDS = {
    "Italian": ("nameIt", "descriptionIt"),
    "Swedish": ("nameSe", "descriptionSe"),
}


def _actions():
    return database.collection("action")


def _language(user: Optional[dict]) -> Optional[str]:
    if user and user.get("profile"):
        return user["profile"].get("language")
    return None


def include_rating_stats(action: dict) -> dict:
    ratings = action.get("ratings") or {}
    action["numLikes"] = sum(1 for r in ratings.values() if r.get("rating"))
    return action


def include_median_effort(action: dict) -> dict:
    estimates = [action.get("effort")] * AUTHOR_EFFORT_WEIGHT
    for r in (action.get("ratings") or {}).values():
        if r.get("effort"):
            estimates.append(r["effort"])
    # upper median for even lengths
    estimates.sort()
    action["effort"] = estimates[len(estimates) // 2]
    return action


def include_user_rating(action: dict, user: Optional[dict]) -> dict:
    ratings = action.get("ratings") or {}
    if user and str(user.get("_id")) in ratings:
        action["userRating"] = ratings[str(user["_id"])].get("rating")
    return action


def localize(action: dict, user: Optional[dict]) -> dict:
    fields = LOCALIZED_FIELDS.get(_language(user))
    if fields:
        name_field, description_field = fields
        action["name"] = action.get(name_field) or action.get("name")
        action["description"] = action.get(description_field) or action.get("description")
    for field in ("nameIt", "nameSe", "descriptionIt", "descriptionSe"):
        action.pop(field, None)
    return action


def create(fields: dict, author_id: Any) -> dict:
    doc = Action(**fields, authorId=author_id, date=datetime.now(timezone.utc))
    new_id = database.create_document("action", doc.model_dump(exclude_none=True))
    logger.info("created action %s (%s)", new_id, doc.name)
    return _actions().find_one({"_id": ObjectId(new_id)})


def get(action_id: Any, user: Optional[dict]) -> dict:
    action = _actions().find_one({"_id": action_id})
    if not action:
        raise NotFoundError("Action not found")

    localize(action, user)
    include_user_rating(action, user)
    include_rating_stats(action)
    include_median_effort(action)

    action["numComments"] = action_comments.count(action_id)
    key = str(action_id)
    action["numUsers"] = database.collection("user").count_documents({
        "$or": [
            {f"actions.inProgress.{key}": {"$exists": True}},
            {f"actions.done.{key}": {"$exists": True}},
        ]
    })
    return action


def delete(action_id: Any) -> dict:
    result = _actions().delete_one({"_id": action_id})
    return {"n": result.deleted_count, "ok": 1}


def list_all(limit: Optional[int] = None, skip: int = 0, include_ratings: bool = False,
             user: Optional[dict] = None) -> List[dict]:
    cursor = _actions().find({}).sort([("date", DESCENDING), ("_id", DESCENDING)]).skip(skip or 0)
    if limit:
        cursor = cursor.limit(limit)

    actions = []
    for action in cursor:
        include_user_rating(action, user)
        include_rating_stats(action)
        include_median_effort(action)
        if not include_ratings:
            action.pop("ratings", None)
        actions.append(action)
    return actions


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def rate(action_id: Any, user: Optional[dict], rating: Any = None, effort: Any = None) -> dict:
    """Create or overwrite the user's rating of an action.

    rating is 0 (dislike) or 1 (like), effort is 1-5. Either may be omitted,
    in which case the user's previous value is kept.
    """
    if not user or not user.get("_id") or not (user.get("profile") or {}).get("name"):
        raise YouPowerError("Missing/invalid user")

    action = _actions().find_one({"_id": action_id}, {"ratings": 1})
    if not action:
        raise NotFoundError("Action not found")

    user_key = str(user["_id"])
    old = (action.get("ratings") or {}).get(user_key)
    bad_rating = _is_number(rating) and rating not in (0, 1)
    bad_effort = _is_number(effort) and not 1 <= effort <= 5
    if old:
        if bad_rating:
            raise YouPowerError("Invalid rating estimate")
        if bad_effort:
            raise YouPowerError("Invalid effort estimate")
    else:
        old = {}
        if bad_rating:
            raise YouPowerError("Missing/invalid rating")
        if bad_effort:
            raise YouPowerError("Missing/invalid effort estimate")

    entry = {
        "rating": int(rating) if _is_number(rating) else old.get("rating"),
        "effort": int(effort) if _is_number(effort) else old.get("effort"),
        "name": user["profile"]["name"],
        "date": datetime.now(timezone.utc),
    }
    return _actions().find_one_and_update(
        {"_id": action_id},
        {"$set": {f"ratings.{user_key}": entry}},
        return_document=ReturnDocument.AFTER,
    )


def excluded_action_ids(user: dict) -> List[Any]:
    buckets = user.get("actions") or {}
    ids = []
    for state in ACTION_STATES:
        for key in (buckets.get(state) or {}):
            ids.append(ObjectId(key) if ObjectId.is_valid(key) else key)
    return ids


def get_suggested(user: dict) -> List[dict]:
    """Up to five random actions the user has not yet placed in any bucket."""
    query = {"_id": {"$nin": excluded_action_ids(user)}}
    fields = LOCALIZED_FIELDS.get(_language(user))
    if fields:
        name_field, description_field = fields
        query[name_field] = {"$exists": True}
        projection = {name_field: 1, description_field: 1, "impact": 1, "effort": 1}
    else:
        projection = {"name": 1, "description": 1, "impact": 1, "effort": 1}

    actions = list(_actions().find(query, projection))
    random.shuffle(actions)
    actions = actions[:MAX_SUGGESTED]

    if fields:
        for action in actions:
            action["name"] = action.pop(name_field, None)
            action["description"] = action.pop(description_field, None)
    return actions


def search(name: str) -> List[dict]:
    pattern = "^" + re.escape(name)
    return list(_actions().find({"name": {"$regex": pattern, "$options": "i"}}))
