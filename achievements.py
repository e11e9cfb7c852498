import logging

import database

logger = logging.getLogger(__name__)


def update_achievement(user: dict, name: str, value: int) -> int:
    """Raise the user's `name` achievement to `value`; progress never decreases.

    The comparison happens inside MongoDB ($max), so concurrent updates cannot
    lower a counter another request already raised.
    """
    users = database.collection("user")
    users.update_one({"_id": user["_id"]}, {"$max": {f"achievements.{name}": int(value)}})
    updated = users.find_one({"_id": user["_id"]}, {"achievements": 1}) or {}
    progress = (updated.get("achievements") or {}).get(name, 0)
    logger.debug("achievement %s for user %s is now %s", name, user["_id"], progress)
    return progress


def get_achievements(user: dict) -> dict:
    doc = database.collection("user").find_one({"_id": user["_id"]}, {"achievements": 1}) or {}
    return doc.get("achievements") or {}
