"""
Users and the per-user action buckets.

Each bucket (done, declined, na, pending, inProgress) maps an action id to
an entry snapshotting the action plus its history: startedDate,
postponedDate and doneDate lists, and latestDate. An action lives in at
most one bucket at a time.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from bson import ObjectId

import auth
import database
from achievements import update_achievement
from errors import NotFoundError, YouPowerError
from schemas import ACTION_STATES, Profile, User

logger = logging.getLogger(__name__)

SNAPSHOT_FIELDS = ("name", "description", "impact", "effort", "category", "type")
HISTORY_FIELD = {
    "inProgress": "startedDate",
    "pending": "postponedDate",
    "done": "doneDate",
}


def _users():
    return database.collection("user")


def get(user_id: Any) -> dict:
    user = _users().find_one({"_id": user_id})
    if not user:
        raise NotFoundError("User not found")
    return user


def register(name: str, email: str, password: str, algo: str = "bcrypt", language: str = "English") -> dict:
    if _users().find_one({"email": email}):
        raise YouPowerError("Email already registered")
    doc = User(
        email=email,
        password_hash=auth.hash_password(password, algo),
        algo=algo,
        profile=Profile(name=name, language=language),
    )
    new_id = database.create_document("user", doc)
    logger.info("registered user %s", new_id)
    return get(ObjectId(new_id))


def authenticate(email: str, password: str) -> Optional[dict]:
    user = _users().find_one({"email": email})
    if not user or not auth.verify_password(password, user.get("password_hash", ""), user.get("algo", "bcrypt")):
        return None
    return user


def public_profile(user: dict) -> dict:
    return {
        "_id": user["_id"],
        "email": user["email"],
        "profile": user.get("profile"),
        "householdId": user.get("householdId"),
        "achievements": user.get("achievements") or {},
    }


def update_profile(user: dict, fields: dict) -> dict:
    changes = {f"profile.{k}": v for k, v in fields.items() if v is not None}
    if changes:
        changes["updated_at"] = datetime.now(timezone.utc)
        _users().update_one({"_id": user["_id"]}, {"$set": changes})
    return public_profile(get(user["_id"]))


def set_action_state(user: dict, action_id: Any, state: str, postponed: Optional[datetime] = None) -> dict:
    """Move an action into the `state` bucket and return the user's buckets."""
    if state not in ACTION_STATES:
        raise YouPowerError("Invalid action state")
    if state == "pending" and not postponed:
        raise YouPowerError("Missing postponed date for pending action")

    action = database.collection("action").find_one({"_id": action_id})
    if not action:
        raise NotFoundError("Action not found")

    key = str(action_id)
    buckets = get(user["_id"]).get("actions") or {}
    entry = {}
    for bucket in ACTION_STATES:
        if key in (buckets.get(bucket) or {}):
            entry = dict(buckets[bucket][key])
            break

    now = datetime.now(timezone.utc)
    entry["_id"] = action["_id"]
    for field in SNAPSHOT_FIELDS:
        if field in action:
            entry[field] = action[field]
    history = HISTORY_FIELD.get(state)
    if history:
        entry[history] = list(entry.get(history) or []) + [postponed if state == "pending" else now]
    entry["latestDate"] = now

    _users().update_one({"_id": user["_id"]}, {
        "$set": {f"actions.{state}.{key}": entry},
        "$unset": {f"actions.{other}.{key}": "" for other in ACTION_STATES if other != state},
    })

    actions = get(user["_id"]).get("actions") or {}
    if state == "done":
        update_achievement(user, "actionsDone", len(actions.get("done") or {}))
    return actions


def pending_invites(user: dict) -> dict:
    fresh = get(user["_id"])
    invites = fresh.get("pendingHouseholdInvites") or []
    return {"pendingHouseholdInvites": database.get_documents("household", {"_id": {"$in": invites}})}
