from datetime import datetime
from typing import Any, List, Optional

from bson import ObjectId

import database
from errors import NotFoundError
from schemas import Cooperative


def _cooperatives():
    return database.collection("cooperative")


def create(fields: dict) -> dict:
    doc = Cooperative(**fields)
    new_id = database.create_document("cooperative", doc)
    return _cooperatives().find_one({"_id": ObjectId(new_id)})


def get(cooperative_id: Any) -> dict:
    cooperative = _cooperatives().find_one({"_id": cooperative_id})
    if not cooperative:
        raise NotFoundError("Cooperative not found")
    return cooperative


def list_all() -> List[dict]:
    return list(_cooperatives().find({}).sort("name", 1))


def update(cooperative_id: Any, fields: dict) -> dict:
    changes = {k: fields[k] for k in ("name", "yearOfConst", "area", "meters") if fields.get(k) is not None}
    result = _cooperatives().update_one({"_id": cooperative_id}, {"$set": changes})
    if not result.matched_count:
        raise NotFoundError("Cooperative not found")
    return get(cooperative_id)


def add_action(cooperative_id: Any, name: str, description: Optional[str] = None,
               date: Optional[datetime] = None) -> dict:
    entry = {"_id": ObjectId(), "name": name, "description": description, "date": date}
    result = _cooperatives().update_one({"_id": cooperative_id}, {"$push": {"actions": entry}})
    if not result.matched_count:
        raise NotFoundError("Cooperative not found")
    return get(cooperative_id)


def _require_action(cooperative: dict, action_id: Any):
    if not any(a.get("_id") == action_id for a in cooperative.get("actions") or []):
        raise NotFoundError("Cooperative action not found")


def update_action(cooperative_id: Any, action_id: Any, name: str, description: Optional[str] = None,
                  date: Optional[datetime] = None) -> dict:
    _require_action(get(cooperative_id), action_id)
    _cooperatives().update_one(
        {"_id": cooperative_id, "actions._id": action_id},
        {"$set": {
            "actions.$.name": name,
            "actions.$.description": description,
            "actions.$.date": date,
        }},
    )
    return get(cooperative_id)


def delete_action(cooperative_id: Any, action_id: Any) -> dict:
    _require_action(get(cooperative_id), action_id)
    _cooperatives().update_one({"_id": cooperative_id}, {"$pull": {"actions": {"_id": action_id}}})
    return get(cooperative_id)
