"""
Households: the people sharing a home, and the appliances in it.

A user belongs to at most one household (user.householdId). Invites are
tracked on both sides: household.pendingInvites and
user.pendingHouseholdInvites.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from bson import ObjectId

import database
from errors import ForbiddenError, NotFoundError, YouPowerError
from schemas import Household

logger = logging.getLogger(__name__)


def _households():
    return database.collection("household")


def _users():
    return database.collection("user")


def create(fields: dict, owner: dict) -> dict:
    if owner.get("householdId"):
        raise YouPowerError("You are already in a household")
    doc = Household(**fields, ownerId=owner["_id"], members=[owner["_id"]], date=datetime.now(timezone.utc))
    new_id = ObjectId(database.create_document("household", doc))
    _users().update_one({"_id": owner["_id"]}, {"$set": {"householdId": new_id}})
    logger.info("user %s created household %s", owner["_id"], new_id)
    return get(new_id)


def get(household_id: Any) -> dict:
    household = _households().find_one({"_id": household_id})
    if not household:
        raise NotFoundError("Household not found")
    return household


def update(household_id: Any, fields: dict) -> dict:
    changes = {k: fields[k] for k in ("address", "houseType", "size") if fields.get(k) is not None}
    if changes:
        result = _households().update_one({"_id": household_id}, {"$set": changes})
        if not result.matched_count:
            raise NotFoundError("Household not found")
    return get(household_id)


def delete(household_id: Any, user: dict) -> dict:
    household = get(household_id)
    if household["ownerId"] != user["_id"]:
        raise ForbiddenError("Only the owner can delete a household")
    _users().update_many({"householdId": household_id}, {"$set": {"householdId": None}})
    _users().update_many({}, {"$pull": {"pendingHouseholdInvites": household_id}})
    result = _households().delete_one({"_id": household_id})
    return {"n": result.deleted_count, "ok": 1}


def invite(inviter: dict, user_id: Any) -> dict:
    household_id = inviter.get("householdId")
    if not household_id:
        raise YouPowerError("You are not in a household")
    household = get(household_id)
    if user_id in household.get("members", []):
        raise YouPowerError("User is already a member")
    result = _users().update_one({"_id": user_id}, {"$addToSet": {"pendingHouseholdInvites": household_id}})
    if not result.matched_count:
        raise NotFoundError("User not found")
    _households().update_one({"_id": household_id}, {"$addToSet": {"pendingInvites": user_id}})
    return get(household_id)


def respond_invite(household_id: Any, user: dict, accepted: bool) -> dict:
    household = get(household_id)
    if user["_id"] not in household.get("pendingInvites", []):
        raise NotFoundError("Invite not found")
    if accepted and user.get("householdId"):
        raise YouPowerError("Leave your current household before joining another")

    _households().update_one({"_id": household_id}, {"$pull": {"pendingInvites": user["_id"]}})
    _users().update_one({"_id": user["_id"]}, {"$pull": {"pendingHouseholdInvites": household_id}})
    if accepted:
        _households().update_one({"_id": household_id}, {"$addToSet": {"members": user["_id"]}})
        _users().update_one({"_id": user["_id"]}, {"$set": {"householdId": household_id}})
    return get(household_id)


def remove_member(household_id: Any, user_id: Any, requester: dict) -> dict:
    household = get(household_id)
    if requester["_id"] not in (household["ownerId"], user_id):
        raise ForbiddenError("Only the owner can remove other members")
    if user_id == household["ownerId"]:
        raise YouPowerError("The owner cannot leave the household")
    if user_id not in household.get("members", []):
        raise NotFoundError("Member not found")
    _households().update_one({"_id": household_id}, {"$pull": {"members": user_id}})
    _users().update_one({"_id": user_id, "householdId": household_id}, {"$set": {"householdId": None}})
    return get(household_id)


def add_appliance(household_id: Any, appliance: str, quantity: Optional[int] = 1) -> dict:
    result = _households().update_one(
        {"_id": household_id},
        {"$push": {"appliancesList": {"appliance": appliance, "quantity": quantity or 1}}},
    )
    if not result.matched_count:
        raise NotFoundError("Household not found")
    return get(household_id)


def remove_appliance(household_id: Any, appliance: str) -> dict:
    result = _households().update_one({"_id": household_id}, {"$pull": {"appliancesList": {"appliance": appliance}}})
    if not result.matched_count:
        raise NotFoundError("Household not found")
    return get(household_id)
