from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from activity import log_activity
from auth import get_current_user
from common import check_mongo_id, serialize_doc
from models import households

router = APIRouter(prefix="/api/household", tags=["households"])


class HouseholdIn(BaseModel):
    address: Optional[str] = None
    houseType: Optional[str] = None
    size: Optional[float] = Field(None, gt=0)


class InviteResponseIn(BaseModel):
    accepted: bool


class ApplianceIn(BaseModel):
    appliance: str
    quantity: int = Field(1, ge=1)


class ApplianceRemoveIn(BaseModel):
    appliance: str


@router.post("")
def create_household(data: HouseholdIn, user: dict = Depends(get_current_user)):
    log_activity(user["_id"], "Household", "create", {"address": data.address})
    household = households.create(data.model_dump(), user)
    return serialize_doc(household)


@router.post("/invite/{userId}")
def invite_member(userId: str, user: dict = Depends(get_current_user)):
    invitee_id = check_mongo_id(userId, "Invalid user id")
    log_activity(user["_id"], "Household", "invite", {"userId": invitee_id})
    household = households.invite(user, invitee_id)
    return serialize_doc(household)


@router.put("/invite/{id}")
def respond_invite(id: str, data: InviteResponseIn, user: dict = Depends(get_current_user)):
    household_id = check_mongo_id(id, "Invalid household id")
    log_activity(user["_id"], "Household", "responseInvite", {"householdId": household_id, "accepted": data.accepted})
    household = households.respond_invite(household_id, user, data.accepted)
    return serialize_doc(household)


@router.put("/removemember/{householdId}/{userId}")
def remove_member(householdId: str, userId: str, user: dict = Depends(get_current_user)):
    household_id = check_mongo_id(householdId, "Invalid household id")
    member_id = check_mongo_id(userId, "Invalid user id")
    log_activity(user["_id"], "Household", "removeMember", {"householdId": household_id, "userId": member_id})
    household = households.remove_member(household_id, member_id, user)
    return serialize_doc(household)


@router.put("/add/{id}")
def add_appliance(id: str, data: ApplianceIn, user: dict = Depends(get_current_user)):
    household_id = check_mongo_id(id, "Invalid household id")
    log_activity(user["_id"], "Household", "addAppliance", {"householdId": household_id, "appliance": data.appliance})
    household = households.add_appliance(household_id, data.appliance, data.quantity)
    return serialize_doc(household)


@router.put("/remove/{id}")
def remove_appliance(id: str, data: ApplianceRemoveIn, user: dict = Depends(get_current_user)):
    household_id = check_mongo_id(id, "Invalid household id")
    log_activity(user["_id"], "Household", "removeAppliance",
                 {"householdId": household_id, "appliance": data.appliance})
    household = households.remove_appliance(household_id, data.appliance)
    return serialize_doc(household)


@router.get("/{id}")
def get_household(id: str, user: dict = Depends(get_current_user)):
    household_id = check_mongo_id(id, "Invalid household id")
    log_activity(user["_id"], "Household", "get", {"householdId": household_id})
    household = households.get(household_id)
    return serialize_doc(household)


@router.put("/{id}")
def update_household(id: str, data: HouseholdIn, user: dict = Depends(get_current_user)):
    household_id = check_mongo_id(id, "Invalid household id")
    log_activity(user["_id"], "Household", "update", {"householdId": household_id})
    household = households.update(household_id, data.model_dump())
    return serialize_doc(household)


@router.delete("/{id}")
def delete_household(id: str, user: dict = Depends(get_current_user)):
    household_id = check_mongo_id(id, "Invalid household id")
    log_activity(user["_id"], "Household", "delete", {"householdId": household_id})
    result = households.delete(household_id, user)
    return result
