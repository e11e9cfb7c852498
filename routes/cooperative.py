from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from activity import log_activity
from auth import get_current_user
from common import check_mongo_id, serialize_doc
from models import cooperatives
from schemas import Meters

router = APIRouter(prefix="/api/cooperative", tags=["cooperatives"])


class CooperativeIn(BaseModel):
    name: str
    yearOfConst: int = Field(..., ge=1000, le=3000)
    area: float = Field(..., gt=0)
    meters: Meters = Field(default_factory=Meters)


class CooperativeUpdateIn(BaseModel):
    name: Optional[str] = None
    yearOfConst: Optional[int] = Field(None, ge=1000, le=3000)
    area: Optional[float] = Field(None, gt=0)
    meters: Optional[Meters] = None


class CooperativeActionIn(BaseModel):
    name: str
    description: Optional[str] = None
    date: Optional[datetime] = None


@router.post("")
def create_cooperative(data: CooperativeIn, user: dict = Depends(get_current_user)):
    log_activity(user["_id"], "Cooperative", "create", {"name": data.name})
    cooperative = cooperatives.create(data.model_dump())
    return serialize_doc(cooperative)


@router.get("")
def list_cooperatives(user: dict = Depends(get_current_user)):
    return serialize_doc(cooperatives.list_all())


@router.get("/{id}")
def get_cooperative(id: str, user: dict = Depends(get_current_user)):
    cooperative_id = check_mongo_id(id, "Invalid cooperative id")
    log_activity(user["_id"], "Cooperative", "get", {"cooperativeId": cooperative_id})
    cooperative = cooperatives.get(cooperative_id)
    return serialize_doc(cooperative)


@router.put("/{id}")
def update_cooperative(id: str, data: CooperativeUpdateIn, user: dict = Depends(get_current_user)):
    cooperative_id = check_mongo_id(id, "Invalid cooperative id")
    log_activity(user["_id"], "Cooperative", "update", {"cooperativeId": cooperative_id})
    cooperative = cooperatives.update(cooperative_id, data.model_dump())
    return serialize_doc(cooperative)


@router.post("/{id}/action")
def add_cooperative_action(id: str, data: CooperativeActionIn, user: dict = Depends(get_current_user)):
    cooperative_id = check_mongo_id(id, "Invalid cooperative id")
    log_activity(user["_id"], "Cooperative", "addAction", {"cooperativeId": cooperative_id, "name": data.name})
    cooperative = cooperatives.add_action(cooperative_id, data.name, data.description, data.date)
    return serialize_doc(cooperative)


@router.put("/{id}/action/{actionId}")
def update_cooperative_action(id: str, actionId: str, data: CooperativeActionIn,
                              user: dict = Depends(get_current_user)):
    cooperative_id = check_mongo_id(id, "Invalid cooperative id")
    action_id = check_mongo_id(actionId, "Invalid cooperative action id")
    log_activity(user["_id"], "Cooperative", "updateAction", {"cooperativeId": cooperative_id, "actionId": action_id})
    cooperative = cooperatives.update_action(cooperative_id, action_id, data.name, data.description, data.date)
    return serialize_doc(cooperative)


@router.delete("/{id}/action/{actionId}")
def delete_cooperative_action(id: str, actionId: str, user: dict = Depends(get_current_user)):
    cooperative_id = check_mongo_id(id, "Invalid cooperative id")
    action_id = check_mongo_id(actionId, "Invalid cooperative action id")
    log_activity(user["_id"], "Cooperative", "deleteAction", {"cooperativeId": cooperative_id, "actionId": action_id})
    cooperative = cooperatives.delete_action(cooperative_id, action_id)
    return serialize_doc(cooperative)
