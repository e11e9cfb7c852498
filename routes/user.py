from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, EmailStr, Field

import auth
from achievements import get_achievements
from activity import log_activity
from auth import get_current_user
from common import check_mongo_id, serialize_doc
from models import action_comments, community_comments, users
from schemas import ToRehearse

router = APIRouter(prefix="/api/user", tags=["users"])


class RegisterIn(BaseModel):
    name: str
    email: EmailStr
    password: str = Field(..., min_length=6)
    language: Literal["English", "Italian", "Swedish"] = "English"
    algo: str = Field("bcrypt", pattern="^(bcrypt|argon2)$")


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class AuthOut(BaseModel):
    token: str
    name: str
    email: EmailStr


class ProfileIn(BaseModel):
    name: Optional[str] = None
    language: Optional[Literal["English", "Italian", "Swedish"]] = None
    toRehearse: Optional[ToRehearse] = None


class ActionStateIn(BaseModel):
    state: Literal["done", "declined", "na", "pending", "inProgress"]
    postponed: Optional[datetime] = None


@router.post("/register", response_model=AuthOut)
def register(data: RegisterIn):
    user = users.register(data.name, data.email, data.password, data.algo, data.language)
    return {"token": auth.token_for(user), "name": data.name, "email": data.email}


@router.post("/token", response_model=AuthOut)
def login(data: LoginIn):
    user = users.authenticate(data.email, data.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"token": auth.token_for(user), "name": user["profile"]["name"], "email": user["email"]}


@router.get("/profile")
def get_profile(user: dict = Depends(get_current_user)):
    return serialize_doc(users.public_profile(user))


@router.put("/profile")
def update_profile(data: ProfileIn, user: dict = Depends(get_current_user)):
    log_activity(user["_id"], "User", "updateProfile", data.model_dump(exclude_none=True))
    profile = users.update_profile(user, data.model_dump(exclude_none=True))
    return serialize_doc(profile)


@router.get("/actions")
def get_actions(user: dict = Depends(get_current_user)):
    return serialize_doc(user.get("actions") or {})


@router.put("/action/{actionId}")
def set_action_state(actionId: str, data: ActionStateIn, user: dict = Depends(get_current_user)):
    action_id = check_mongo_id(actionId, "Invalid action id")
    log_activity(user["_id"], "User Action", "setState",
                 {"actionId": action_id, "state": data.state, "postponed": data.postponed})
    buckets = users.set_action_state(user, action_id, data.state, data.postponed)
    return serialize_doc(buckets)


@router.get("/achievements")
def achievements(user: dict = Depends(get_current_user)):
    return get_achievements(user)


@router.get("/pendingInvites")
def pending_invites(user: dict = Depends(get_current_user)):
    return serialize_doc(users.pending_invites(user))


@router.get("/actionComments")
def my_action_comments(limit: int = Query(10, ge=1, le=100), skip: int = Query(0, ge=0),
                       user: dict = Depends(get_current_user)):
    return serialize_doc(action_comments.get_by_user(user, limit, skip))


@router.get("/communityComments")
def my_community_comments(limit: int = Query(10, ge=1, le=100), skip: int = Query(0, ge=0),
                          user: dict = Depends(get_current_user)):
    return serialize_doc(community_comments.get_by_user(user, limit, skip))
