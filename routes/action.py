from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from activity import log_activity
from auth import get_current_user
from common import check_mongo_id, serialize_doc
from models import action_comments, actions

router = APIRouter(prefix="/api/action", tags=["actions"])


class ActionIn(BaseModel):
    name: str
    description: str
    nameIt: Optional[str] = None
    nameSe: Optional[str] = None
    descriptionIt: Optional[str] = None
    descriptionSe: Optional[str] = None
    category: Optional[str] = None
    type: Literal["onetime", "routine", "common", "regular", "irregular"] = "onetime"
    season: Optional[Literal["spring", "autumn", "winter", "summer"]] = None
    impact: int = Field(3, ge=1, le=5)
    effort: int = Field(3, ge=1, le=5)


class RateIn(BaseModel):
    rating: Optional[int] = None
    effort: Optional[int] = None


class CommentIn(BaseModel):
    comment: str = Field(..., min_length=1)


class CommentRateIn(BaseModel):
    rating: Optional[int] = None


@router.get("")
def suggested_actions(user: dict = Depends(get_current_user)):
    log_activity(user["_id"], "Action", "getSuggested")
    return serialize_doc(actions.get_suggested(user))


@router.get("/list")
def list_actions(limit: int = Query(10, ge=1, le=100), skip: int = Query(0, ge=0),
                 includeRatings: bool = False, user: dict = Depends(get_current_user)):
    log_activity(user["_id"], "Action", "list", {"limit": limit, "skip": skip})
    return serialize_doc(actions.list_all(limit, skip, includeRatings, user))


@router.get("/search")
def search_actions(q: str = Query(..., min_length=1), user: dict = Depends(get_current_user)):
    log_activity(user["_id"], "Action", "search", {"q": q})
    return serialize_doc(actions.search(q))


@router.post("")
def create_action(data: ActionIn, user: dict = Depends(get_current_user)):
    log_activity(user["_id"], "Action", "create", {"name": data.name})
    action = actions.create(data.model_dump(exclude_none=True), user["_id"])
    return serialize_doc(action)


@router.put("/rate/{id}")
def rate_action(id: str, data: RateIn, user: dict = Depends(get_current_user)):
    action_id = check_mongo_id(id, "Invalid action id")
    log_activity(user["_id"], "Action", "rate", {"actionId": action_id, "rating": data.rating, "effort": data.effort})
    action = actions.rate(action_id, user, data.rating, data.effort)
    return serialize_doc(action)


@router.get("/{id}")
def get_action(id: str, user: dict = Depends(get_current_user)):
    action_id = check_mongo_id(id, "Invalid action id")
    log_activity(user["_id"], "Action", "get", {"actionId": action_id})
    action = actions.get(action_id, user)
    return serialize_doc(action)


@router.delete("/{id}")
def delete_action(id: str, user: dict = Depends(get_current_user)):
    action_id = check_mongo_id(id, "Invalid action id")
    log_activity(user["_id"], "Action", "delete", {"actionId": action_id})
    result = actions.delete(action_id)
    return result


# -------------------------------------------------------------------
# Action comments
# -------------------------------------------------------------------
@router.post("/{actionId}/comment")
def create_comment(actionId: str, data: CommentIn, user: dict = Depends(get_current_user)):
    action_id = check_mongo_id(actionId, "Invalid action id")
    log_activity(user["_id"], "Action Comments", "create", {"actionId": action_id, "comment": data.comment})
    comment = action_comments.create(action_id, user, data.comment)
    return serialize_doc(comment)


@router.get("/{actionId}/comments")
def list_comments(actionId: str, limit: int = Query(10, ge=1, le=100), skip: int = Query(0, ge=0),
                  user: dict = Depends(get_current_user)):
    action_id = check_mongo_id(actionId, "Invalid action id")
    log_activity(user["_id"], "Action Comments", "get", {"actionId": action_id, "limit": limit, "skip": skip})
    comments = action_comments.get(action_id, limit, skip, user)
    return serialize_doc(comments)


@router.delete("/{actionId}/comment/{commentId}")
def delete_comment(actionId: str, commentId: str, user: dict = Depends(get_current_user)):
    action_id = check_mongo_id(actionId, "Invalid action id")
    comment_id = check_mongo_id(commentId, "Invalid comment id")
    log_activity(user["_id"], "Action Comments", "delete", {"actionId": action_id, "commentId": comment_id})
    result = action_comments.delete(action_id, comment_id)
    return result


@router.put("/{actionId}/comment/{commentId}/rate")
def rate_comment(actionId: str, commentId: str, data: CommentRateIn, user: dict = Depends(get_current_user)):
    action_id = check_mongo_id(actionId, "Invalid action id")
    comment_id = check_mongo_id(commentId, "Invalid comment id")
    log_activity(user["_id"], "Action Comments", "rate", {"commentId": comment_id, "rating": data.rating})
    comment = action_comments.rate(action_id, comment_id, user, data.rating)
    return serialize_doc(comment)
