from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from achievements import update_achievement
from activity import log_activity
from auth import get_current_user
from common import check_mongo_id, serialize_doc
from models import communities, community_comments
from schemas import NamedRef

router = APIRouter(prefix="/api/community", tags=["communities"])


class CommunityIn(BaseModel):
    name: str
    challenges: List[NamedRef] = []
    actions: List[NamedRef] = []
    members: List[str] = Field(default_factory=list, description="User ids besides the owner")


class CommunityRateIn(BaseModel):
    rating: Optional[int] = None
    comment: Optional[str] = None


class CommentIn(BaseModel):
    comment: str = Field(..., min_length=1)


@router.post("")
def create_community(data: CommunityIn, user: dict = Depends(get_current_user)):
    log_activity(user["_id"], "Community", "create", {"name": data.name})
    community = communities.create(data.model_dump(), user["_id"])
    return serialize_doc(community)


@router.get("/list")
def list_communities(user: dict = Depends(get_current_user)):
    log_activity(user["_id"], "Community", "listAll")
    return serialize_doc(communities.get_user_communities(user["_id"]))


@router.get("/top/{id}")
def top_actions(id: str, limit: int = Query(communities.DEFAULT_TOP_LIMIT, ge=1, le=100),
                user: dict = Depends(get_current_user)):
    community_id = check_mongo_id(id, "Invalid Community id")
    log_activity(user["_id"], "Community", "top", {"communityId": community_id, "limit": limit})
    ranked = communities.top_actions(community_id, limit)
    return serialize_doc(ranked)


@router.put("/join/{id}")
def join_community(id: str, user: dict = Depends(get_current_user)):
    community_id = check_mongo_id(id, "Invalid Community id")
    log_activity(user["_id"], "Community", "join", {"communityId": community_id})
    community = communities.add_member(community_id, user["_id"])
    joined = communities.get_user_communities(user["_id"])
    update_achievement(user, "communitiesJoined", len(joined))
    return serialize_doc(community)


@router.put("/rate/{id}")
def rate_community(id: str, data: CommunityRateIn, user: dict = Depends(get_current_user)):
    community_id = check_mongo_id(id, "Invalid community id")
    log_activity(user["_id"], "Community", "rate",
                 {"communityId": community_id, "rating": data.rating, "comment": data.comment})
    community = communities.rate(community_id, user, data.rating, data.comment)
    return serialize_doc(community)


@router.get("/{id}")
def get_community(id: str, user: dict = Depends(get_current_user)):
    community_id = check_mongo_id(id, "Invalid community id")
    log_activity(user["_id"], "Community", "get", {"communityId": community_id})
    community = communities.get_community_info(community_id, user)
    return serialize_doc(community)


@router.delete("/{id}")
def delete_community(id: str, user: dict = Depends(get_current_user)):
    community_id = check_mongo_id(id, "Invalid Community id")
    log_activity(user["_id"], "Community", "delete", {"communityId": community_id})
    result = communities.delete(community_id)
    return result


# -------------------------------------------------------------------
# Community comments
# -------------------------------------------------------------------
@router.post("/{communityId}/comment")
def create_comment(communityId: str, data: CommentIn, user: dict = Depends(get_current_user)):
    community_id = check_mongo_id(communityId, "Invalid community id")
    log_activity(user["_id"], "Community Comments", "create",
                 {"communityId": community_id, "comment": data.comment})
    comment = community_comments.create(community_id, user, data.comment)
    return serialize_doc(comment)


@router.get("/{communityId}/comments")
def list_comments(communityId: str, limit: int = Query(10, ge=1, le=100), skip: int = Query(0, ge=0),
                  user: dict = Depends(get_current_user)):
    community_id = check_mongo_id(communityId, "Invalid community id")
    log_activity(user["_id"], "Community Comments", "get",
                 {"communityId": community_id, "limit": limit, "skip": skip})
    comments = community_comments.get(community_id, limit, skip)
    return serialize_doc(comments)


@router.delete("/{communityId}/comment/{commentId}")
def delete_comment(communityId: str, commentId: str, user: dict = Depends(get_current_user)):
    community_id = check_mongo_id(communityId, "Invalid community id")
    comment_id = check_mongo_id(commentId, "Invalid comment id")
    log_activity(user["_id"], "Community Comments", "delete",
                 {"communityId": community_id, "commentId": comment_id})
    result = community_comments.delete(community_id, comment_id)
    return result
