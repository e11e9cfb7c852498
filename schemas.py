"""
Database Schemas for YouPower

Each Pydantic model maps to a MongoDB collection using the lowercase
class name as the collection name. Rating maps are keyed by user id.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, EmailStr

ACTION_STATES = ("done", "declined", "na", "pending", "inProgress")
LANGUAGES = ("English", "Italian", "Swedish")


class Action(BaseModel):
    """
    Energy-saving action users can adopt
    Collection: "action"
    """
    name: str = Field(..., description="Unique English name")
    nameIt: Optional[str] = None
    nameSe: Optional[str] = None
    description: str
    descriptionIt: Optional[str] = None
    descriptionSe: Optional[str] = None
    category: Optional[str] = None
    type: Literal["onetime", "routine", "common", "regular", "irregular"] = "onetime"
    season: Optional[Literal["spring", "autumn", "winter", "summer"]] = None
    impact: int = Field(3, ge=1, le=5)
    effort: int = Field(3, ge=1, le=5, description="Author's effort estimate")
    ratings: Dict[str, Any] = Field(default_factory=dict, description="userId -> {rating, effort, name, date}")
    authorId: Any = Field(..., description="ObjectId of the author")
    date: datetime


class ActionComment(BaseModel):
    """
    Collection: "actioncomment"
    """
    actionId: Any
    userId: Any
    name: str
    email: str
    comment: str
    date: datetime
    hasPicture: bool = False
    ratings: Dict[str, Any] = Field(default_factory=dict, description="userId -> {value, date}")


class NamedRef(BaseModel):
    id: str
    name: str


class Community(BaseModel):
    """
    Collection: "community"
    """
    name: str = Field(..., description="Unique community name")
    challenges: List[NamedRef] = []
    actions: List[NamedRef] = []
    members: List[Any] = Field(default_factory=list, description="User ObjectIds")
    ownerId: Any
    ratings: Dict[str, Any] = Field(default_factory=dict)
    date: datetime


class CommunityComment(BaseModel):
    """
    Collection: "communitycomment"
    """
    communityId: Any
    userId: Any
    name: str
    email: str
    comment: str
    date: datetime


class Meters(BaseModel):
    electricity: Optional[str] = None
    heating: Optional[str] = None


class Cooperative(BaseModel):
    """
    Housing cooperative (building) with the actions it has undertaken
    Collection: "cooperative"
    """
    name: str
    yearOfConst: int
    area: float
    meters: Meters = Field(default_factory=Meters)
    actions: List[Dict[str, Any]] = []


class Appliance(BaseModel):
    appliance: str
    quantity: int = Field(1, ge=1)


class Household(BaseModel):
    """
    Collection: "household"
    """
    ownerId: Any
    address: Optional[str] = None
    houseType: Optional[str] = None
    size: Optional[float] = None
    members: List[Any] = []
    pendingInvites: List[Any] = []
    appliancesList: List[Appliance] = []
    date: datetime


class ToRehearse(BaseModel):
    done: Optional[bool] = None
    declined: Optional[bool] = None
    na: Optional[bool] = None


class Profile(BaseModel):
    name: str
    language: Literal["English", "Italian", "Swedish"] = "English"
    toRehearse: ToRehearse = Field(default_factory=ToRehearse)


def empty_action_buckets() -> Dict[str, Dict[str, Any]]:
    return {state: {} for state in ACTION_STATES}


class User(BaseModel):
    """
    Collection: "user"
    """
    email: EmailStr = Field(..., description="Unique email address")
    password_hash: str = Field(..., description="Password hash (bcrypt/argon2)")
    algo: str = "bcrypt"
    profile: Profile
    actions: Dict[str, Dict[str, Any]] = Field(default_factory=empty_action_buckets)
    householdId: Optional[Any] = None
    pendingHouseholdInvites: List[Any] = []
    achievements: Dict[str, int] = {}


class Log(BaseModel):
    """
    User activity log
    Collection: "log"
    """
    userId: Any
    category: str
    type: str
    data: Any = None
    date: datetime
