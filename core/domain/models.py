"""
Domain models - mirrors of SportsBuddy server resources.
These models hold whatever the server sent (extra fields are kept) and expose
snake_case names over the server's camelCase payloads.
"""

from pydantic import BaseModel, ConfigDict, Field, AliasChoices, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any, Generic, TypeVar
from datetime import datetime

from core.domain.constants import FILTER_ANY


T = TypeVar("T")


class MirrorModel(BaseModel):
    """Base for server-mirrored entities: camelCase on the wire, extras kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize back to the server's camelCase shape."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Entity(MirrorModel):
    """Mirror model with a server-assigned identity (`_id`)."""

    id: str = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")


# === SHARED REFERENCES ===

class UserRef(Entity):
    """Embedded user reference (author, leaderboard user, participant)"""
    name: Optional[str] = None
    username: Optional[str] = None
    avatar: Optional[str] = None


# === AUTH ===

class AuthUser(Entity):
    """The locally authenticated user"""
    name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    avatar: Optional[str] = None
    role: str = "user"
    followers: List[Any] = Field(default_factory=list)
    following: List[Any] = Field(default_factory=list)
    achievements: List[Any] = Field(default_factory=list)


# === ATHLETES ===

class SportsPreference(MirrorModel):
    sport: str
    skill_level: Optional[str] = None


class AthleteStats(MirrorModel):
    rating: float = 0.0
    events_participated: int = 0
    events_created: int = 0


class Athlete(Entity):
    """Athlete profile as listed by /athletes"""
    name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    location: Optional[Any] = None
    sports_preferences: List[SportsPreference] = Field(default_factory=list)
    followers: List[str] = Field(default_factory=list)
    following: List[str] = Field(default_factory=list)
    followers_count: int = 0
    following_count: int = 0
    is_following: bool = False
    stats: AthleteStats = Field(default_factory=AthleteStats)

    @model_validator(mode="before")
    @classmethod
    def flatten_follow_refs(cls, data: Any) -> Any:
        # Populated follower lists arrive as objects; keep only their ids
        if isinstance(data, dict):
            for key in ("followers", "following"):
                refs = data.get(key)
                if isinstance(refs, list):
                    data = {**data, key: [
                        str(r.get("_id") or r.get("id")) if isinstance(r, dict) else str(r)
                        for r in refs
                    ]}
        return data


class Achievement(MirrorModel):
    title: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    date: Optional[datetime] = None


# === COMMUNITY ===

class Comment(Entity):
    user: Optional[Any] = None
    content: str = ""
    likes: List[Any] = Field(default_factory=list)
    replies: List[Any] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class CommunityPost(Entity):
    """Community post with per-viewer like state"""
    author: Optional[Any] = None
    content: str = ""
    images: List[Any] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    community: Optional[Any] = None
    likes_count: int = 0
    is_liked: bool = False
    comments_count: int = 0
    comments: List[Comment] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class Community(Entity):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    image: Optional[Any] = None
    members: List[Any] = Field(default_factory=list)
    member_count: int = 0
    settings: Dict[str, Any] = Field(default_factory=dict)


# === LEADERBOARD ===

class LeaderboardLevel(MirrorModel):
    current: int = 1
    experience: int = 0
    next_level_exp: int = 100


class LeaderboardEntry(MirrorModel):
    """One ranked row; rank is only meaningful within (timeframe, category)"""
    user: UserRef
    points: int = 0
    rank: int = 0
    category: str = "overall"
    level: LeaderboardLevel = Field(default_factory=LeaderboardLevel)

    @property
    def user_id(self) -> str:
        return self.user.id


# === EVENTS ===

class Event(Entity):
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    time: Optional[str] = None
    location: Optional[Any] = None
    images: List[Any] = Field(default_factory=list)
    participants: List[Any] = Field(default_factory=list)
    max_participants: Optional[int] = None
    chat: List[Any] = Field(default_factory=list)
    ratings: List[Any] = Field(default_factory=list)
    teams: List[Any] = Field(default_factory=list)
    created_by: Optional[Any] = None
    status: Optional[str] = None


# === VENUES ===

class Venue(Entity):
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[Any] = None
    sports: List[str] = Field(default_factory=list)
    amenities: List[Any] = Field(default_factory=list)
    capacity: Optional[int] = None
    pricing: Optional[Dict[str, Any]] = None
    images: List[Any] = Field(default_factory=list)
    average_rating: float = 0.0
    total_reviews: int = 0
    total_bookings: int = 0


# === NOTIFICATIONS ===

class Notification(Entity):
    type: Optional[str] = None
    message: str = ""
    read: bool = False
    sender: Optional[Any] = Field(default=None, validation_alias=AliasChoices("from", "sender"))
    created_at: Optional[datetime] = None


# === PAGINATION ===

class Pagination(MirrorModel):
    """Server pagination block; accepts both page/pages and currentPage/totalPages"""
    current_page: int = Field(default=1, validation_alias=AliasChoices("currentPage", "page", "current_page"))
    total_pages: int = Field(default=1, validation_alias=AliasChoices("totalPages", "pages", "total_pages"))
    total: int = 0
    has_next: Optional[bool] = None
    has_prev: Optional[bool] = None
    limit: int = 12

    @model_validator(mode="after")
    def derive_flags(self) -> "Pagination":
        if self.has_next is None:
            self.has_next = self.current_page < self.total_pages
        if self.has_prev is None:
            self.has_prev = self.current_page > 1
        return self

    @classmethod
    def single_page(cls, total: int, limit: int, page: int = 1) -> "Pagination":
        """Pagination for a response that carried none"""
        return cls(current_page=page, total_pages=page, total=total, limit=limit)


# === FILTERS ===
# Defaults double as reset values; field aliases are the query parameter names.

class AthleteFilters(MirrorModel):
    search: str = ""
    sport: str = FILTER_ANY
    skill_level: str = FILTER_ANY
    location: str = ""
    sort_by: str = "joinedDate:desc"


class CommunityFilters(MirrorModel):
    category: str = FILTER_ANY
    search: str = ""
    sort_by: str = "members:desc"
    location: str = ""


class EventFilters(MirrorModel):
    category: str = FILTER_ANY
    difficulty: str = ""
    search: str = ""
    location: str = ""
    sort_by: str = ""


class VenueFilters(MirrorModel):
    search: str = ""
    city: str = ""
    sport: str = FILTER_ANY
    capacity: str = ""
    price_range: str = ""
    verified: bool = False
    sort_by: str = "createdAt:desc"


# === ACTION RESULT ===

class ActionResult(BaseModel, Generic[T]):
    """
    Uniform outcome of every store action.
    Failures never raise past a store; they come back with success=False.
    """
    success: bool
    data: Optional[T] = None
    message: Optional[str] = None
    # Response superseded by a newer request for the same slice; state untouched
    stale: bool = False
    # Secondary envelope fields (pagination, stats, period, creator)
    meta: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None, **meta) -> "ActionResult":
        return cls(success=True, data=data, message=message, meta=meta)

    @classmethod
    def fail(cls, message: Optional[str], data: Any = None) -> "ActionResult":
        return cls(success=False, data=data, message=message)

    def __bool__(self) -> bool:
        return self.success
