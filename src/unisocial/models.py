"""Pydantic models for Unisocial backend payloads

The backend speaks camelCase JSON. Every model maps those wire names onto
snake_case attributes through field aliases and accepts either spelling on
input, so records can be built from API responses and from test data alike.
"""

from datetime import date as date_type, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class MembershipStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class MembershipRole(str, Enum):
    MEMBER = "MEMBER"
    ADMIN = "ADMIN"


class User(BaseModel):
    """A campus user profile"""

    id: int = Field(alias="userId")
    reg_no: Optional[str] = Field(default=None, alias="regNo")
    email: Optional[str] = None
    name: Optional[str] = None
    role: UserRole = UserRole.USER
    bio: Optional[str] = None
    dp_url: Optional[str] = Field(default=None, alias="dpUrl")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    class Config:
        populate_by_name = True
        extra = "allow"


class AuthResponse(BaseModel):
    """Token and profile returned by login and register"""

    token: str
    user: Optional[User] = None

    class Config:
        extra = "allow"


# Comment models


class CommentRecord(BaseModel):
    """A comment exactly as the backend lists it: flat, with an optional parent id"""

    id: int = Field(alias="commentId")
    post_id: Optional[int] = Field(default=None, alias="postId")
    author_id: Optional[int] = Field(default=None, alias="authorId")
    author_name: Optional[str] = Field(default=None, alias="authorName")
    author_avatar_url: Optional[str] = Field(default=None, alias="authorDpUrl")
    content: str = ""
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    parent_id: Optional[int] = Field(default=None, alias="parentCommentId")

    @property
    def is_root(self) -> bool:
        """Whether this comment sits directly on the post"""
        return self.parent_id is None

    class Config:
        populate_by_name = True
        extra = "allow"


class CommentNode(CommentRecord):
    """A comment in tree form, carrying its nested replies"""

    replies: List["CommentNode"] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: CommentRecord) -> "CommentNode":
        """Copy a flat record into a node with no replies

        Extra fields the backend sent along are preserved.
        """
        data = record.model_dump()
        data["replies"] = []
        return cls(**data)

    @property
    def reply_count(self) -> int:
        """Number of direct replies"""
        return len(self.replies)


CommentNode.model_rebuild()


class CreateCommentRequest(BaseModel):
    """Body of POST /api/posts/{postId}/comments"""

    content: str
    parent_id: Optional[int] = Field(default=None, alias="parentCommentId")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    class Config:
        populate_by_name = True


# Posts and likes


class Post(BaseModel):
    """A feed post by a user or a club"""

    id: int = Field(alias="postId")
    content_text: str = Field(default="", alias="contentText")
    media_url: Optional[str] = Field(default=None, alias="mediaUrl")
    media_type: Optional[str] = Field(default=None, alias="mediaType")
    author_id: Optional[int] = Field(default=None, alias="authorId")
    author_name: Optional[str] = Field(default=None, alias="authorName")
    author_dp_url: Optional[str] = Field(default=None, alias="authorDpUrl")
    author_type: Optional[str] = Field(default=None, alias="authorType")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    like_count: int = Field(default=0, alias="likeCount")
    comment_count: int = Field(default=0, alias="commentCount")
    liked_by_current_user: Optional[bool] = Field(default=None, alias="likedByCurrentUser")

    class Config:
        populate_by_name = True
        extra = "allow"


class LikeStatus(BaseModel):
    post_id: int = Field(alias="postId")
    total_likes: int = Field(default=0, alias="totalLikes")
    liked_by_current_user: bool = Field(default=False, alias="likedByCurrentUser")

    class Config:
        populate_by_name = True
        extra = "allow"


# Clubs and memberships


class Club(BaseModel):
    """A student club; unverified clubs await admin approval"""

    id: int = Field(alias="clubId")
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = Field(default=None, alias="logoUrl")
    category: Optional[str] = None
    verified: Optional[bool] = None
    member_count: Optional[int] = Field(default=None, alias="memberCount")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    created_by_user_id: Optional[int] = Field(default=None, alias="createdByUserId")
    created_by_name: Optional[str] = Field(default=None, alias="createdByName")

    class Config:
        populate_by_name = True
        extra = "allow"


class ClubMembership(BaseModel):
    id: int = Field(alias="membershipId")
    club_id: int = Field(alias="clubId")
    club_name: Optional[str] = Field(default=None, alias="clubName")
    club_verified: Optional[bool] = Field(default=None, alias="clubVerified")
    user_id: int = Field(alias="userId")
    user_name: Optional[str] = Field(default=None, alias="userName")
    status: MembershipStatus = MembershipStatus.PENDING
    role: MembershipRole = MembershipRole.MEMBER
    joined_at: Optional[datetime] = Field(default=None, alias="joinedAt")

    class Config:
        populate_by_name = True
        extra = "allow"


class MembershipStatusInfo(BaseModel):
    """Answer of GET /api/clubs/{clubId}/membership-status"""

    is_member: bool = Field(default=False, alias="isMember")
    status: Optional[str] = None
    role: Optional[str] = None
    membership_id: Optional[int] = Field(default=None, alias="membershipId")

    class Config:
        populate_by_name = True
        extra = "allow"


# Events


class Event(BaseModel):
    """A club event on the campus calendar"""

    id: int = Field(alias="eventId")
    club_id: Optional[int] = Field(default=None, alias="clubId")
    club_name: Optional[str] = Field(default=None, alias="clubName")
    title: str
    description: Optional[str] = None
    banner_url: Optional[str] = Field(default=None, alias="bannerUrl")
    location: Optional[str] = None
    start_time: Optional[datetime] = Field(default=None, alias="startTime")
    end_time: Optional[datetime] = Field(default=None, alias="endTime")
    registration_link: Optional[str] = Field(default=None, alias="registrationLink")
    registration_deadline: Optional[datetime] = Field(default=None, alias="registrationDeadline")
    od_provided: bool = Field(default=False, alias="odProvided")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    class Config:
        populate_by_name = True
        extra = "allow"


class CreateEventRequest(BaseModel):
    """Body of POST /api/clubs/{clubId}/events"""

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1)
    start_time: datetime = Field(alias="startTime")
    end_time: datetime = Field(alias="endTime")
    banner_url: Optional[str] = Field(default=None, alias="bannerUrl")
    registration_link: Optional[str] = Field(default=None, alias="registrationLink")
    registration_deadline: Optional[datetime] = Field(default=None, alias="registrationDeadline")
    od_provided: bool = Field(default=False, alias="odProvided")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    class Config:
        populate_by_name = True


class EventUpdate(BaseModel):
    """Partial body of PUT /api/events/{eventId}; unset fields are left alone"""

    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: Optional[datetime] = Field(default=None, alias="startTime")
    end_time: Optional[datetime] = Field(default=None, alias="endTime")
    banner_url: Optional[str] = Field(default=None, alias="bannerUrl")
    registration_link: Optional[str] = Field(default=None, alias="registrationLink")
    registration_deadline: Optional[datetime] = Field(default=None, alias="registrationDeadline")
    od_provided: Optional[bool] = Field(default=None, alias="odProvided")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    class Config:
        populate_by_name = True


class CreateClubRequest(BaseModel):
    """Body of POST /api/clubs and PUT /api/clubs/{clubId}"""

    name: str = Field(min_length=1)
    description: Optional[str] = None
    logo_url: Optional[str] = Field(default=None, alias="logoUrl")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    class Config:
        populate_by_name = True


# Chat


class ChatMessage(BaseModel):
    id: int = Field(alias="messageId")
    chat_room_id: Optional[int] = Field(default=None, alias="chatRoomId")
    sender_id: Optional[int] = Field(default=None, alias="senderId")
    sender_name: Optional[str] = Field(default=None, alias="senderName")
    content: str = ""
    timestamp: Optional[datetime] = None
    read: bool = False

    class Config:
        populate_by_name = True
        extra = "allow"


class ChatRoom(BaseModel):
    """A private (two users) or group (club) chat room"""

    id: int = Field(alias="chatRoomId")
    type: str = "PRIVATE"
    club: Optional[Club] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    last_message: Optional[ChatMessage] = Field(default=None, alias="lastMessage")
    participants: List[User] = Field(default_factory=list)

    @property
    def is_group(self) -> bool:
        return self.type == "GROUP"

    @property
    def title(self) -> str:
        """Display name: the club for group rooms, participant names otherwise"""
        if self.club is not None:
            return self.club.name
        names = [p.name for p in self.participants if p.name]
        return ", ".join(names) if names else f"Room {self.id}"

    class Config:
        populate_by_name = True
        extra = "allow"


# Admin


class AdminAnalytics(BaseModel):
    total_users: int = Field(default=0, alias="totalUsers")
    total_clubs: int = Field(default=0, alias="totalClubs")
    verified_clubs: int = Field(default=0, alias="verifiedClubs")
    total_posts: int = Field(default=0, alias="totalPosts")
    total_events: int = Field(default=0, alias="totalEvents")
    total_comments: int = Field(default=0, alias="totalComments")
    total_likes: int = Field(default=0, alias="totalLikes")
    active_users: int = Field(default=0, alias="activeUsers")

    class Config:
        populate_by_name = True
        extra = "allow"


class UserTrend(BaseModel):
    """Registrations on one day"""

    date: date_type
    count: int = 0

    class Config:
        extra = "allow"


class TrendingPost(BaseModel):
    post_id: int = Field(alias="postId")
    author_name: Optional[str] = Field(default=None, alias="authorName")
    content_text: str = Field(default="", alias="contentText")
    like_count: int = Field(default=0, alias="likeCount")
    comment_count: int = Field(default=0, alias="commentCount")
    total_engagement: int = Field(default=0, alias="totalEngagement")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    class Config:
        populate_by_name = True
        extra = "allow"


class ClubAnalytics(BaseModel):
    """Per-club numbers shown to club admins and platform admins"""

    club_id: int = Field(alias="clubId")
    club_name: Optional[str] = Field(default=None, alias="clubName")
    member_count: int = Field(default=0, alias="memberCount")
    post_count: int = Field(default=0, alias="postCount")
    event_count: int = Field(default=0, alias="eventCount")
    engagement_score: float = Field(default=0.0, alias="engagementScore")

    class Config:
        populate_by_name = True
        extra = "allow"
