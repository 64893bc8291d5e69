"""Unisocial - command-line client for the Unisocial campus network"""

from .models import (
    User,
    AuthResponse,
    CommentRecord,
    CommentNode,
    CreateCommentRequest,
    Post,
    LikeStatus,
    Club,
    ClubMembership,
    MembershipStatus,
    MembershipRole,
    Event,
    ChatRoom,
    ChatMessage,
    AdminAnalytics,
    CreateClubRequest,
    CreateEventRequest,
    EventUpdate,
    UserTrend,
    TrendingPost,
    ClubAnalytics,
)
from .comment_tree import build_forest, insert_reply, iter_forest, count_nodes, find_node
from .errors import UnisocialError, ApiError, UnauthorizedError, CyclicCommentGraphError
from .config import Settings, load_settings
from .client import UnisocialClient
from .comment_thread import CommentThread
from .poller import Poller
from .comment_view_formatter import CommentViewFormatter, ViewContext, format_relative_time
from .chat_view_formatter import ChatViewFormatter

__all__ = [
    "User",
    "AuthResponse",
    "CommentRecord",
    "CommentNode",
    "CreateCommentRequest",
    "Post",
    "LikeStatus",
    "Club",
    "ClubMembership",
    "MembershipStatus",
    "MembershipRole",
    "Event",
    "ChatRoom",
    "ChatMessage",
    "AdminAnalytics",
    "CreateClubRequest",
    "CreateEventRequest",
    "EventUpdate",
    "UserTrend",
    "TrendingPost",
    "ClubAnalytics",
    "build_forest",
    "insert_reply",
    "iter_forest",
    "count_nodes",
    "find_node",
    "UnisocialError",
    "ApiError",
    "UnauthorizedError",
    "CyclicCommentGraphError",
    "Settings",
    "load_settings",
    "UnisocialClient",
    "CommentThread",
    "Poller",
    "CommentViewFormatter",
    "ViewContext",
    "format_relative_time",
    "ChatViewFormatter",
]
