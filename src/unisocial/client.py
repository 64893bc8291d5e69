"""HTTP client for the Unisocial REST backend

Thin typed wrapper over ``requests``: every backend endpoint the campus app
uses is one method returning pydantic models. The client never caches; each
call is a fresh request, which is what the polling refresh relies on.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import Settings
from .errors import ApiError, UnauthorizedError
from .models import (
    AdminAnalytics,
    AuthResponse,
    ChatMessage,
    ChatRoom,
    Club,
    ClubAnalytics,
    ClubMembership,
    CommentRecord,
    CreateClubRequest,
    CreateCommentRequest,
    CreateEventRequest,
    Event,
    EventUpdate,
    LikeStatus,
    MembershipStatusInfo,
    Post,
    TrendingPost,
    User,
    UserTrend,
)
from .utils import convert_dicts_to_models

logger = logging.getLogger(__name__)

# Transport failures worth retrying; HTTP error statuses are never retried
RETRYABLE_ERRORS = (requests.ConnectionError, requests.Timeout)


class UnisocialClient:
    """Typed client for the Unisocial backend

    Example:
        >>> client = UnisocialClient(load_settings())
        >>> client.login("student@campus.edu", "secret")
        >>> records = client.get_post_comments(42)
    """

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None) -> None:
        self.settings = settings or Settings()
        self.base_url = self.settings.api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers["Content-Type"] = "application/json"
        self.session.headers["Accept"] = "application/json"
        self._token: Optional[str] = None
        self.token = self.settings.token
        self._retrying = Retrying(
            stop=stop_after_attempt(max(1, self.settings.retry_attempts)),
            wait=wait_exponential(multiplier=self.settings.retry_backoff, min=0, max=10),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    @property
    def token(self) -> Optional[str]:
        return self._token

    @token.setter
    def token(self, value: Optional[str]) -> None:
        self._token = value
        if value:
            self.session.headers["Authorization"] = f"Bearer {value}"
        else:
            self.session.headers.pop("Authorization", None)

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    # Transport

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {path} params={params}")

        try:
            if method == "GET":
                response = self._retrying(self._send, method, url, params, json)
            else:
                response = self._send(method, url, params, json)
        except RETRYABLE_ERRORS as e:
            logger.error(f"{method} {path} failed: {e}")
            raise

        return self._handle_response(response, method, path)

    def _send(self, method: str, url: str, params: Optional[Dict[str, Any]], json: Optional[Dict[str, Any]]) -> requests.Response:
        return self.session.request(
            method,
            url,
            params=params,
            json=json,
            timeout=self.settings.request_timeout,
        )

    def _handle_response(self, response: requests.Response, method: str, path: str) -> Any:
        status = response.status_code

        if status == 401:
            logger.warning(f"Unauthorized response for {method} {path}, dropping token")
            self.token = None
            raise UnauthorizedError(status, self._error_message(response), path)

        if status >= 400:
            message = self._error_message(response)
            logger.warning(f"{method} {path} returned {status}: {message}")
            raise ApiError(status, message, path)

        if status == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return (response.text or response.reason or "").strip()[:200]

        if isinstance(body, dict):
            for key in ("message", "error", "detail"):
                if body.get(key):
                    return str(body[key])
        return str(body)[:200]

    def _get_list(self, path: str, model, params: Optional[Dict[str, Any]] = None) -> list:
        data = self._request("GET", path, params=params) or []
        return convert_dicts_to_models(data, model)

    def _get_wrapped_list(self, path: str, key: str, model, params: Optional[Dict[str, Any]] = None) -> list:
        """Like _get_list for endpoints that wrap the list in an object, e.g. {"total": n, "users": [...]}"""
        data = self._request("GET", path, params=params) or {}
        return convert_dicts_to_models(data.get(key) or [], model)

    # Authentication

    def test_connection(self) -> Any:
        return self._request("GET", "/api/auth/test")

    def login(self, email: str, password: str) -> AuthResponse:
        """Log in and keep the returned token for subsequent calls"""
        data = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        auth = AuthResponse.model_validate(data)
        self.token = auth.token
        logger.info(f"Logged in as {email}")
        return auth

    def register(self, reg_no: str, email: str, password: str, name: str) -> AuthResponse:
        payload = {"regNo": reg_no, "email": email, "password": password, "name": name}
        data = self._request("POST", "/api/auth/register", json=payload)
        auth = AuthResponse.model_validate(data)
        self.token = auth.token
        logger.info(f"Registered {email}")
        return auth

    # Users

    def get_current_user(self) -> User:
        return User.model_validate(self._request("GET", "/api/users/me"))

    def update_profile(
        self,
        name: Optional[str] = None,
        bio: Optional[str] = None,
        dp_url: Optional[str] = None,
    ) -> User:
        payload = {"name": name, "bio": bio, "dpUrl": dp_url}
        payload = {key: value for key, value in payload.items() if value is not None}
        return User.model_validate(self._request("PUT", "/api/users/me", json=payload))

    def get_user(self, user_id: int) -> User:
        return User.model_validate(self._request("GET", f"/api/users/{user_id}"))

    def search_users(self, query: str) -> List[User]:
        return self._get_list("/api/users/search", User, params={"query": query})

    def get_user_clubs(self, user_id: int) -> List[ClubMembership]:
        return self._get_list(f"/api/users/{user_id}/clubs", ClubMembership)

    def get_user_memberships(self, user_id: int) -> List[ClubMembership]:
        """Every membership of a user, pending and rejected ones included"""
        return self._get_list(f"/api/users/{user_id}/memberships", ClubMembership)

    # Posts

    def get_feed(self) -> List[Post]:
        return self._get_list("/api/posts/feed", Post)

    def get_user_posts(self, user_id: int) -> List[Post]:
        return self._get_list(f"/api/posts/user/{user_id}", Post)

    def create_post(self, text: str, media_url: Optional[str] = None, media_type: str = "TEXT") -> Post:
        payload = _post_payload(text, media_url, media_type)
        return Post.model_validate(self._request("POST", "/api/posts", json=payload))

    def delete_post(self, post_id: int) -> None:
        self._request("DELETE", f"/api/posts/{post_id}")

    # Comments

    def get_post_comments(self, post_id: int) -> List[CommentRecord]:
        """Flat comment list for a post, oldest first as the backend orders it"""
        return self._get_list(f"/api/posts/{post_id}/comments", CommentRecord)

    def add_comment(self, post_id: int, content: str, parent_id: Optional[int] = None) -> CommentRecord:
        """Submit a comment, or a reply when ``parent_id`` is given"""
        request = CreateCommentRequest(content=content, parent_id=parent_id)
        data = self._request("POST", f"/api/posts/{post_id}/comments", json=request.to_payload())
        return CommentRecord.model_validate(data)

    # Likes

    def get_post_likes(self, post_id: int) -> LikeStatus:
        return LikeStatus.model_validate(self._request("GET", f"/api/posts/{post_id}/likes"))

    def like_post(self, post_id: int) -> LikeStatus:
        return LikeStatus.model_validate(self._request("POST", f"/api/posts/{post_id}/like"))

    def unlike_post(self, post_id: int) -> LikeStatus:
        return LikeStatus.model_validate(self._request("DELETE", f"/api/posts/{post_id}/like"))

    # Chat

    def get_chat_rooms(self) -> List[ChatRoom]:
        return self._get_list("/api/chat/rooms", ChatRoom)

    def get_chat_messages(self, room_id: int) -> List[ChatMessage]:
        return self._get_list(f"/api/chat/{room_id}/messages", ChatMessage)

    def send_message(self, room_id: int, content: str) -> ChatMessage:
        data = self._request("POST", f"/api/chat/{room_id}/message", json={"content": content})
        return ChatMessage.model_validate(data)

    def start_private_chat(self, user_id: int) -> ChatRoom:
        return ChatRoom.model_validate(self._request("POST", f"/api/chat/private/{user_id}"))

    def start_group_chat(self, club_id: int) -> ChatRoom:
        return ChatRoom.model_validate(self._request("POST", f"/api/chat/group/{club_id}"))

    # Clubs and memberships

    def get_clubs(self, verified: Optional[bool] = None) -> List[Club]:
        params = {} if verified is None else {"verified": str(verified).lower()}
        return self._get_list("/api/clubs", Club, params=params)

    def get_all_clubs(self) -> List[Club]:
        """Verified and unverified clubs (admin view)"""
        return self._get_list("/api/clubs", Club, params={"verified": "all"})

    def get_club(self, club_id: int) -> Club:
        return Club.model_validate(self._request("GET", f"/api/clubs/{club_id}"))

    def create_club(self, name: str, description: Optional[str] = None, logo_url: Optional[str] = None) -> Club:
        """Create a club; it stays unverified until an admin approves it"""
        request = CreateClubRequest(name=name, description=description, logo_url=logo_url)
        return Club.model_validate(self._request("POST", "/api/clubs", json=request.to_payload()))

    def update_club(
        self,
        club_id: int,
        name: str,
        description: Optional[str] = None,
        logo_url: Optional[str] = None,
    ) -> Club:
        request = CreateClubRequest(name=name, description=description, logo_url=logo_url)
        return Club.model_validate(self._request("PUT", f"/api/clubs/{club_id}", json=request.to_payload()))

    def delete_club(self, club_id: int) -> None:
        self._request("DELETE", f"/api/clubs/{club_id}")

    def verify_club(self, club_id: int) -> None:
        self._request("PUT", f"/api/clubs/{club_id}/verify")

    def get_club_posts(self, club_id: int) -> List[Post]:
        return self._get_list(f"/api/clubs/{club_id}/posts", Post)

    def create_club_post(
        self,
        club_id: int,
        text: str,
        media_url: Optional[str] = None,
        media_type: str = "TEXT",
    ) -> Post:
        """Post to the feed on behalf of a club (club admins only)"""
        payload = _post_payload(text, media_url, media_type)
        return Post.model_validate(self._request("POST", f"/api/clubs/{club_id}/posts", json=payload))

    def join_club(self, club_id: int) -> None:
        self._request("POST", f"/api/clubs/{club_id}/join")

    def get_membership_status(self, club_id: int) -> MembershipStatusInfo:
        data = self._request("GET", f"/api/clubs/{club_id}/membership-status")
        return MembershipStatusInfo.model_validate(data or {})

    def get_club_members(self, club_id: int) -> List[ClubMembership]:
        return self._get_list(f"/api/clubs/memberships/club/{club_id}/members", ClubMembership)

    def get_pending_memberships(self, club_id: int) -> List[ClubMembership]:
        return self._get_list(f"/api/clubs/memberships/club/{club_id}/pending", ClubMembership)

    def approve_membership(self, membership_id: int) -> Optional[ClubMembership]:
        return self._update_membership(membership_id, "approve")

    def reject_membership(self, membership_id: int) -> Optional[ClubMembership]:
        return self._update_membership(membership_id, "reject")

    def promote_member(self, membership_id: int) -> Optional[ClubMembership]:
        """Make a member a club admin"""
        return self._update_membership(membership_id, "promote")

    def demote_member(self, membership_id: int) -> Optional[ClubMembership]:
        return self._update_membership(membership_id, "demote")

    def remove_member(self, club_id: int, user_id: int) -> None:
        self._request("DELETE", f"/api/clubs/memberships/club/{club_id}/members/{user_id}")

    def _update_membership(self, membership_id: int, action: str) -> Optional[ClubMembership]:
        data = self._request("PUT", f"/api/clubs/memberships/{membership_id}/{action}")
        return ClubMembership.model_validate(data) if data else None

    # Events

    def get_events(self, year: Optional[int] = None, month: Optional[int] = None) -> List[Event]:
        """Calendar events, for one month when both ``year`` and ``month`` are given

        Raises:
            ValueError: if only one of ``year`` and ``month`` is given
        """
        if (year is None) != (month is None):
            raise ValueError("year and month must be given together")
        params = {"year": year, "month": month} if year is not None else None
        return self._get_list("/api/events", Event, params=params)

    def get_upcoming_events(self) -> List[Event]:
        return self._get_list("/api/events/upcoming", Event)

    def get_club_events(self, club_id: int) -> List[Event]:
        return self._get_list(f"/api/clubs/{club_id}/events", Event)

    def get_event(self, event_id: int) -> Event:
        return Event.model_validate(self._request("GET", f"/api/events/{event_id}"))

    def create_event(self, club_id: int, request: CreateEventRequest) -> Event:
        data = self._request("POST", f"/api/clubs/{club_id}/events", json=request.to_payload())
        return Event.model_validate(data)

    def update_event(self, event_id: int, update: EventUpdate) -> Event:
        data = self._request("PUT", f"/api/events/{event_id}", json=update.to_payload())
        return Event.model_validate(data)

    def delete_event(self, event_id: int) -> None:
        self._request("DELETE", f"/api/events/{event_id}")

    # Recommendations

    def get_recommended_posts(self) -> List[Post]:
        return self._get_list("/api/recommendations/posts", Post)

    def get_recommended_events(self) -> List[Event]:
        return self._get_list("/api/recommendations/events", Event)

    def get_recommended_clubs(self) -> List[Club]:
        return self._get_list("/api/recommendations/clubs", Club)

    # Admin

    def get_admin_analytics(self) -> AdminAnalytics:
        return AdminAnalytics.model_validate(self._request("GET", "/api/admin/analytics"))

    def approve_club(self, club_id: int) -> None:
        self._request("PUT", f"/api/admin/clubs/{club_id}/approve")

    def reject_club(self, club_id: int) -> None:
        self._request("PUT", f"/api/admin/clubs/{club_id}/reject")

    def get_all_users(self) -> List[User]:
        return self._get_wrapped_list("/api/admin/users", "users", User)

    def delete_user(self, user_id: int) -> None:
        self._request("DELETE", f"/api/admin/users/{user_id}")

    def get_user_trends(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> List[UserTrend]:
        """Daily registration counts, optionally bounded by ISO dates"""
        params = {}
        if start_date is not None:
            params["startDate"] = start_date.isoformat()
        if end_date is not None:
            params["endDate"] = end_date.isoformat()
        return self._get_wrapped_list("/api/analytics/users/trends", "trends", UserTrend, params=params)

    def get_trending_posts(self, limit: Optional[int] = None) -> List[TrendingPost]:
        params = {"limit": limit} if limit else {}
        return self._get_wrapped_list("/api/analytics/posts/trending", "posts", TrendingPost, params=params)

    def get_club_analytics(self, club_id: int) -> ClubAnalytics:
        return ClubAnalytics.model_validate(self._request("GET", f"/api/analytics/clubs/{club_id}"))


def _post_payload(text: str, media_url: Optional[str], media_type: str) -> Dict[str, Any]:
    payload = {"contentText": text, "mediaType": media_type}
    if media_url:
        payload["mediaUrl"] = media_url
    return payload
