"""Sample data shared by the test modules"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from unisocial import CommentRecord


NOW = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


def record(comment_id: int, parent_id: Optional[int] = None, content: str = "", **extra: Any) -> CommentRecord:
    """Create a CommentRecord with sensible defaults"""
    return CommentRecord(
        id=comment_id,
        parent_id=parent_id,
        content=content or f"Comment {comment_id}",
        post_id=extra.pop("post_id", 42),
        author_name=extra.pop("author_name", "Asha Rao"),
        created_at=extra.pop("created_at", NOW),
        **extra,
    )


def example_records() -> List[CommentRecord]:
    """A -> B -> D plus a second root C"""
    return [
        record(1, None, "A"),
        record(2, 1, "B"),
        record(3, None, "C"),
        record(4, 2, "D"),
    ]


def comment_payload(
    comment_id: int,
    parent_id: Optional[int] = None,
    content: str = "Nice post!",
    author: str = "Asha Rao",
    created_at: str = "2024-03-15T11:58:00Z",
) -> Dict[str, Any]:
    """A comment as the backend serialises it"""
    return {
        "commentId": comment_id,
        "postId": 42,
        "authorId": 7,
        "authorName": author,
        "content": content,
        "createdAt": created_at,
        "parentCommentId": parent_id,
    }


def user_payload(user_id: int = 7, name: str = "Asha Rao", role: str = "USER") -> Dict[str, Any]:
    return {
        "userId": user_id,
        "regNo": "21BCE1234",
        "email": "asha@campus.edu",
        "name": name,
        "role": role,
        "bio": "Robotics club",
        "createdAt": "2024-01-10T09:00:00Z",
    }


def chat_message_payload(message_id: int, content: str, sender_id: int = 7, sender: str = "Asha Rao") -> Dict[str, Any]:
    return {
        "messageId": message_id,
        "chatRoomId": 3,
        "senderId": sender_id,
        "senderName": sender,
        "content": content,
        "timestamp": "2024-03-15T11:59:30Z",
        "read": False,
    }
