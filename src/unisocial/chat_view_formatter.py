"""Format chat rooms and transcripts as text"""

from datetime import datetime
from typing import List, Optional

from .comment_view_formatter import format_relative_time
from .models import ChatMessage, ChatRoom


class ChatViewFormatter:
    """Render a chat room's messages oldest first, one line per message"""

    def __init__(self, current_user_id: Optional[int] = None):
        self.current_user_id = current_user_id

    def format(self, messages: List[ChatMessage], room: Optional[ChatRoom] = None, now: Optional[datetime] = None) -> str:
        lines = ["=" * 60]
        if room is not None:
            kind = "GROUP" if room.is_group else "PRIVATE"
            lines.append(f"💬 {room.title} ({kind} #{room.id})")
        else:
            lines.append("💬 CHAT")
        lines.append("=" * 60)

        if not messages:
            lines.append("No messages yet. Say hello!")
            return "\n".join(lines)

        # Backend order is chronological already
        for message in messages:
            sender = message.sender_name or "Unknown User"
            if self.current_user_id is not None and message.sender_id == self.current_user_id:
                sender = "You"
            when = format_relative_time(message.timestamp, now)
            lines.append(f"[{when}] {sender}: {message.content}")

        return "\n".join(lines)

    def format_room_line(self, room: ChatRoom, now: Optional[datetime] = None) -> str:
        """One-line room summary with the last message preview"""
        if room.last_message is None:
            return f"#{room.id} {room.title}"
        preview = room.last_message.content
        if len(preview) > 40:
            preview = preview[:37] + "..."
        when = format_relative_time(room.last_message.timestamp, now)
        return f"#{room.id} {room.title}: {preview} ({when})"
