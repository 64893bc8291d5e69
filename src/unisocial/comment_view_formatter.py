"""Format comment forests into readable text views

Renders the nested forest produced by build_forest() for the terminal:
one block per comment, replies indented beneath their parent.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from .comment_tree import iter_forest
from .models import CommentNode


@dataclass
class ViewContext:
    """Context information for view formatting

    Attributes:
        post_id: Post the comments belong to
        post_author: Optional author name shown in the header
        now: Reference time for relative timestamps (default: current time)
    """
    post_id: int
    post_author: Optional[str] = None
    now: Optional[datetime] = None


def format_relative_time(dt: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Short relative time: "Just now", "5m ago", "3h ago", "2d ago" or a date

    Naive datetimes are taken to be UTC, which is how the backend stores them.
    """
    if dt is None:
        return "unknown time"

    dt = _as_utc(dt)
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    seconds = (now - dt).total_seconds()

    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)}h ago"
    if seconds < 7 * 86400:
        return f"{int(seconds // 86400)}d ago"
    return dt.strftime("%Y-%m-%d")


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class CommentViewFormatter:
    """Format a comment forest as indented text

    Example:
        >>> formatter = CommentViewFormatter()
        >>> view = formatter.format(build_forest(records), ViewContext(post_id=42))
        >>> print(view)
    """

    def __init__(self, indent: int = 4, show_ids: bool = True):
        """Initialize formatter

        Args:
            indent: Spaces of indentation per reply level
            show_ids: Whether to print comment ids (needed to pick a reply target)
        """
        self.indent = indent
        self.show_ids = show_ids

    def format(self, forest: List[CommentNode], context: ViewContext) -> str:
        if not forest:
            return self._format_empty_view(context)

        output_lines = self._format_header(context)
        output_lines.append("")

        root_count = 0
        reply_count = 0
        deepest = 0

        for depth, node in iter_forest(forest):
            if depth == 0:
                root_count += 1
                if root_count > 1:
                    output_lines.append("")
            else:
                reply_count += 1
            deepest = max(deepest, depth)
            output_lines.extend(self._format_comment(node, depth, context))

        output_lines.append("")
        output_lines.append("-" * 60)
        output_lines.extend(self._format_summary(root_count, reply_count, deepest))

        return "\n".join(output_lines)

    def _format_header(self, context: ViewContext) -> List[str]:
        lines = ["=" * 60]
        title = f"💬 COMMENTS ON POST #{context.post_id}"
        if context.post_author:
            title += f" by {context.post_author}"
        lines.append(title)
        lines.append("=" * 60)
        return lines

    def _format_comment(self, node: CommentNode, depth: int, context: ViewContext) -> List[str]:
        pad = " " * (self.indent * depth)
        marker = "↳ " if depth > 0 else ""
        author = node.author_name or "Unknown User"
        when = format_relative_time(node.created_at, context.now)
        ident = f" [#{node.id}]" if self.show_ids else ""

        lines = [f"{pad}{marker}👤 {author} · {when}{ident}"]
        body_pad = pad + (" " * len(marker))
        for text_line in (node.content or "").splitlines() or [""]:
            lines.append(f"{body_pad}   {text_line}")
        return lines

    def _format_summary(self, root_count: int, reply_count: int, deepest: int) -> List[str]:
        """Format summary statistics section"""
        lines = []
        lines.append("📊 THREAD SUMMARY:")
        lines.append(f"   • Comments: {root_count}")
        lines.append(f"   • Replies: {reply_count}")
        lines.append(f"   • Deepest reply level: {deepest}")
        return lines

    def _format_empty_view(self, context: ViewContext) -> str:
        lines = self._format_header(context)
        lines.append("")
        lines.append("No comments yet. Be the first to comment!")
        lines.append("")
        lines.append("=" * 60)
        return "\n".join(lines)
