"""Live comment thread for a single post"""

import logging
from typing import List, Optional

from .client import UnisocialClient
from .comment_tree import build_forest, count_nodes, insert_reply
from .models import CommentNode, CommentRecord

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 1000


class CommentThread:
    """Keeps the comment forest of one post in sync with the backend

    ``load()`` rebuilds the forest from a fresh flat list and is what each
    poll tick calls. ``submit()`` posts a comment and patches the forest in
    place of a full reload: new root comments go first, replies go last
    under their parent.

    Example:
        >>> thread = CommentThread(client, post_id=42)
        >>> thread.load()
        >>> thread.submit("Same here!", reply_to=7)
    """

    def __init__(self, client: UnisocialClient, post_id: int):
        self.client = client
        self.post_id = post_id
        self._forest: List[CommentNode] = []
        self.loaded = False

    @property
    def forest(self) -> List[CommentNode]:
        return self._forest

    @property
    def comment_count(self) -> int:
        return count_nodes(self._forest)

    def load(self) -> List[CommentNode]:
        records = self.client.get_post_comments(self.post_id)
        forest = build_forest(records)

        shown = count_nodes(forest)
        if shown < len(records):
            logger.debug(
                f"Post {self.post_id}: {len(records) - shown} of {len(records)} comments "
                f"not attached (missing parent or duplicate id)"
            )

        self._forest = forest
        self.loaded = True
        return forest

    def submit(self, content: str, reply_to: Optional[int] = None) -> CommentRecord:
        """Post a comment (or a reply to ``reply_to``) and add it to the forest

        Raises:
            ValueError: if the content is blank or longer than the backend accepts
        """
        text = content.strip()
        if not text:
            raise ValueError("Comment content is required")
        if len(text) > MAX_COMMENT_LENGTH:
            raise ValueError(f"Comment content must not exceed {MAX_COMMENT_LENGTH} characters")

        record = self.client.add_comment(self.post_id, text, parent_id=reply_to)

        updated = insert_reply(self._forest, reply_to, record)
        if updated is self._forest and reply_to is not None:
            logger.debug(f"Post {self.post_id}: parent comment {reply_to} not in view, reply shows after reload")
        self._forest = updated
        return record
