"""Reconstruct threaded comment trees from flat comment lists

The backend lists a post's comments flat, each reply pointing at its parent
through ``parent_id``. These helpers turn that list into a forest of root
comments with nested replies, and patch the forest when a new comment is
submitted without refetching everything.

Forests are treated as values: ``insert_reply`` never mutates the forest it
is given, so a caller still holding the old list keeps seeing the old tree.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import CyclicCommentGraphError
from .models import CommentNode, CommentRecord

_VISITING = 1
_DONE = 2


def build_forest(records: Iterable[CommentRecord]) -> List[CommentNode]:
    """Build the comment forest for a flat list of comment records

    Two passes over the input: the first indexes a fresh node per comment id,
    the second attaches each node to its parent (or to the root list).

    Handles:
    - Roots and siblings kept in input order (no sorting by timestamp)
    - Orphans (parent id not in the list) dropped from the forest
    - Duplicate ids: the first record wins, later ones are ignored
    - Input records are never mutated

    Args:
        records: Flat comment records, in the order the backend returned them

    Returns:
        Root comment nodes, each with its replies nested beneath it

    Raises:
        CyclicCommentGraphError: if parent references loop back on themselves

    Example:
        >>> forest = build_forest([
        ...     CommentRecord(id=1, content="A"),
        ...     CommentRecord(id=2, content="B", parent_id=1),
        ... ])
        >>> forest[0].replies[0].id
        2
    """
    nodes: Dict[int, CommentNode] = {}
    ordered: List[CommentRecord] = []

    for record in records:
        if record.id in nodes:
            continue
        nodes[record.id] = CommentNode.from_record(record)
        ordered.append(record)

    _check_for_cycles({record.id: record.parent_id for record in ordered})

    roots: List[CommentNode] = []
    for record in ordered:
        node = nodes[record.id]
        if record.parent_id is None:
            roots.append(node)
            continue

        parent = nodes.get(record.parent_id)
        if parent is not None:
            parent.replies.append(node)

    return roots


def insert_reply(
    forest: Sequence[CommentNode],
    parent_id: Optional[int],
    new_reply: CommentRecord,
) -> List[CommentNode]:
    """Return a new forest with ``new_reply`` attached under ``parent_id``

    Replies are appended at the end of the parent's replies, so sibling order
    stays oldest first. A comment without a parent (``parent_id`` is None) is
    placed at the front of the root list instead, newest first.

    Only the ancestors on the path to the parent are copied; every other node
    in the returned forest is the same object as in ``forest``. If no node has
    id ``parent_id`` the reply is dropped and ``forest`` is returned as is.

    Args:
        forest: Existing forest from build_forest() or a previous insert
        parent_id: Id of the comment being replied to, or None for a root comment
        new_reply: The record the backend returned for the new comment

    Returns:
        The updated forest
    """
    node = CommentNode.from_record(new_reply)

    if parent_id is None:
        return [node, *forest]

    path = _find_path(forest, parent_id)
    if path is None:
        return forest if isinstance(forest, list) else list(forest)

    # Walk down recording each level, then rebuild bottom-up
    chain: List[Tuple[Sequence[CommentNode], int]] = []
    level: Sequence[CommentNode] = forest
    for index in path:
        chain.append((level, index))
        level = level[index].replies

    level, index = chain.pop()
    target = level[index]
    patched = target.model_copy(update={"replies": [*target.replies, node]})
    updated = _replace_at(level, index, patched)

    while chain:
        level, index = chain.pop()
        patched = level[index].model_copy(update={"replies": updated})
        updated = _replace_at(level, index, patched)

    return updated


def iter_forest(forest: Sequence[CommentNode]) -> Iterator[Tuple[int, CommentNode]]:
    """Yield ``(depth, node)`` for every node, depth-first in display order

    Roots have depth 0. Iterative, so arbitrarily deep threads are fine.
    """
    stack = [(0, node) for node in reversed(forest)]
    while stack:
        depth, node = stack.pop()
        yield depth, node
        stack.extend((depth + 1, reply) for reply in reversed(node.replies))


def count_nodes(forest: Sequence[CommentNode]) -> int:
    """Total number of comments in the forest, replies included"""
    return sum(1 for _ in iter_forest(forest))


def find_node(forest: Sequence[CommentNode], comment_id: int) -> Optional[CommentNode]:
    for _, node in iter_forest(forest):
        if node.id == comment_id:
            return node
    return None


def _find_path(forest: Sequence[CommentNode], comment_id: int) -> Optional[List[int]]:
    """Sibling indexes leading from the root list to ``comment_id``, or None"""
    # entries[i] = (entry index of the parent, index among its siblings)
    entries: List[Tuple[Optional[int], int]] = []
    stack = [(node, None, index) for index, node in reversed(list(enumerate(forest)))]

    while stack:
        node, parent_entry, index = stack.pop()
        entries.append((parent_entry, index))
        entry: Optional[int] = len(entries) - 1

        if node.id == comment_id:
            path = []
            while entry is not None:
                parent_entry, index = entries[entry]
                path.append(index)
                entry = parent_entry
            return path[::-1]

        stack.extend(
            (reply, entry, reply_index)
            for reply_index, reply in reversed(list(enumerate(node.replies)))
        )

    return None


def _replace_at(
    nodes: Sequence[CommentNode], index: int, node: CommentNode
) -> List[CommentNode]:
    return [*nodes[:index], node, *nodes[index + 1:]]


def _check_for_cycles(parents: Dict[int, Optional[int]]) -> None:
    """Raise if following parent ids from any comment revisits that walk

    A walk ends at a root, at a parent id outside the list (orphan), or at a
    comment already known to be cycle-free. Linear in the number of comments.
    """
    state: Dict[int, int] = {}

    for start in parents:
        walk: List[int] = []
        current: Optional[int] = start

        while current is not None and current in parents and state.get(current) != _DONE:
            if state.get(current) == _VISITING:
                raise CyclicCommentGraphError(walk[walk.index(current):])
            state[current] = _VISITING
            walk.append(current)
            current = parents[current]

        for comment_id in walk:
            state[comment_id] = _DONE
