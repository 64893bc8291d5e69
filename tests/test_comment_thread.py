"""Tests for CommentThread: load, submit and incremental forest updates"""

from unittest.mock import MagicMock

import pytest

from unisocial import CommentThread, UnisocialClient
from tests.fixtures import example_records, record


@pytest.fixture
def client():
    client = MagicMock(spec=UnisocialClient)
    client.get_post_comments.return_value = example_records()
    return client


@pytest.fixture
def thread(client):
    return CommentThread(client, post_id=42)


class TestLoad:
    def test_load_builds_forest(self, thread, client):
        forest = thread.load()

        client.get_post_comments.assert_called_once_with(42)
        assert [n.id for n in forest] == [1, 3]
        assert thread.forest is forest
        assert thread.comment_count == 4
        assert thread.loaded

    def test_reload_replaces_forest(self, thread, client):
        thread.load()
        client.get_post_comments.return_value = [record(10)]

        thread.load()

        assert [n.id for n in thread.forest] == [10]

    def test_load_with_orphans(self, thread, client):
        client.get_post_comments.return_value = [record(1), record(2, 50)]

        thread.load()

        assert thread.comment_count == 1

    def test_empty_before_load(self, thread):
        assert thread.forest == []
        assert thread.comment_count == 0
        assert not thread.loaded


class TestSubmit:
    def test_reply_appended_under_parent(self, thread, client):
        thread.load()
        client.add_comment.return_value = record(5, 2, "E")

        created = thread.submit("  E  ", reply_to=2)

        client.add_comment.assert_called_once_with(42, "E", parent_id=2)
        assert created.id == 5
        b = thread.forest[0].replies[0]
        assert [n.id for n in b.replies] == [4, 5]

    def test_root_comment_prepended(self, thread, client):
        thread.load()
        client.add_comment.return_value = record(6, None, "F")

        thread.submit("F")

        client.add_comment.assert_called_once_with(42, "F", parent_id=None)
        assert [n.id for n in thread.forest] == [6, 1, 3]

    def test_previous_forest_left_intact(self, thread, client):
        before = thread.load()
        client.add_comment.return_value = record(5, 2, "E")

        thread.submit("E", reply_to=2)

        assert thread.forest is not before
        assert [n.id for n in before[0].replies[0].replies] == [4]

    def test_reply_to_unknown_parent_dropped(self, thread, client):
        before = thread.load()
        client.add_comment.return_value = record(7, 99)

        thread.submit("Hello", reply_to=99)

        assert thread.forest is before
        assert thread.comment_count == 4

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    def test_blank_content_rejected(self, thread, client, content):
        with pytest.raises(ValueError, match="required"):
            thread.submit(content)

        client.add_comment.assert_not_called()

    def test_too_long_rejected(self, thread, client):
        with pytest.raises(ValueError, match="1000"):
            thread.submit("x" * 1001)

        client.add_comment.assert_not_called()
