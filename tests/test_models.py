"""Test Pydantic models"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from unisocial import (
    ChatRoom,
    ClubAnalytics,
    ClubMembership,
    CommentNode,
    CommentRecord,
    CreateClubRequest,
    CreateCommentRequest,
    CreateEventRequest,
    EventUpdate,
    MembershipStatus,
    TrendingPost,
    User,
    UserTrend,
)
from tests.fixtures import comment_payload, user_payload


class TestCommentRecord:
    """Test CommentRecord parsing"""

    def test_from_backend_payload(self):
        """camelCase wire names map onto snake_case attributes"""
        record = CommentRecord.model_validate(comment_payload(5, parent_id=2, content="Hi"))

        assert record.id == 5
        assert record.parent_id == 2
        assert record.post_id == 42
        assert record.author_name == "Asha Rao"
        assert record.content == "Hi"
        assert record.created_at == datetime(2024, 3, 15, 11, 58, tzinfo=timezone.utc)

    def test_snake_case_construction(self):
        record = CommentRecord(id=1, content="Hello", parent_id=None)
        assert record.id == 1
        assert record.is_root

    def test_reply_is_not_root(self):
        record = CommentRecord.model_validate(comment_payload(5, parent_id=2))
        assert not record.is_root

    def test_avatar_alias(self):
        payload = comment_payload(1)
        payload["authorDpUrl"] = "https://cdn.campus.edu/dp/7.png"

        record = CommentRecord.model_validate(payload)
        assert record.author_avatar_url == "https://cdn.campus.edu/dp/7.png"

    def test_missing_id_rejected(self):
        with pytest.raises(ValidationError):
            CommentRecord.model_validate({"content": "no id"})

    def test_extra_fields_kept(self):
        payload = comment_payload(1)
        payload["edited"] = True

        record = CommentRecord.model_validate(payload)
        assert record.model_extra == {"edited": True}


class TestCommentNode:
    """Test tree nodes"""

    def test_from_record_starts_empty(self):
        record = CommentRecord.model_validate(comment_payload(3, parent_id=1))
        node = CommentNode.from_record(record)

        assert node.id == 3
        assert node.parent_id == 1
        assert node.replies == []
        assert node.reply_count == 0

    def test_from_record_keeps_extra(self):
        payload = comment_payload(1)
        payload["edited"] = True
        node = CommentNode.from_record(CommentRecord.model_validate(payload))

        assert node.model_extra["edited"] is True

    def test_json_dump_uses_wire_names(self):
        node = CommentNode.from_record(CommentRecord(id=1, content="A"))
        data = node.model_dump(mode="json", by_alias=True)

        assert data["commentId"] == 1
        assert data["parentCommentId"] is None
        assert data["replies"] == []


class TestCreateCommentRequest:
    def test_root_payload_omits_parent(self):
        assert CreateCommentRequest(content="Hi").to_payload() == {"content": "Hi"}

    def test_reply_payload(self):
        payload = CreateCommentRequest(content="Hi", parent_id=9).to_payload()
        assert payload == {"content": "Hi", "parentCommentId": 9}


class TestOtherModels:
    def test_user(self):
        user = User.model_validate(user_payload(role="ADMIN"))

        assert user.id == 7
        assert user.reg_no == "21BCE1234"
        assert user.is_admin

    def test_membership_status_enum(self):
        membership = ClubMembership.model_validate({
            "membershipId": 1,
            "clubId": 2,
            "userId": 7,
            "status": "APPROVED",
            "role": "MEMBER",
        })
        assert membership.status == MembershipStatus.APPROVED

    def test_chat_room_title_from_club(self):
        room = ChatRoom.model_validate({
            "chatRoomId": 3,
            "type": "GROUP",
            "club": {"clubId": 2, "name": "Robotics", "verified": True},
        })
        assert room.is_group
        assert room.title == "Robotics"

    def test_chat_room_title_from_participants(self):
        room = ChatRoom.model_validate({
            "chatRoomId": 4,
            "type": "PRIVATE",
            "participants": [user_payload(7, "Asha Rao"), user_payload(8, "Vikram S")],
        })
        assert not room.is_group
        assert room.title == "Asha Rao, Vikram S"

    def test_chat_room_title_fallback(self):
        room = ChatRoom.model_validate({"chatRoomId": 5})
        assert room.title == "Room 5"


class TestRequestModels:
    def test_event_payload_uses_wire_names(self):
        request = CreateEventRequest(
            title="Demo day",
            description="Show your builds",
            location="Hall A",
            start_time=datetime(2024, 4, 1, 10, 0, tzinfo=timezone.utc),
            end_time=datetime(2024, 4, 1, 16, 0, tzinfo=timezone.utc),
            od_provided=True,
        )

        payload = request.to_payload()

        assert payload["startTime"] == "2024-04-01T10:00:00Z"
        assert payload["odProvided"] is True
        assert "registrationLink" not in payload

    def test_event_title_required(self):
        with pytest.raises(ValidationError):
            CreateEventRequest(
                title="",
                description="d",
                location="l",
                start_time=datetime(2024, 4, 1, tzinfo=timezone.utc),
                end_time=datetime(2024, 4, 1, tzinfo=timezone.utc),
            )

    def test_event_update_sends_only_set_fields(self):
        assert EventUpdate(location="Hall B", od_provided=False).to_payload() == {
            "location": "Hall B",
            "odProvided": False,
        }
        assert EventUpdate().to_payload() == {}

    def test_club_payload(self):
        assert CreateClubRequest(name="Chess", logo_url="https://cdn/c.png").to_payload() == {
            "name": "Chess",
            "logoUrl": "https://cdn/c.png",
        }

    def test_blank_club_name_rejected(self):
        with pytest.raises(ValidationError):
            CreateClubRequest(name="")


class TestAnalyticsModels:
    def test_user_trend(self):
        trend = UserTrend.model_validate({"date": "2024-03-01", "count": 4})

        assert trend.date.isoformat() == "2024-03-01"
        assert trend.count == 4

    def test_trending_post(self):
        post = TrendingPost.model_validate({
            "postId": 11,
            "authorName": "Asha Rao",
            "contentText": "Hackathon!",
            "likeCount": 7,
            "commentCount": 3,
            "totalEngagement": 10,
        })

        assert post.post_id == 11
        assert post.total_engagement == 10

    def test_club_analytics_defaults(self):
        analytics = ClubAnalytics.model_validate({"clubId": 3, "clubName": "Robotics"})

        assert analytics.member_count == 0
        assert analytics.engagement_score == 0.0
