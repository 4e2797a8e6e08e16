"""Unit tests for Pydantic API schemas."""

import pytest
from pydantic import ValidationError

from backend.api.schemas import ChatReply, ChatRequest, ErrorResponse, FeedbackRequest, Message


class TestMessage:

    def test_valid_message(self):
        msg = Message(role="assistant", content="hello")
        assert msg.role == "assistant"

    def test_invalid_role_rejected(self):
        with pytest.raises(ValidationError):
            Message(role="tool", content="hello")

    def test_empty_content_rejected(self):
        with pytest.raises(ValidationError):
            Message(role="user", content="")


class TestChatRequest:

    def test_accepts_any_messages_value(self):
        assert ChatRequest(messages="not an array").messages == "not an array"

    def test_messages_default_none(self):
        assert ChatRequest().messages is None


class TestChatReply:

    def test_empty_reply_rejected(self):
        with pytest.raises(ValidationError):
            ChatReply(reply="")

    def test_serialization(self):
        assert ChatReply(reply="hi").model_dump() == {"reply": "hi"}


class TestErrorResponse:

    def test_details_optional(self):
        assert ErrorResponse(error="x").model_dump(exclude_none=True) == {"error": "x"}


class TestFeedbackRequest:

    def test_camel_case_aliases(self):
        req = FeedbackRequest.model_validate({
            "feedback": "great", "userEmail": "a@b.co", "isPro": True,
        })
        assert req.user_email == "a@b.co"
        assert req.is_pro is True

    def test_all_optional(self):
        req = FeedbackRequest()
        assert req.feedback is None
        assert req.timestamp is None
