"""Tests for completion invocation and reply mapping."""

import asyncio

import pytest

from backend.api.schemas import Message
from backend.core.invoker import (
    FALLBACK_REPLY,
    GREETING_REPLY,
    CompletionInvoker,
    InvocationError,
)
from backend.core.llm_adapter import LLMError


@pytest.fixture
def conversation() -> list[Message]:
    return [Message(role="user", content="hi")]


def _invoke(invoker, conversation):
    return asyncio.run(invoker.invoke(conversation))


class TestShortCircuit:

    def test_empty_conversation_skips_call(self, fake_adapter):
        reply = _invoke(CompletionInvoker(fake_adapter), [])
        assert reply.reply == GREETING_REPLY
        fake_adapter.complete.assert_not_called()


class TestSuccess:

    def test_returns_trimmed_text(self, fake_adapter, conversation):
        fake_adapter.complete.return_value = "  Hello!\n"
        reply = _invoke(CompletionInvoker(fake_adapter), conversation)
        assert reply.reply == "Hello!"
        fake_adapter.complete.assert_awaited_once_with(conversation)

    @pytest.mark.parametrize("content", ["", "   ", None, ["chunk"], {"text": "x"}])
    def test_unusable_content_uses_fallback(self, fake_adapter, conversation, content):
        fake_adapter.complete.return_value = content
        reply = _invoke(CompletionInvoker(fake_adapter), conversation)
        assert reply.reply == FALLBACK_REPLY


class TestFailure:

    def test_llm_error_raises_invocation_error(self, fake_adapter, conversation):
        fake_adapter.complete.side_effect = LLMError("Groq API call failed: boom")

        with pytest.raises(InvocationError) as exc:
            _invoke(CompletionInvoker(fake_adapter), conversation)

        assert exc.value.message == "Failed to get AI response"
        assert "boom" in exc.value.details
        fake_adapter.complete.assert_awaited_once()
