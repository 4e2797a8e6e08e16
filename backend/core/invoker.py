"""Completion invocation and reply-envelope mapping.

Turns a sanitized conversation into a ChatReply. An empty conversation is
answered without calling the model; an unusable model answer is replaced by
fallback text; a failed call is raised as InvocationError.
"""

import structlog

from backend.api.schemas import ChatReply, Message
from backend.core.llm_adapter import LLMAdapter, LLMError

logger = structlog.get_logger(__name__)

GREETING_REPLY = "Hi there! Tell me what's on your mind and I'll do my best to help."
FALLBACK_REPLY = "Sorry, I wasn't able to generate a response. Please try again."


class InvocationError(Exception):
    """The completion call failed; no reply can be produced."""

    def __init__(self, message: str, details: str = ""):
        super().__init__(message)
        self.message = message
        self.details = details


class CompletionInvoker:
    """Calls the completion service once per conversation."""

    def __init__(self, adapter: LLMAdapter):
        self.adapter = adapter

    async def invoke(self, conversation: list[Message]) -> ChatReply:
        """Produce a reply for a sanitized conversation.

        Args:
            conversation: Output of ``sanitize``; may be empty.

        Returns:
            ChatReply with non-empty text.

        Raises:
            InvocationError: If the completion call itself fails.
        """
        if not conversation:
            logger.info("chat.short_circuit", reason="empty_conversation")
            return ChatReply(reply=GREETING_REPLY)

        try:
            content = await self.adapter.complete(conversation)
        except LLMError as e:
            logger.error("chat.invoke_failed", error=str(e), exc_info=True)
            raise InvocationError("Failed to get AI response", details=str(e)) from e

        text = content.strip() if isinstance(content, str) else ""
        if not text:
            logger.warning("chat.empty_completion", content_type=type(content).__name__)
            return ChatReply(reply=FALLBACK_REPLY)

        logger.info("chat.completed", reply_len=len(text))
        return ChatReply(reply=text)
