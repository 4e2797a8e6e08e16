"""LLM adapter around the Groq chat completions API.

Single attempt per call: the client is built with retries disabled and no
fallback provider, so a failure is reported as-is to the caller.
"""

import os

import structlog
from httpx import HTTPStatusError
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_groq import ChatGroq

from backend.api.schemas import Message

logger = structlog.get_logger(__name__)

DEFAULT_MODEL = "llama-3.3-70b-versatile"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1024


class LLMError(Exception):
    """The completion call could not complete."""
    pass


def to_lc_messages(messages: list[Message]) -> list[BaseMessage]:
    """Convert sanitized messages to LangChain message objects."""
    converted: list[BaseMessage] = []
    for msg in messages:
        if msg.role == "system":
            converted.append(SystemMessage(content=msg.content))
        elif msg.role == "assistant":
            converted.append(AIMessage(content=msg.content))
        else:
            converted.append(HumanMessage(content=msg.content))
    return converted


class LLMAdapter:
    """Wraps a Groq chat model with static model parameters."""

    def __init__(self, chat_model: BaseChatModel | None = None):
        self.groq_key = os.environ.get("GROQ_API_KEY", "")
        self.model_name = os.environ.get("GROQ_MODEL", DEFAULT_MODEL)

        self.temperature = float(os.environ.get("LLM_TEMPERATURE", str(DEFAULT_TEMPERATURE)))
        self.max_tokens = int(os.environ.get("LLM_MAX_TOKENS", str(DEFAULT_MAX_TOKENS)))
        timeout = os.environ.get("LLM_TIMEOUT")
        self.timeout = float(timeout) if timeout else None

        self._chat_model = chat_model

    @property
    def chat_model(self) -> BaseChatModel:
        """Groq chat model, built on first use.

        The Groq client refuses to construct without a key, so a missing key
        surfaces on the first call instead of at startup.
        """
        if self._chat_model is None:
            self._chat_model = ChatGroq(
                api_key=self.groq_key or None,
                model=self.model_name,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._chat_model

    def is_healthy(self) -> bool:
        """Check whether a Groq API key is configured."""
        return bool(self.groq_key)

    async def complete(self, messages: list[Message]) -> object:
        """Send the conversation and return the first candidate's content.

        Args:
            messages: Sanitized, non-empty conversation.

        Returns:
            The raw ``content`` of the model response. Usually a string, but
            callers must not assume so.

        Raises:
            LLMError: On any transport, service, or response-shape failure.
        """
        logger.debug("llm.invoke", provider="groq", model=self.model_name, messages=len(messages))

        try:
            # Constructing the model can fail too (e.g. missing key)
            response = await self.chat_model.ainvoke(to_lc_messages(messages))
        except HTTPStatusError as e:
            logger.debug("llm.http_error", status=e.response.status_code)
            raise LLMError(f"Groq API returned {e.response.status_code}: {e}") from e
        except Exception as e:
            logger.debug("llm.failed", error=str(e))
            raise LLMError(f"Groq API call failed: {e}") from e

        if not isinstance(response, BaseMessage):
            logger.debug("llm.malformed_response", received=type(response).__name__)
            raise LLMError(f"Unexpected response type from Groq: {type(response).__name__}")

        return response.content
