"""Validation and normalization of inbound conversation turns.

Drops malformed turns, trims content, and keeps only the most recent
MAX_MESSAGES so the request sent to the model stays bounded.
"""

from collections.abc import Mapping
from typing import Any

import structlog

from backend.api.schemas import Message

logger = structlog.get_logger(__name__)

MAX_MESSAGES = 5
ALLOWED_ROLES = frozenset({"system", "user", "assistant"})


class MessagesNotArrayError(Exception):
    """The ``messages`` field was not a sequence."""

    def __init__(self, message: str = "messages must be an array"):
        super().__init__(message)


def _field(item: Any, name: str) -> Any:
    """Read a field from a decoded JSON object or a Message instance."""
    if isinstance(item, Mapping):
        return item.get(name)
    if isinstance(item, Message):
        return getattr(item, name)
    return None


def _clean(item: Any) -> Message | None:
    """Return a trimmed Message, or None if the turn must be dropped."""
    role = _field(item, "role")
    content = _field(item, "content")

    if not isinstance(role, str) or role not in ALLOWED_ROLES:
        return None
    if not isinstance(content, str):
        return None

    content = content.strip()
    if not content:
        return None

    return Message(role=role, content=content)


def sanitize(raw: Any) -> list[Message]:
    """Filter, trim and truncate a raw list of conversational turns.

    Args:
        raw: Untrusted ``messages`` value from the request body.

    Returns:
        At most MAX_MESSAGES well-formed messages, in original order. May be empty.

    Raises:
        MessagesNotArrayError: If ``raw`` is not a list or tuple.
    """
    if not isinstance(raw, (list, tuple)):
        logger.warning("sanitize.not_an_array", received=type(raw).__name__)
        raise MessagesNotArrayError()

    kept = [msg for msg in (_clean(item) for item in raw) if msg is not None]
    dropped = len(raw) - len(kept)
    truncated = max(len(kept) - MAX_MESSAGES, 0)

    if dropped or truncated:
        logger.info("sanitize.filtered", received=len(raw), dropped=dropped, truncated=truncated)

    return kept[-MAX_MESSAGES:]
