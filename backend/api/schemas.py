"""Pydantic models for the API layer.

Defines request/response schemas for all endpoints.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class Message(BaseModel):
    """Single sanitized conversational turn."""
    role: Role
    content: str = Field(..., min_length=1)


class ChatRequest(BaseModel):
    """Incoming chat payload.

    ``messages`` is left untyped on purpose: shape checks belong to the
    sanitizer so a non-array yields the 400 contract instead of a 422.
    """
    messages: Any = None


class ChatReply(BaseModel):
    """Outgoing chat reply. ``reply`` is never empty."""
    reply: str = Field(..., min_length=1)


class ErrorResponse(BaseModel):
    """Error envelope returned on 400/500 chat outcomes."""
    error: str
    details: str | None = None


class FeedbackRequest(BaseModel):
    """Feedback submission from the app (camelCase on the wire)."""
    model_config = ConfigDict(populate_by_name=True)

    feedback: str | None = None
    user_email: str | None = Field(None, alias="userEmail")
    username: str | None = None
    is_pro: bool | None = Field(None, alias="isPro")
    timestamp: int | float | str | None = None
    platform: str | None = None


class FeedbackResponse(BaseModel):
    """Outcome of a feedback submission."""
    success: bool
    message: str | None = None
