"""FastAPI endpoints for the BloatFest backend.

POST /chat - sanitize a conversation and relay it to the model
POST /api/chat - legacy alias of /chat
POST /api/feedback - email a feedback submission
GET /health - component health check
"""

import json

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from backend.api.schemas import (
    ChatReply,
    ChatRequest,
    ErrorResponse,
    FeedbackRequest,
    FeedbackResponse,
)
from backend.core.invoker import CompletionInvoker
from backend.core.mailer import FeedbackMailer
from backend.core.sanitizer import sanitize

logger = structlog.get_logger(__name__)

router = APIRouter()


def get_invoker(req: Request) -> CompletionInvoker:
    return req.app.state.invoker


def get_mailer(req: Request) -> FeedbackMailer:
    return req.app.state.mailer


async def _read_chat_request(req: Request) -> ChatRequest:
    """Parse the body leniently; anything but a JSON object carries no messages."""
    try:
        payload = json.loads(await req.body() or b"null")
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        return ChatRequest()
    return ChatRequest.model_validate(payload)


@router.post(
    "/chat",
    response_model=ChatReply,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    openapi_extra={"requestBody": {"content": {"application/json": {"schema": ChatRequest.model_json_schema()}}}},
)
@router.post("/api/chat", response_model=ChatReply, include_in_schema=False)
async def chat(req: Request, invoker: CompletionInvoker = Depends(get_invoker)):
    """Sanitize the conversation and return the model's reply.

    Validation failures and failed completion calls are raised and mapped to
    400/500 envelopes by the handlers in ``backend.api.errors``.
    """
    request = await _read_chat_request(req)
    conversation = sanitize(request.messages)

    logger.info("chat.request", messages=len(conversation))
    return await invoker.invoke(conversation)


@router.post("/api/feedback", response_model=FeedbackResponse, response_model_exclude_none=True)
def feedback(request: FeedbackRequest, mailer: FeedbackMailer = Depends(get_mailer)):
    """Email a feedback submission to the configured mailbox."""
    if not request.feedback or not request.feedback.strip():
        return JSONResponse(
            status_code=400,
            content=FeedbackResponse(success=False, message="Feedback is required").model_dump(),
        )

    mailer.send(request)
    return FeedbackResponse(success=True)


@router.get("/health")
def health(req: Request):
    """Report whether each outbound integration is configured."""
    components = {
        "groq": "ok" if req.app.state.llm_adapter.is_healthy() else "error",
        "email": "ok" if req.app.state.mailer.is_configured() else "error",
    }

    errors = [k for k, v in components.items() if v == "error"]
    if not errors:
        status = "healthy"
    elif len(errors) == len(components):
        status = "unhealthy"
    else:
        status = "degraded"

    return {"status": status, "components": components}


@router.get("/", response_class=PlainTextResponse)
@router.head("/", response_class=PlainTextResponse)
def root_health():
    """Basic liveness check for deployment platforms."""
    return "BloatFest backend running"
