"""Exception handlers mapping domain errors to JSON envelopes."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.api.schemas import ErrorResponse, FeedbackResponse
from backend.core.invoker import InvocationError
from backend.core.mailer import FeedbackError
from backend.core.sanitizer import MessagesNotArrayError

logger = structlog.get_logger(__name__)


async def messages_not_array_handler(request: Request, exc: MessagesNotArrayError) -> JSONResponse:
    """Reject a malformed ``messages`` field with a 400."""
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=str(exc)).model_dump(exclude_none=True),
    )


async def invocation_error_handler(request: Request, exc: InvocationError) -> JSONResponse:
    """Surface a failed completion call as a 500 with a summary only."""
    logger.info("api.invocation_failed", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=exc.message, details=exc.details).model_dump(),
    )


async def feedback_error_handler(request: Request, exc: FeedbackError) -> JSONResponse:
    """Report an undeliverable feedback mail as a 500."""
    logger.info("api.feedback_failed", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content=FeedbackResponse(success=False, message="Failed to send feedback").model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all domain exception handlers to the app."""
    app.add_exception_handler(MessagesNotArrayError, messages_not_array_handler)
    app.add_exception_handler(InvocationError, invocation_error_handler)
    app.add_exception_handler(FeedbackError, feedback_error_handler)
