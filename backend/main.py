"""FastAPI application entry point.

Startup sequence: configure logging → init Groq adapter → init invoker → init mailer.
"""

import logging
import os
from contextlib import asynccontextmanager

import structlog
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api.errors import register_exception_handlers
from backend.api.routes import router
from backend.core.invoker import CompletionInvoker
from backend.core.llm_adapter import LLMAdapter
from backend.core.mailer import FeedbackMailer

load_dotenv()

_LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def log_level_from_env() -> int:
    """Resolve LOG_LEVEL to a stdlib level; unknown names fall back to INFO."""
    return _LOG_LEVELS.get(os.environ.get("LOG_LEVEL", "INFO").strip().upper(), logging.INFO)


structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(log_level_from_env()))

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("startup.begin")

    # Long-lived clients shared by all requests
    llm_adapter = LLMAdapter()
    app.state.llm_adapter = llm_adapter
    app.state.invoker = CompletionInvoker(llm_adapter)
    logger.info("startup.llm_initialized", model=llm_adapter.model_name,
                groq_key_loaded=llm_adapter.is_healthy())
    if not llm_adapter.is_healthy():
        logger.warning("startup.groq_key_missing", hint="Set GROQ_API_KEY in .env")

    mailer = FeedbackMailer()
    app.state.mailer = mailer
    logger.info("startup.mailer_initialized", email_configured=mailer.is_configured())

    logger.info("startup.complete")
    yield
    logger.info("shutdown.complete")


app = FastAPI(
    title="BloatFest API",
    description="Chat gateway to the Groq completion service, plus feedback mail",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(router)


def run() -> None:
    """Serve the app with uvicorn on $PORT."""
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "3000")))


if __name__ == "__main__":
    run()
