"""Shared fixtures for all tests."""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from backend.api.routes import get_invoker, get_mailer
from backend.core.invoker import CompletionInvoker
from backend.main import app


@pytest.fixture
def raw_conversation() -> list[dict]:
    """Eight valid alternating turns."""
    return [
        {"role": "user" if i % 2 == 0 else "assistant", "content": f"turn {i}"}
        for i in range(8)
    ]


@pytest.fixture
def fake_adapter(mocker):
    """Stand-in for LLMAdapter whose ``complete`` is an AsyncMock."""
    adapter = mocker.Mock()
    adapter.complete = mocker.AsyncMock(return_value="Hello from the model")
    adapter.is_healthy.return_value = True
    return adapter


@pytest.fixture
def fake_mailer(mocker):
    mailer = mocker.Mock()
    mailer.is_configured.return_value = True
    return mailer


@pytest.fixture
def client(fake_adapter, fake_mailer):
    """TestClient wired to fake collaborators (lifespan is not run)."""
    app.state.llm_adapter = SimpleNamespace(is_healthy=fake_adapter.is_healthy)
    app.state.mailer = fake_mailer
    app.dependency_overrides[get_invoker] = lambda: CompletionInvoker(fake_adapter)
    app.dependency_overrides[get_mailer] = lambda: fake_mailer
    yield TestClient(app)
    app.dependency_overrides.clear()
