"""Pytest configuration and shared fixtures for quill-server tests.

This module provides common fixtures used across all test modules,
including test app creation, async client setup and a scripted model.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from quill_server import create_app
from quill_server.config import QuillServerSettings


class ScriptedModel:
    """Model completion double that replays a fixed list of completions.

    Every call records the history it was given. Items in the script may be
    exceptions, which are raised instead of returned.
    """

    def __init__(self, script):
        self.script = list(script)
        self.calls = []

    async def complete(self, history, tools):
        self.calls.append({"history": list(history), "tools": tools})
        if not self.script:
            raise AssertionError("ScriptedModel ran out of completions")
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def scripted_model():
    """Return the ScriptedModel class for building model doubles."""
    return ScriptedModel


@pytest.fixture
def test_settings(tmp_path):
    """Create test settings with isolated temporary directories.

    Args:
        tmp_path: Pytest fixture providing a temporary directory.

    Returns:
        QuillServerSettings: Settings instance configured for testing.
    """
    return QuillServerSettings(
        host="127.0.0.1",
        port=8000,
        ollama_host="http://localhost:11434",
        model="llama3.1:8b",
        data_dir=str(tmp_path),
        notes_dir="notes",
        chat_history_dir="chat_history",
        credentials_file="workspace_credentials.json",
        worker_enabled=False,
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
