"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quill_server.config import QuillServerSettings
from quill_server.notes import ChatHistoryStore, JsonNoteStore
from quill_server.ollama import OllamaClient, OllamaCompletionModel
from quill_server.orchestration import Orchestrator
from quill_server.routers import ask, health, notes, workspace
from quill_server.tools import ToolDispatcher
from quill_server.worker import WorkerClient
from quill_server.workspace import CredentialStore, NotionConnector

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    Expensive objects (the Ollama client, the tool worker client, the Notion
    connector and the stores) are created once at startup and stored in
    app.state for reuse across all requests. The tool worker process itself
    is only spawned on first use.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: QuillServerSettings = app.state.settings

    # Startup: Initialize Ollama client
    app.state.ollama_client = OllamaClient(host=settings.ollama_host)
    logger.info(f"Initialized Ollama client with host: {settings.ollama_host}")

    connected = await app.state.ollama_client.check_connection()
    if connected:
        logger.info("Successfully connected to Ollama")
    else:
        logger.warning("Could not connect to Ollama - check if server is running")

    # Stores
    app.state.note_store = JsonNoteStore(settings.resolved_notes_dir)
    app.state.history_store = ChatHistoryStore(settings.resolved_chat_history_dir)

    # Tool collaborators
    worker_command = settings.worker_command if settings.worker_enabled else None
    app.state.worker_client = WorkerClient(
        command=worker_command, timeout=settings.worker_timeout
    )
    if worker_command is None:
        logger.warning("Tool worker disabled - remote tools will be unavailable")

    app.state.notion_connector = NotionConnector(
        credentials=CredentialStore(settings.resolved_credentials_file),
        base_url=settings.notion_api_url,
        notion_version=settings.notion_version,
        timeout=settings.notion_timeout,
    )

    dispatcher = ToolDispatcher(
        note_store=app.state.note_store,
        worker=app.state.worker_client,
        workspace=app.state.notion_connector,
    )
    app.state.orchestrator = Orchestrator(
        model=OllamaCompletionModel(app.state.ollama_client, settings.model),
        dispatcher=dispatcher,
        max_iterations=settings.max_tool_iterations,
    )
    logger.info(
        f"Orchestrator ready with model {settings.model} "
        f"(max {settings.max_tool_iterations} tool iterations)"
    )

    try:
        yield
    finally:
        # Shutdown: Clean up resources
        if hasattr(app.state, "worker_client"):
            await app.state.worker_client.close()
            logger.info("Tool worker client closed")
        if hasattr(app.state, "notion_connector"):
            await app.state.notion_connector.close()
        if hasattr(app.state, "ollama_client"):
            await app.state.ollama_client.close()
            logger.info("Ollama client closed")


def create_app(settings: QuillServerSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a FastAPI instance with all routers,
    middleware, and configuration applied. It can accept an optional
    settings object for testing or explicit configuration.

    Args:
        settings: Optional QuillServerSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from quill_server.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="quill-server",
        description="Headless FastAPI server for note assistance with LLM tool calling via Ollama",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Configure CORS
    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health.router)
    app.include_router(ask.router)
    app.include_router(notes.router)
    app.include_router(workspace.router)

    return app
