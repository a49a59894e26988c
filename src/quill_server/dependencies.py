"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings, stores and
the orchestrator.
"""

from functools import lru_cache

from fastapi import Header, HTTPException, Request

from quill_server.config import QuillServerSettings
from quill_server.notes import ChatHistoryStore, JsonNoteStore
from quill_server.orchestration import Orchestrator
from quill_server.workspace import NotionConnector


@lru_cache
def get_settings() -> QuillServerSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the QUILL_ prefix.

    Returns:
        QuillServerSettings: The application configuration settings.
    """
    return QuillServerSettings()


def _from_state(request: Request, name: str, label: str):
    if not hasattr(request.app.state, name):
        raise HTTPException(
            status_code=503,
            detail=f"{label} not initialized",
        )
    return getattr(request.app.state, name)


def get_orchestrator(request: Request) -> Orchestrator:
    """Get the shared orchestrator created during application startup."""
    return _from_state(request, "orchestrator", "Orchestrator")


def get_note_store(request: Request) -> JsonNoteStore:
    """Get the note store from app state."""
    return _from_state(request, "note_store", "Note store")


def get_history_store(request: Request) -> ChatHistoryStore:
    """Get the chat history store from app state."""
    return _from_state(request, "history_store", "Chat history store")


def get_connector(request: Request) -> NotionConnector:
    """Get the Notion workspace connector from app state."""
    return _from_state(request, "notion_connector", "Workspace connector")


def get_actor_id(x_user_id: str | None = Header(default=None)) -> str:
    """Get the id of the user making the request.

    The user is identified by the X-User-Id header, set by the
    authenticating proxy in front of this server.

    Args:
        x_user_id: Value of the X-User-Id header.

    Returns:
        str: The user id.

    Raises:
        HTTPException: If the header is missing or blank (400 Bad Request).
    """
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(
            status_code=400,
            detail={
                "error": {
                    "code": "missing_user",
                    "message": "The X-User-Id header is required",
                    "details": {},
                }
            },
        )
    return x_user_id.strip()
