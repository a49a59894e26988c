"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from quill_server.models.ask import (
    AskRequest,
    AskResponse,
    ErrorEventData,
    ExecutedToolCall,
    HistoryMessage,
    ToolCallEventData,
    ToolResultEventData,
)
from quill_server.models.health import HealthResponse
from quill_server.models.notes import (
    ChatExchangeResponse,
    ChatHistoryResponse,
    ClearChatHistoryResponse,
    NoteCreateRequest,
    NoteListResponse,
    NoteResponse,
    NoteUpdateRequest,
)
from quill_server.models.workspace import (
    WorkspaceConnectRequest,
    WorkspaceStatusResponse,
)

__all__ = [
    "AskRequest",
    "AskResponse",
    "ChatExchangeResponse",
    "ChatHistoryResponse",
    "ClearChatHistoryResponse",
    "ErrorEventData",
    "ExecutedToolCall",
    "HealthResponse",
    "HistoryMessage",
    "NoteCreateRequest",
    "NoteListResponse",
    "NoteResponse",
    "NoteUpdateRequest",
    "ToolCallEventData",
    "ToolResultEventData",
    "WorkspaceConnectRequest",
    "WorkspaceStatusResponse",
]
