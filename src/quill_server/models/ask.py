"""Pydantic models for the ask API requests, responses and SSE events.

This module defines the request and response schemas for the question
answering endpoints, both the collected response and the streamed one.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class HistoryMessage(BaseModel):
    """A prior conversation turn supplied by the caller."""

    role: Literal["user", "assistant"] = Field(description="Message role")
    content: str = Field(description="Message content")


class AskRequest(BaseModel):
    """Request body for POST /api/v1/ask and POST /api/v1/ask/stream."""

    question: str = Field(description="The user's question")
    history: list[HistoryMessage] = Field(
        default_factory=list,
        description="Prior conversation turns, oldest first",
    )
    current_note_id: str | None = Field(
        default=None,
        description="The note the user is currently viewing",
    )
    persist: bool = Field(
        default=False,
        description="Save the exchange to the current note's chat history",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "question": "What's the weather like in Paris?",
                    "history": [],
                    "current_note_id": None,
                    "persist": False,
                },
                {
                    "question": "Search the web for the latest AI news and add it to my note",
                    "history": [],
                    "current_note_id": "a1b2c3d4e5",
                    "persist": True,
                },
            ]
        }
    )


class ExecutedToolCall(BaseModel):
    """Summary of one tool call executed during a run."""

    id: str = Field(description="Tool call identifier")
    name: str = Field(description="Tool name")
    ok: bool = Field(description="Whether the tool succeeded")
    iteration: int = Field(description="Tool iteration the call belonged to")


class AskResponse(BaseModel):
    """Response body for POST /api/v1/ask."""

    response: str = Field(description="Final assistant response (HTML fragment)")
    note_created: bool = Field(description="Whether a note was created")
    note_updated: bool = Field(description="Whether a note was updated")
    iterations: int = Field(default=0, description="Number of tool iterations")
    tool_calls_executed: list[ExecutedToolCall] = Field(
        default_factory=list,
        description="Tool calls executed during this run",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "response": "<h3>Weather in Paris</h3><p>It is 18°C and sunny.</p>",
                "note_created": False,
                "note_updated": False,
                "iterations": 1,
                "tool_calls_executed": [
                    {
                        "id": "call_3f2a9c1b7d4e",
                        "name": "get_weather",
                        "ok": True,
                        "iteration": 1,
                    }
                ],
            }
        }
    )


# --- SSE event payloads ---


class ToolCallEventData(BaseModel):
    """SSE event emitted before a tool is executed."""

    id: str = Field(description="Tool call identifier")
    name: str = Field(description="Tool name")
    arguments: Any = Field(default=None, description="Arguments requested by the model")
    iteration: int = Field(description="Tool iteration")


class ToolResultEventData(BaseModel):
    """SSE event emitted after a tool has been executed."""

    id: str = Field(description="Tool call identifier")
    name: str = Field(description="Tool name")
    ok: bool = Field(description="Whether the tool succeeded")
    content: str = Field(description="Result as written into the conversation")
    iteration: int = Field(description="Tool iteration")


class ErrorEventData(BaseModel):
    """SSE error event."""

    code: str = Field(description="Error code")
    message: str = Field(description="Error message")
    details: dict = Field(default_factory=dict, description="Additional details")
