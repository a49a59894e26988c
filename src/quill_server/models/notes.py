"""Pydantic models for the notes API."""

from pydantic import BaseModel, ConfigDict, Field


class NoteCreateRequest(BaseModel):
    """Request body for POST /api/v1/notes."""

    text: str = Field(default="", description="Note content")


class NoteUpdateRequest(BaseModel):
    """Request body for PUT /api/v1/notes/{note_id}."""

    text: str = Field(description="New note content")


class NoteResponse(BaseModel):
    """A single note."""

    id: str = Field(description="Note identifier")
    text: str = Field(description="Note content")
    created_at: str = Field(description="ISO 8601 creation timestamp")
    updated_at: str = Field(description="ISO 8601 update timestamp")

    model_config = ConfigDict(from_attributes=True)


class NoteListResponse(BaseModel):
    """Response body for GET /api/v1/notes."""

    notes: list[NoteResponse] = Field(description="The user's notes, newest first")


class ChatExchangeResponse(BaseModel):
    """A saved question/response exchange."""

    id: str = Field(description="Exchange identifier")
    question: str = Field(description="The user's question")
    response: str = Field(description="The assistant's response")
    created_at: str = Field(description="ISO 8601 timestamp")

    model_config = ConfigDict(from_attributes=True)


class ChatHistoryResponse(BaseModel):
    """Response body for GET /api/v1/notes/{note_id}/chat."""

    note_id: str = Field(description="Note identifier")
    exchanges: list[ChatExchangeResponse] = Field(description="Exchanges, oldest first")


class ClearChatHistoryResponse(BaseModel):
    """Response body for DELETE /api/v1/notes/{note_id}/chat."""

    note_id: str = Field(description="Note identifier")
    removed: int = Field(description="Number of exchanges removed")
