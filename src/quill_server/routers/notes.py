"""Notes API endpoints.

This module provides ownership-scoped CRUD endpoints for notes and the
endpoints for the chat history saved against a note.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from quill_server.dependencies import get_actor_id, get_history_store, get_note_store
from quill_server.models.notes import (
    ChatExchangeResponse,
    ChatHistoryResponse,
    ClearChatHistoryResponse,
    NoteCreateRequest,
    NoteListResponse,
    NoteResponse,
    NoteUpdateRequest,
)
from quill_server.notes import ChatHistoryStore, JsonNoteStore, Note

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/notes", tags=["notes"])


def note_not_found(note_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": {
                "code": "note_not_found",
                "message": f"Note {note_id} not found",
                "details": {"note_id": note_id},
            }
        },
    )


def find_owned_note(store: JsonNoteStore, note_id: str, actor_id: str) -> Note:
    """Look up a note owned by the actor or raise a 404."""
    note = store.find_by_id(note_id, actor_id)
    if note is None:
        raise note_not_found(note_id)
    return note


def _to_response(note: Note) -> NoteResponse:
    return NoteResponse(
        id=note.id,
        text=note.text,
        created_at=note.created_at,
        updated_at=note.updated_at,
    )


@router.get("", response_model=NoteListResponse)
async def list_notes(
    actor_id: Annotated[str, Depends(get_actor_id)],
    store: Annotated[JsonNoteStore, Depends(get_note_store)],
) -> NoteListResponse:
    """List the user's notes, newest first."""
    notes = store.list_notes(actor_id)
    logger.debug(f"Listed {len(notes)} notes for {actor_id}")
    return NoteListResponse(notes=[_to_response(note) for note in notes])


@router.post(
    "",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_note(
    body: NoteCreateRequest,
    actor_id: Annotated[str, Depends(get_actor_id)],
    store: Annotated[JsonNoteStore, Depends(get_note_store)],
) -> NoteResponse:
    """Create a new note for the user."""
    note = store.create(actor_id, body.text)
    return _to_response(note)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: str,
    actor_id: Annotated[str, Depends(get_actor_id)],
    store: Annotated[JsonNoteStore, Depends(get_note_store)],
) -> NoteResponse:
    """Get a single note.

    Raises:
        HTTPException: 404 if the note does not exist or belongs to another user
    """
    return _to_response(find_owned_note(store, note_id, actor_id))


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: str,
    body: NoteUpdateRequest,
    actor_id: Annotated[str, Depends(get_actor_id)],
    store: Annotated[JsonNoteStore, Depends(get_note_store)],
) -> NoteResponse:
    """Replace the text of a note.

    Raises:
        HTTPException: 404 if the note does not exist or belongs to another user
    """
    find_owned_note(store, note_id, actor_id)
    note = store.update_text(note_id, body.text, owner_id=actor_id)
    if note is None:
        raise note_not_found(note_id)
    logger.info(f"Updated note {note_id}")
    return _to_response(note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: str,
    actor_id: Annotated[str, Depends(get_actor_id)],
    store: Annotated[JsonNoteStore, Depends(get_note_store)],
    history: Annotated[ChatHistoryStore, Depends(get_history_store)],
) -> None:
    """Delete a note and its saved chat history.

    Raises:
        HTTPException: 404 if the note does not exist or belongs to another user
    """
    find_owned_note(store, note_id, actor_id)
    store.delete(note_id, actor_id)
    history.clear(note_id)


@router.get("/{note_id}/chat", response_model=ChatHistoryResponse)
async def get_chat_history(
    note_id: str,
    actor_id: Annotated[str, Depends(get_actor_id)],
    store: Annotated[JsonNoteStore, Depends(get_note_store)],
    history: Annotated[ChatHistoryStore, Depends(get_history_store)],
) -> ChatHistoryResponse:
    """Get the exchanges saved against a note, oldest first."""
    find_owned_note(store, note_id, actor_id)
    exchanges = history.load(note_id)
    return ChatHistoryResponse(
        note_id=note_id,
        exchanges=[
            ChatExchangeResponse(
                id=exchange.id,
                question=exchange.question,
                response=exchange.response,
                created_at=exchange.created_at,
            )
            for exchange in exchanges
        ],
    )


@router.delete("/{note_id}/chat", response_model=ClearChatHistoryResponse)
async def clear_chat_history(
    note_id: str,
    actor_id: Annotated[str, Depends(get_actor_id)],
    store: Annotated[JsonNoteStore, Depends(get_note_store)],
    history: Annotated[ChatHistoryStore, Depends(get_history_store)],
) -> ClearChatHistoryResponse:
    """Delete all exchanges saved against a note."""
    find_owned_note(store, note_id, actor_id)
    removed = history.clear(note_id)
    return ClearChatHistoryResponse(note_id=note_id, removed=removed)
