"""Ask API endpoints.

This module provides the endpoints that answer a user's question about their
notes, letting the model call tools along the way. Both a collected response
and a streamed response via SSE are available.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sse_starlette.sse import EventSourceResponse

from quill_server.dependencies import (
    get_actor_id,
    get_connector,
    get_history_store,
    get_note_store,
    get_orchestrator,
)
from quill_server.models.ask import (
    AskRequest,
    AskResponse,
    ErrorEventData,
    ExecutedToolCall,
    ToolCallEventData,
    ToolResultEventData,
)
from quill_server.notes import ChatHistoryStore, JsonNoteStore
from quill_server.orchestration import (
    ConversationTurn,
    DoneEvent,
    Orchestrator,
    RunResult,
    ToolCallEvent,
    ToolResultEvent,
)
from quill_server.routers.notes import find_owned_note
from quill_server.tools import RunContext
from quill_server.workspace import NotionConnector

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/ask", tags=["ask"])


def _build_context(
    body: AskRequest,
    actor_id: str,
    store: JsonNoteStore,
    connector: NotionConnector,
) -> RunContext:
    if not body.question.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": {
                    "code": "empty_question",
                    "message": "Question must not be empty",
                    "details": {},
                }
            },
        )

    if body.current_note_id is not None:
        find_owned_note(store, body.current_note_id, actor_id)

    return RunContext(
        actor_id=actor_id,
        current_note_id=body.current_note_id,
        workspace_credential=connector.get_credential(actor_id),
        notes=tuple(store.list_notes(actor_id)),
    )


def _history_turns(body: AskRequest) -> list[ConversationTurn]:
    return [
        ConversationTurn(role=message.role, content=message.content)
        for message in body.history
    ]


def _to_response(result: RunResult) -> AskResponse:
    return AskResponse(
        response=result.response,
        note_created=result.note_created,
        note_updated=result.note_updated,
        iterations=result.iterations,
        tool_calls_executed=[
            ExecutedToolCall(**call) for call in result.tool_calls_executed
        ],
    )


def _persist_exchange(
    history: ChatHistoryStore, body: AskRequest, result: RunResult
) -> None:
    if body.persist and body.current_note_id is not None:
        history.append(body.current_note_id, body.question, result.response)
        logger.debug(f"Saved exchange to note {body.current_note_id}")


@router.post("", response_model=AskResponse)
async def ask(
    body: AskRequest,
    actor_id: Annotated[str, Depends(get_actor_id)],
    orchestrator: Annotated[Orchestrator, Depends(get_orchestrator)],
    store: Annotated[JsonNoteStore, Depends(get_note_store)],
    history: Annotated[ChatHistoryStore, Depends(get_history_store)],
    connector: Annotated[NotionConnector, Depends(get_connector)],
) -> AskResponse:
    """Answer a question and return the complete response.

    Tool failures never surface as HTTP errors: they are handed back to the
    model. A failure of the model itself yields a safe error fragment as the
    response.

    Args:
        body: The question, prior turns and the note being viewed
        actor_id: The requesting user
        orchestrator: Injected orchestrator
        store: Injected note store
        history: Injected chat history store
        connector: Injected workspace connector

    Returns:
        AskResponse with the final response and the side-effect flags

    Raises:
        HTTPException: 400 if the question is empty, 404 if the current note
            is not found, 500 if the exchange cannot be saved
    """
    context = _build_context(body, actor_id, store, connector)
    logger.info(f"Answering question for {actor_id} ({len(body.history)} prior turns)")

    result = await orchestrator.run(body.question, _history_turns(body), context)

    try:
        _persist_exchange(history, body, result)
    except OSError as e:
        logger.error(f"Failed to save exchange for note {body.current_note_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": {
                    "code": "history_save_error",
                    "message": f"Failed to save chat history: {str(e)}",
                    "details": {"note_id": body.current_note_id},
                }
            },
        )

    return _to_response(result)


@router.post("/stream")
async def ask_streaming(
    body: AskRequest,
    request: Request,
    actor_id: Annotated[str, Depends(get_actor_id)],
    orchestrator: Annotated[Orchestrator, Depends(get_orchestrator)],
    store: Annotated[JsonNoteStore, Depends(get_note_store)],
    history: Annotated[ChatHistoryStore, Depends(get_history_store)],
    connector: Annotated[NotionConnector, Depends(get_connector)],
) -> EventSourceResponse:
    """Answer a question, streaming tool activity via Server-Sent Events (SSE).

    SSE Events:
        - tool_call: A tool is about to be executed
        - tool_result: A tool has produced its result
        - done: The final response with the side-effect flags
        - error: If an error occurs during streaming

    Raises:
        HTTPException: 400 if the question is empty, 404 if the current note
            is not found
    """
    context = _build_context(body, actor_id, store, connector)
    turns = _history_turns(body)
    logger.info(f"Starting streamed answer for {actor_id}")

    async def event_generator():
        """Generate SSE events from the orchestration run."""
        try:
            async for event in orchestrator.stream(body.question, turns, context):
                if await request.is_disconnected():
                    logger.warning(f"Client disconnected during run for {actor_id}")
                    break

                if isinstance(event, ToolCallEvent):
                    data = ToolCallEventData(
                        id=event.call.id,
                        name=event.call.name,
                        arguments=event.call.arguments,
                        iteration=event.iteration,
                    )
                    yield {"event": "tool_call", "data": data.model_dump_json()}

                elif isinstance(event, ToolResultEvent):
                    data = ToolResultEventData(
                        id=event.call.id,
                        name=event.call.name,
                        ok=event.result.ok,
                        content=event.result.to_content(),
                        iteration=event.iteration,
                    )
                    yield {"event": "tool_result", "data": data.model_dump_json()}

                elif isinstance(event, DoneEvent):
                    _persist_exchange(history, body, event.result)
                    yield {
                        "event": "done",
                        "data": _to_response(event.result).model_dump_json(),
                    }

        except Exception as e:
            logger.error(f"Error during streamed answer for {actor_id}: {e}")
            error_event = ErrorEventData(
                code="run_error",
                message=f"Failed to generate response: {str(e)}",
                details={},
            )
            yield {
                "event": "error",
                "data": error_event.model_dump_json(),
            }

    return EventSourceResponse(event_generator())
