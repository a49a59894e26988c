"""Routing of validated tool calls to their handlers.

Three handler families exist:

- local note mutations (create_note, update_note), executed against the
  note store with ownership checks
- stateless tools executed by the out-of-process worker, after argument
  enrichment
- workspace (Notion) tools, which require the user's workspace credential

dispatch() never raises for a failing tool. Every error is converted to a
ToolFailure so that the model sees it and can react.
"""

import logging
from typing import Any, Awaitable, Callable

from quill_server.notes.store import NoteStore
from quill_server.tools.catalog import get_descriptor, validate_arguments
from quill_server.tools.enrichment import enrich_arguments
from quill_server.tools.errors import (
    NotConnectedError,
    NotFoundError,
    ToolError,
    ValidationError,
    WorkerUnavailableError,
)
from quill_server.tools.types import (
    RunContext,
    ToolCallRequest,
    ToolFailure,
    ToolResult,
    ToolSuccess,
)
from quill_server.worker.client import WorkerClient
from quill_server.workspace.connector import NotionConnector

logger = logging.getLogger(__name__)

WorkspaceHandler = Callable[[NotionConnector, dict[str, Any], str], Awaitable[Any]]


def merge_note_text(existing: str, new_content: str, mode: str) -> str:
    """Compute a note's text after an update.

    Append mode separates old and new text with a blank line, but only when
    the note already has text. Replace mode discards the old text.
    """
    if mode == "replace":
        return new_content
    if not existing:
        return new_content
    return f"{existing}\n\n{new_content}"


class ToolDispatcher:
    """Executes tool calls on behalf of an orchestration run.

    Attributes:
        note_store: Store used by the note mutation tools
        worker: Client for the stateless tool worker (None if not available)
        workspace: Notion connector (None if not available)
    """

    def __init__(
        self,
        note_store: NoteStore,
        worker: WorkerClient | None = None,
        workspace: NotionConnector | None = None,
    ) -> None:
        self.note_store = note_store
        self.worker = worker
        self.workspace = workspace

        self._local_handlers: dict[str, Callable[[dict[str, Any], RunContext], Any]] = {
            "create_note": self._create_note,
            "update_note": self._update_note,
        }
        self._workspace_handlers: dict[str, WorkspaceHandler] = {
            "search_notion": self._search_notion,
            "get_notion_page": self._get_notion_page,
            "create_notion_page": self._create_notion_page,
            "append_to_notion": self._append_to_notion,
            "list_notion_databases": self._list_notion_databases,
        }

    async def dispatch(self, call: ToolCallRequest, context: RunContext) -> ToolResult:
        """Execute one tool call and wrap the outcome as a tool result.

        Args:
            call: The tool call requested by the model
            context: The read-only context of the current run

        Returns:
            ToolSuccess with the handler's payload, or ToolFailure
        """
        logger.info(f"Dispatching tool {call.name} (call {call.id})")
        try:
            payload = await self._execute(call.name, call.arguments, context)
        except ToolError as e:
            logger.warning(f"Tool {call.name} failed with {e.code}: {e.message}")
            return ToolFailure(tool_call_id=call.id, message=e.message)
        except Exception as e:
            logger.exception(f"Tool {call.name} raised an unexpected error")
            return ToolFailure(tool_call_id=call.id, message=f"{call.name} failed: {e}")

        return ToolSuccess(tool_call_id=call.id, payload=payload)

    async def _execute(self, name: str, arguments: Any, context: RunContext) -> Any:
        descriptor = get_descriptor(name)
        args = validate_arguments(descriptor, arguments)

        if descriptor.category == "local":
            return self._local_handlers[name](args, context)
        if descriptor.category == "remote":
            return await self._call_worker(name, args, context)
        return await self._call_workspace(name, args, context)

    # --- Local note mutations ---

    def _create_note(self, args: dict[str, Any], context: RunContext) -> dict[str, Any]:
        content = str(args.get("content") or "")
        if not content.strip():
            raise ValidationError("Cannot create a note with empty content")

        note = self.note_store.create(context.actor_id, content)
        logger.info(f"Note {note.id} created by tool call")
        return {"success": True, "message": "Note created successfully", "noteId": note.id}

    def _update_note(self, args: dict[str, Any], context: RunContext) -> dict[str, Any]:
        note_id = str(args["noteId"])
        new_content = str(args.get("newContent") or "")
        mode = str(args.get("mode") or "append")

        if not new_content:
            raise ValidationError("No content provided to update the note")

        note = self.note_store.find_by_id(note_id, context.actor_id)
        if note is None:
            raise NotFoundError("Note not found or you don't have permission to update it")

        updated = self.note_store.update_text(
            note_id,
            merge_note_text(note.text, new_content, mode),
            owner_id=context.actor_id,
        )
        if updated is None:
            raise NotFoundError("Note not found or you don't have permission to update it")

        logger.info(f"Note {note_id} updated by tool call ({mode})")
        return {
            "success": True,
            "message": "Note updated successfully",
            "noteId": updated.id,
            "mode": mode,
        }

    # --- Stateless worker tools ---

    async def _call_worker(
        self, name: str, args: dict[str, Any], context: RunContext
    ) -> Any:
        enriched = enrich_arguments(name, args, context)
        if self.worker is None:
            raise WorkerUnavailableError(f"{name} is unavailable in this environment")
        try:
            return await self.worker.call_tool(name, enriched)
        except WorkerUnavailableError as e:
            logger.warning(f"Worker unavailable for {name}: {e.message}")
            raise WorkerUnavailableError(f"{name} is unavailable in this environment") from e

    # --- Workspace tools ---

    async def _call_workspace(
        self, name: str, args: dict[str, Any], context: RunContext
    ) -> Any:
        if not context.workspace_credential or self.workspace is None:
            raise NotConnectedError(
                "Notion is not connected. Please connect your Notion workspace in settings."
            )
        handler = self._workspace_handlers[name]
        return await handler(self.workspace, args, context.workspace_credential)

    @staticmethod
    async def _search_notion(
        workspace: NotionConnector, args: dict[str, Any], token: str
    ) -> Any:
        return await workspace.search(str(args["query"]), token)

    @staticmethod
    async def _get_notion_page(
        workspace: NotionConnector, args: dict[str, Any], token: str
    ) -> Any:
        return await workspace.get_page(str(args["pageId"]), token)

    @staticmethod
    async def _create_notion_page(
        workspace: NotionConnector, args: dict[str, Any], token: str
    ) -> Any:
        return await workspace.create_page(
            str(args["databaseId"]), str(args["title"]), str(args["content"]), token
        )

    @staticmethod
    async def _append_to_notion(
        workspace: NotionConnector, args: dict[str, Any], token: str
    ) -> Any:
        return await workspace.append_page(str(args["pageId"]), str(args["content"]), token)

    @staticmethod
    async def _list_notion_databases(
        workspace: NotionConnector, args: dict[str, Any], token: str
    ) -> Any:
        return await workspace.list_databases(token)
