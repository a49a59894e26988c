"""Data types for tool calls, tool results and run context.

Tool results are carried as structured values inside the orchestration loop
and are only serialized to text when written into the conversation.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Literal

from quill_server.notes.types import Note

ToolCategory = Literal["local", "remote", "workspace"]


@dataclass(frozen=True)
class ToolDescriptor:
    """A tool advertised to the model.

    Attributes:
        name: Globally unique tool name
        description: Natural-language description shown to the model
        parameters: JSON schema object with "type", "properties" and "required"
        category: Which handler family executes the tool
    """

    name: str
    description: str
    parameters: dict[str, Any]
    category: ToolCategory


@dataclass(frozen=True)
class ToolCallRequest:
    """A single tool invocation requested by the model."""

    id: str
    name: str
    arguments: Any = field(default_factory=dict)


@dataclass(frozen=True)
class ToolSuccess:
    """Successful tool execution carrying an opaque JSON payload."""

    tool_call_id: str
    payload: Any

    @property
    def ok(self) -> bool:
        return True

    def to_content(self) -> str:
        return json.dumps(self.payload, ensure_ascii=False, default=str)


@dataclass(frozen=True)
class ToolFailure:
    """Failed tool execution carrying a message for the model."""

    tool_call_id: str
    message: str

    @property
    def ok(self) -> bool:
        return False

    def to_content(self) -> str:
        return json.dumps({"error": self.message}, ensure_ascii=False)


ToolResult = ToolSuccess | ToolFailure


@dataclass(frozen=True)
class RunContext:
    """Per-run context, read-only to the dispatcher.

    Attributes:
        actor_id: The user on whose behalf the run executes
        current_note_id: The note the user is viewing, if any
        workspace_credential: Workspace access token, if connected
        notes: Snapshot of the actor's notes taken at run start
    """

    actor_id: str
    current_note_id: str | None = None
    workspace_credential: str | None = None
    notes: tuple[Note, ...] = ()

    @property
    def current_note(self) -> Note | None:
        if self.current_note_id is None:
            return None
        for note in self.notes:
            if note.id == self.current_note_id:
                return note
        return None
