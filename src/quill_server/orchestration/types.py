"""Data types for the orchestration loop."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Protocol

from quill_server.tools.types import ToolCallRequest, ToolDescriptor, ToolResult

Role = Literal["system", "user", "assistant", "tool"]


@dataclass
class ConversationTurn:
    """One turn of the conversation sent to the model.

    Tool turns carry the id (and name) of the call they answer. Assistant
    turns that requested tools keep the raw requests so that the history
    stays faithful to what the model produced.
    """

    role: Role
    content: str | None = None
    tool_call_id: str | None = None
    tool_name: str | None = None
    tool_calls: list[ToolCallRequest] | None = None


@dataclass
class Completion:
    """A single response from the model."""

    content: str | None = None
    tool_calls: list[ToolCallRequest] = field(default_factory=list)


class ModelCompletion(Protocol):
    """The language model as seen by the orchestration loop."""

    async def complete(
        self,
        history: list[ConversationTurn],
        tools: tuple[ToolDescriptor, ...],
    ) -> Completion: ...


class LoopState(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    DISPATCHING_TOOLS = "dispatching_tools"
    DONE = "done"


@dataclass
class RunResult:
    """Outcome of one orchestration run."""

    response: str
    note_created: bool = False
    note_updated: bool = False
    iterations: int = 0
    tool_calls_executed: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class ToolCallEvent:
    """Emitted right before a tool call is dispatched."""

    call: ToolCallRequest
    iteration: int


@dataclass
class ToolResultEvent:
    """Emitted once a tool call has produced its result."""

    call: ToolCallRequest
    result: ToolResult
    iteration: int


@dataclass
class DoneEvent:
    """Final event of every run."""

    result: RunResult


OrchestrationEvent = ToolCallEvent | ToolResultEvent | DoneEvent
