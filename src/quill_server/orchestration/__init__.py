"""Model/tool orchestration for note assistance.

This package contains the loop that lets the model call tools over several
rounds, the tracker of note side effects, and the system prompt builder.
"""

from quill_server.orchestration.loop import (
    FALLBACK_RESPONSE,
    MODEL_ERROR_RESPONSE,
    Orchestrator,
)
from quill_server.orchestration.tracker import SideEffectTracker
from quill_server.orchestration.types import (
    Completion,
    ConversationTurn,
    DoneEvent,
    ModelCompletion,
    OrchestrationEvent,
    RunResult,
    ToolCallEvent,
    ToolResultEvent,
)

__all__ = [
    "FALLBACK_RESPONSE",
    "MODEL_ERROR_RESPONSE",
    "Completion",
    "ConversationTurn",
    "DoneEvent",
    "ModelCompletion",
    "OrchestrationEvent",
    "Orchestrator",
    "RunResult",
    "SideEffectTracker",
    "ToolCallEvent",
    "ToolResultEvent",
]
