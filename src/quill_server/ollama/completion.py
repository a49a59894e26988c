"""Ollama-backed model completion for the orchestration loop.

Translates the loop's conversation turns into Ollama chat messages, streams
the response and folds it into a single Completion. Ollama does not assign
ids to tool calls, so ids are generated here and matched back through the
tool turns.
"""

import json
import logging
import uuid
from typing import Any

from quill_server.ollama.client import OllamaClient
from quill_server.orchestration.types import Completion, ConversationTurn
from quill_server.tools.catalog import to_ollama_tools
from quill_server.tools.errors import ModelError
from quill_server.tools.types import ToolCallRequest, ToolDescriptor

logger = logging.getLogger(__name__)


def new_call_id() -> str:
    return f"call_{uuid.uuid4().hex[:12]}"


def _arguments_as_dict(arguments: Any) -> dict[str, Any]:
    # Ollama expects an object; malformed strings are sent back as empty.
    if isinstance(arguments, dict):
        return arguments
    if isinstance(arguments, str):
        try:
            decoded = json.loads(arguments)
        except json.JSONDecodeError:
            return {}
        return decoded if isinstance(decoded, dict) else {}
    return {}


def to_ollama_messages(history: list[ConversationTurn]) -> list[dict[str, Any]]:
    """Convert conversation turns into Ollama chat message dicts."""
    messages: list[dict[str, Any]] = []
    for turn in history:
        message: dict[str, Any] = {"role": turn.role, "content": turn.content or ""}
        if turn.role == "assistant" and turn.tool_calls:
            message["tool_calls"] = [
                {
                    "function": {
                        "name": call.name,
                        "arguments": _arguments_as_dict(call.arguments),
                    }
                }
                for call in turn.tool_calls
            ]
        elif turn.role == "tool" and turn.tool_name:
            message["tool_name"] = turn.tool_name
        messages.append(message)
    return messages


def _parse_tool_calls(raw_calls: list[dict[str, Any]] | None) -> list[ToolCallRequest]:
    calls = []
    for raw in raw_calls or []:
        function = raw.get("function") or {}
        name = function.get("name")
        if not name:
            logger.warning(f"Ignoring tool call without a name: {raw}")
            continue
        calls.append(
            ToolCallRequest(
                id=new_call_id(),
                name=name,
                arguments=function.get("arguments") or {},
            )
        )
    return calls


class OllamaCompletionModel:
    """ModelCompletion implementation backed by an OllamaClient.

    Attributes:
        client: The shared Ollama client
        model: Name of the model to chat with
        options: Optional model parameters passed on every request
    """

    def __init__(
        self,
        client: OllamaClient,
        model: str,
        options: dict[str, Any] | None = None,
    ) -> None:
        self.client = client
        self.model = model
        self.options = options

    async def complete(
        self,
        history: list[ConversationTurn],
        tools: tuple[ToolDescriptor, ...],
    ) -> Completion:
        """Request one completion from Ollama.

        Args:
            history: The full conversation so far
            tools: Tools the model may call

        Returns:
            Completion with the accumulated text and any requested tool calls

        Raises:
            ModelError: If the Ollama request fails
        """
        content_parts: list[str] = []
        tool_calls: list[ToolCallRequest] = []

        try:
            async for chunk in self.client.chat_stream(
                model=self.model,
                messages=to_ollama_messages(history),
                tools=to_ollama_tools(tools) if tools else None,
                options=self.options,
            ):
                message = chunk.get("message") or {}
                if message.get("content"):
                    content_parts.append(message["content"])
                tool_calls.extend(_parse_tool_calls(message.get("tool_calls")))
        except Exception as e:
            raise ModelError(f"Model {self.model} failed: {e}") from e

        content = "".join(content_parts) or None
        logger.debug(
            f"Completion from {self.model}: {len(content or '')} chars, "
            f"{len(tool_calls)} tool calls"
        )
        return Completion(content=content, tool_calls=tool_calls)
