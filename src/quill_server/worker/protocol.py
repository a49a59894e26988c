"""Line-framed JSON envelopes exchanged with the tool worker.

Every request and every response is one self-contained JSON object on a
single line:

    request:  {"id": ..., "method": "tools/call", "params": {"name": ..., "arguments": {...}}}
    response: {"id": ..., "result": {"content": [{"type": "text", "text": "<json payload>"}]}}
              {"id": ..., "error": {"message": ...}}
"""

import json
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from quill_server.tools.errors import WorkerProtocolError

METHOD_CALL_TOOL = "tools/call"
METHOD_LIST_TOOLS = "tools/list"


class WorkerRequest(BaseModel):
    """A request sent to the worker."""

    id: str
    method: str
    params: dict[str, Any] = Field(default_factory=dict)


class TextContent(BaseModel):
    """A text content block carrying a JSON-encoded payload."""

    type: Literal["text"] = "text"
    text: str


class WorkerResult(BaseModel):
    content: list[TextContent]


class WorkerErrorBody(BaseModel):
    message: str


class WorkerResponse(BaseModel):
    """A response read from the worker. Exactly one of result/error is set."""

    id: str
    result: WorkerResult | None = None
    error: WorkerErrorBody | None = None


def encode(message: BaseModel) -> bytes:
    """Serialize an envelope as one newline-terminated line."""
    return (message.model_dump_json(exclude_none=True) + "\n").encode("utf-8")


def call_tool_request(request_id: str, name: str, arguments: dict[str, Any]) -> WorkerRequest:
    return WorkerRequest(
        id=request_id,
        method=METHOD_CALL_TOOL,
        params={"name": name, "arguments": arguments},
    )


def success_response(request_id: str, payload: Any) -> WorkerResponse:
    text = json.dumps(payload, ensure_ascii=False, default=str)
    return WorkerResponse(
        id=request_id,
        result=WorkerResult(content=[TextContent(text=text)]),
    )


def error_response(request_id: str, message: str) -> WorkerResponse:
    return WorkerResponse(id=request_id, error=WorkerErrorBody(message=message))


def parse_request(line: bytes | str) -> WorkerRequest:
    """Parse a request line (worker side).

    Raises:
        ValueError: If the line is not a valid request envelope
    """
    try:
        return WorkerRequest.model_validate_json(line)
    except PydanticValidationError as e:
        raise ValueError(f"Malformed request: {e.errors()[0]['msg']}") from e


def parse_response(line: bytes | str) -> WorkerResponse:
    """Parse a response line (client side).

    Raises:
        WorkerProtocolError: If the line is not a valid response envelope
    """
    try:
        response = WorkerResponse.model_validate_json(line)
    except PydanticValidationError as e:
        raise WorkerProtocolError(
            f"Malformed worker response: {e.errors()[0]['msg']}"
        ) from e

    if (response.result is None) == (response.error is None):
        raise WorkerProtocolError(
            "Malformed worker response: expected exactly one of result or error"
        )
    return response


def decode_payload(result: WorkerResult) -> Any:
    """Decode the JSON payload carried in the first text content block.

    Raises:
        WorkerProtocolError: If there is no content or it is not valid JSON
    """
    if not result.content:
        raise WorkerProtocolError("Malformed worker response: empty content")
    try:
        return json.loads(result.content[0].text)
    except json.JSONDecodeError as e:
        raise WorkerProtocolError(
            f"Malformed worker response: payload is not JSON ({e.msg})"
        ) from e
