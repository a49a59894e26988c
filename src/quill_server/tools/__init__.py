"""Tool catalog, argument validation and dispatch.

This package defines the tools advertised to the model, validates the
arguments of each tool call, and routes calls to note handlers, the tool
worker, or the workspace connector.
"""

from quill_server.tools.catalog import get_catalog, get_descriptor, validate_arguments
from quill_server.tools.dispatcher import ToolDispatcher
from quill_server.tools.types import (
    RunContext,
    ToolCallRequest,
    ToolDescriptor,
    ToolFailure,
    ToolResult,
    ToolSuccess,
)

__all__ = [
    "RunContext",
    "ToolCallRequest",
    "ToolDescriptor",
    "ToolDispatcher",
    "ToolFailure",
    "ToolResult",
    "ToolSuccess",
    "get_catalog",
    "get_descriptor",
    "validate_arguments",
]
