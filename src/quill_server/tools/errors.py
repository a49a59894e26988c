"""Error taxonomy for tool dispatch and model completion.

Every ToolError raised while dispatching a tool call is caught at the
dispatcher boundary and fed back to the model as a failure result. ModelError
is the only error that aborts an orchestration run.
"""


class ToolError(Exception):
    """Base class for errors raised while executing a single tool call."""

    code = "tool_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ToolError):
    """Tool arguments are malformed or required content is empty."""

    code = "validation_error"


class UnknownToolError(ToolError):
    """The model requested a tool that is not in the catalog."""

    code = "unknown_tool"

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class NotConnectedError(ToolError):
    """A workspace tool was called without a stored workspace credential."""

    code = "not_connected"


class NotFoundError(ToolError):
    """A note does not exist or is not owned by the acting user."""

    code = "not_found"


class WorkerUnavailableError(ToolError):
    """The tool worker is not configured, could not be started, or exited."""

    code = "worker_unavailable"


class ToolTimeoutError(ToolError):
    """The tool worker did not answer within the configured timeout."""

    code = "timeout"


class WorkerProtocolError(ToolError):
    """The tool worker sent a response that could not be decoded."""

    code = "protocol_error"


class RemoteToolError(ToolError):
    """The tool worker reported an error for a call."""

    code = "remote_error"


class WorkspaceError(ToolError):
    """The workspace API rejected a request or could not be reached."""

    code = "workspace_error"


class ModelError(Exception):
    """The model completion backend failed. Fatal to the run."""
