"""Request loop of the tool worker process.

The worker reads one request envelope per line from stdin and writes one
response envelope per line to stdout. It never exits because of a failing
tool: every error becomes an error envelope for that request.
"""

import logging
from typing import IO, Any

import httpx

from quill_server.worker import protocol
from quill_server.worker.tools import WORKER_TOOLS, WorkerTool

logger = logging.getLogger(__name__)


class WorkerServer:
    """Dispatches worker requests to the registered stateless tools."""

    def __init__(
        self,
        http: httpx.Client,
        tools: dict[str, WorkerTool] | None = None,
    ) -> None:
        self.http = http
        self.tools = tools if tools is not None else WORKER_TOOLS

    def handle(self, request: protocol.WorkerRequest) -> protocol.WorkerResponse:
        """Execute a single request and build its response."""
        if request.method == protocol.METHOD_LIST_TOOLS:
            return protocol.success_response(request.id, list(self.tools))

        if request.method != protocol.METHOD_CALL_TOOL:
            return protocol.error_response(
                request.id, f"Unknown method: {request.method}"
            )

        name = request.params.get("name")
        arguments: Any = request.params.get("arguments") or {}
        tool = self.tools.get(name) if isinstance(name, str) else None
        if tool is None:
            return protocol.error_response(request.id, f"Unknown tool: {name}")
        if not isinstance(arguments, dict):
            return protocol.error_response(request.id, "Tool arguments must be an object")

        try:
            payload = tool(arguments, self.http)
        except Exception as e:
            logger.warning(f"Tool {name} failed: {e}")
            return protocol.error_response(request.id, str(e) or type(e).__name__)

        return protocol.success_response(request.id, payload)

    def handle_line(self, line: str) -> protocol.WorkerResponse | None:
        """Parse and execute one request line.

        Returns:
            The response to write, or None for lines that carry no request id
        """
        if not line.strip():
            return None
        try:
            request = protocol.parse_request(line)
        except ValueError as e:
            logger.error(f"Ignoring unparseable request: {e}")
            return None
        return self.handle(request)

    def serve(self, stdin: IO[str], stdout: IO[str]) -> None:
        """Serve requests until stdin is closed."""
        logger.info(f"Tool worker serving {len(self.tools)} tools")
        for line in stdin:
            response = self.handle_line(line)
            if response is None:
                continue
            stdout.write(protocol.encode(response).decode("utf-8"))
            stdout.flush()
        logger.info("Tool worker input closed, exiting")
