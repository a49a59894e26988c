"""Async client for the out-of-process tool worker.

The client owns a single worker subprocess that is started lazily on first
use and reused until close(). Requests are written to the worker's stdin
and responses read from its stdout, one JSON envelope per line.
"""

import asyncio
import logging
import uuid
from typing import Any

from quill_server.tools.errors import (
    RemoteToolError,
    ToolTimeoutError,
    WorkerProtocolError,
    WorkerUnavailableError,
)
from quill_server.worker import protocol

logger = logging.getLogger(__name__)

# Generous per-line limit: analyze_notes requests carry the whole note corpus
_STREAM_LIMIT = 16 * 1024 * 1024


class WorkerClient:
    """Client for the tool worker process.

    Create one instance per hosting process (the app lifespan does this) and
    close it on shutdown. Use as an async context manager for scoped use.

    Attributes:
        command: argv used to start the worker, or None when not configured
        timeout: Seconds to wait for each tool call
    """

    def __init__(self, command: list[str] | None, timeout: float = 30.0) -> None:
        """Initialize the client without starting the worker.

        Args:
            command: argv to spawn the worker; None disables the worker
            timeout: Per-call timeout in seconds
        """
        self.command = list(command) if command else None
        self.timeout = timeout
        self._process: asyncio.subprocess.Process | None = None
        self._connect_lock = asyncio.Lock()
        self._request_lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return self.command is not None

    @property
    def connected(self) -> bool:
        return self._process is not None and self._process.returncode is None

    async def __aenter__(self) -> "WorkerClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def connect(self) -> None:
        """Start the worker process if it is not already running.

        Safe to call concurrently: only one process is ever started.

        Raises:
            WorkerUnavailableError: If no command is configured or the
                process cannot be started
        """
        if self.command is None:
            raise WorkerUnavailableError("Tool worker is not configured")

        async with self._connect_lock:
            if self.connected:
                return
            if self._process is not None:
                logger.warning(
                    f"Tool worker exited with code {self._process.returncode}, restarting"
                )
                self._process = None

            try:
                self._process = await asyncio.create_subprocess_exec(
                    *self.command,
                    stdin=asyncio.subprocess.PIPE,
                    stdout=asyncio.subprocess.PIPE,
                    limit=_STREAM_LIMIT,
                )
            except OSError as e:
                logger.error(f"Failed to start tool worker {self.command[0]}: {e}")
                raise WorkerUnavailableError(f"Tool worker could not be started: {e}") from e

            logger.info(f"Tool worker started (pid {self._process.pid})")

    async def _send(self, request: protocol.WorkerRequest) -> protocol.WorkerResponse:
        await self.connect()
        process = self._process
        if process is None or process.stdin is None or process.stdout is None:
            raise WorkerUnavailableError("Tool worker is not running")

        # One deadline covers waiting behind earlier calls, the write and every read
        try:
            async with asyncio.timeout(self.timeout):
                async with self._request_lock:
                    return await self._exchange(process.stdin, process.stdout, request)
        except TimeoutError:
            raise ToolTimeoutError(
                f"Tool worker did not respond within {self.timeout:g} seconds"
            ) from None

    async def _exchange(
        self,
        stdin: asyncio.StreamWriter,
        stdout: asyncio.StreamReader,
        request: protocol.WorkerRequest,
    ) -> protocol.WorkerResponse:
        try:
            stdin.write(protocol.encode(request))
            await stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            raise WorkerUnavailableError(f"Tool worker is not accepting requests: {e}") from e

        while True:
            try:
                line = await stdout.readline()
            except ValueError as e:
                raise WorkerProtocolError(f"Malformed worker response: {e}") from e

            if not line:
                raise WorkerUnavailableError("Tool worker exited unexpectedly")

            response = protocol.parse_response(line)
            if response.id == request.id:
                return response
            # Late answer to a call that already timed out
            logger.debug(f"Discarding stale worker response {response.id}")

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        """Call a tool on the worker and return its decoded payload.

        Raises:
            WorkerUnavailableError: Worker not configured, not startable, or exited
            ToolTimeoutError: No response within the timeout
            WorkerProtocolError: The response could not be decoded
            RemoteToolError: The worker reported an error for this call
        """
        request = protocol.call_tool_request(uuid.uuid4().hex, name, arguments)
        logger.debug(f"Calling worker tool {name} (request {request.id})")

        response = await self._send(request)
        if response.error is not None:
            raise RemoteToolError(response.error.message)
        if response.result is None:
            raise WorkerProtocolError("Malformed worker response: no result")
        return protocol.decode_payload(response.result)

    async def list_tools(self) -> list[str]:
        """Return the names of the tools the worker serves."""
        request = protocol.WorkerRequest(
            id=uuid.uuid4().hex, method=protocol.METHOD_LIST_TOOLS
        )
        response = await self._send(request)
        if response.error is not None:
            raise RemoteToolError(response.error.message)
        if response.result is None:
            raise WorkerProtocolError("Malformed worker response: no result")
        payload = protocol.decode_payload(response.result)
        if not isinstance(payload, list):
            raise WorkerProtocolError("Malformed worker response: tool list expected")
        return [str(name) for name in payload]

    async def close(self) -> None:
        """Stop the worker process. Safe to call when it was never started."""
        async with self._connect_lock:
            process = self._process
            self._process = None
            if process is None:
                return

            if process.returncode is None:
                if process.stdin is not None:
                    process.stdin.close()
                try:
                    await asyncio.wait_for(process.wait(), timeout=2.0)
                except asyncio.TimeoutError:
                    process.kill()
                    await process.wait()

            logger.info("Tool worker closed")
