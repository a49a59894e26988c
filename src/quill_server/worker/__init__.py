"""Out-of-process tool worker and its client.

The worker hosts the stateless tools (web search, weather, entity extraction
and note analytics). The server talks to it through WorkerClient over a
line-framed JSON protocol on the worker's stdin/stdout.
"""

from quill_server.worker.client import WorkerClient

__all__ = ["WorkerClient"]
