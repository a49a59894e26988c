"""Entry point of the tool worker process.

Started by the server as ``python -m quill_server.worker``. stdout carries
the protocol, so all logging goes to stderr.
"""

import logging
import os
import sys

import httpx

from quill_server.worker.server import WorkerServer


def main() -> None:
    sys.stdin.reconfigure(encoding="utf-8")  # type: ignore[attr-defined]
    sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[attr-defined]
    logging.basicConfig(
        stream=sys.stderr,
        level=os.environ.get("QUILL_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s worker %(levelname)s %(name)s: %(message)s",
    )

    with httpx.Client(timeout=10.0, follow_redirects=True) as http:
        WorkerServer(http).serve(sys.stdin, sys.stdout)


if __name__ == "__main__":
    sys.exit(main())
