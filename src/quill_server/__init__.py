"""quill-server: Headless FastAPI server for note assistance via Ollama.

This package provides a REST API and SSE streaming interface for asking
questions about a user's notes, letting the model call tools (note edits,
web search, weather, note analytics and the Notion workspace) along the way.
"""

from quill_server.app import create_app

__version__ = "0.1.0"

__all__ = ["create_app", "__version__"]
