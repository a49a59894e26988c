"""Ollama client wrapper and integration layer.

This package provides the async client for communicating with the Ollama API
and the completion adapter used by the orchestration loop. All Ollama
interactions are async and use streaming.
"""

from quill_server.ollama.client import OllamaClient
from quill_server.ollama.completion import OllamaCompletionModel

__all__ = ["OllamaClient", "OllamaCompletionModel"]
