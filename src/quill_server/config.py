"""Configuration module for quill-server using pydantic-settings."""

import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_worker_command() -> list[str]:
    return [sys.executable, "-m", "quill_server.worker"]


class QuillServerSettings(BaseSettings):
    """Main configuration settings for quill-server.

    All settings can be overridden via environment variables with the QUILL_ prefix.
    For example, QUILL_OLLAMA_HOST will override the ollama_host setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Ollama
    ollama_host: str = "http://localhost:11434"
    model: str = "llama3.1:8b"

    # Data directories (relative to data_dir)
    data_dir: str = "."
    notes_dir: str = "notes"
    chat_history_dir: str = "chat_history"
    credentials_file: str = "workspace_credentials.json"

    # Tool worker
    worker_enabled: bool = True
    worker_command: list[str] = Field(default_factory=_default_worker_command)
    worker_timeout: float = 30.0

    # Orchestration
    max_tool_iterations: int = 3

    # Notion workspace
    notion_api_url: str = "https://api.notion.com/v1"
    notion_version: str = "2022-06-28"
    notion_timeout: float = 15.0

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="QUILL_")

    # --- Resolved paths (computed from data_dir + relative dirs) ---

    @property
    def resolved_notes_dir(self) -> Path:
        """Get the full path to the notes directory."""
        return Path(self.data_dir) / self.notes_dir

    @property
    def resolved_chat_history_dir(self) -> Path:
        """Get the full path to the chat history directory."""
        return Path(self.data_dir) / self.chat_history_dir

    @property
    def resolved_credentials_file(self) -> Path:
        """Get the full path to the workspace credentials file."""
        return Path(self.data_dir) / self.credentials_file
