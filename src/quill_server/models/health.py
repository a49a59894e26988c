"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of quill-server.
        ollama_connected: Whether Ollama is reachable, if the client is initialized.
        ollama_host: The Ollama host URL, if the client is initialized.
        worker_configured: Whether the remote tool worker is configured.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of quill-server")
    ollama_connected: bool | None = Field(
        default=None,
        description="Whether Ollama is connected",
    )
    ollama_host: str | None = Field(
        default=None,
        description="Ollama host URL",
    )
    worker_configured: bool | None = Field(
        default=None,
        description="Whether the remote tool worker is configured",
    )
