"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
Each router module defines endpoints for a specific domain (health, ask, notes, workspace).
"""

from quill_server.routers import ask, health, notes, workspace

__all__ = [
    "ask",
    "health",
    "notes",
    "workspace",
]
