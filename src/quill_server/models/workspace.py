"""Pydantic models for the workspace connection API."""

from pydantic import BaseModel, Field


class WorkspaceConnectRequest(BaseModel):
    """Request body for PUT /api/v1/workspace."""

    token: str = Field(min_length=1, description="Notion integration access token")


class WorkspaceStatusResponse(BaseModel):
    """Whether the user's Notion workspace is connected."""

    connected: bool = Field(description="Whether a workspace token is stored")
