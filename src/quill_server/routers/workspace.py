"""Workspace connection endpoints.

The access token is obtained by the client (e.g. through Notion's OAuth
flow) and handed to this server, which stores it per user.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from quill_server.dependencies import get_actor_id, get_connector
from quill_server.models.workspace import (
    WorkspaceConnectRequest,
    WorkspaceStatusResponse,
)
from quill_server.workspace import NotionConnector

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/workspace", tags=["workspace"])


@router.get("", response_model=WorkspaceStatusResponse)
async def get_workspace_status(
    actor_id: Annotated[str, Depends(get_actor_id)],
    connector: Annotated[NotionConnector, Depends(get_connector)],
) -> WorkspaceStatusResponse:
    """Report whether the user's Notion workspace is connected."""
    return WorkspaceStatusResponse(connected=connector.has_credential(actor_id))


@router.put("", response_model=WorkspaceStatusResponse, status_code=status.HTTP_200_OK)
async def connect_workspace(
    body: WorkspaceConnectRequest,
    actor_id: Annotated[str, Depends(get_actor_id)],
    connector: Annotated[NotionConnector, Depends(get_connector)],
) -> WorkspaceStatusResponse:
    """Store the user's Notion access token."""
    connector.set_credential(actor_id, body.token)
    logger.info(f"Connected Notion workspace for {actor_id}")
    return WorkspaceStatusResponse(connected=True)


@router.delete("", response_model=WorkspaceStatusResponse)
async def disconnect_workspace(
    actor_id: Annotated[str, Depends(get_actor_id)],
    connector: Annotated[NotionConnector, Depends(get_connector)],
) -> WorkspaceStatusResponse:
    """Forget the user's Notion access token."""
    if connector.remove_credential(actor_id):
        logger.info(f"Disconnected Notion workspace for {actor_id}")
    return WorkspaceStatusResponse(connected=False)
