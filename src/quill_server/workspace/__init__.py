"""Third-party workspace (Notion) integration.

Provides the connector the dispatcher delegates workspace tools to, and the
store holding each user's workspace access token.
"""

from quill_server.workspace.connector import NotionConnector
from quill_server.workspace.credentials import CredentialStore

__all__ = ["CredentialStore", "NotionConnector"]
