"""Async connector for the Notion REST API.

The connector holds no user state: every operation takes the access token
of the user on whose behalf it runs.
"""

import logging
from typing import Any

import httpx

from quill_server.tools.errors import WorkspaceError
from quill_server.workspace.credentials import CredentialStore

logger = logging.getLogger(__name__)

# Notion rejects rich_text content longer than this per block
MAX_BLOCK_CHARS = 2000

_BLOCK_PREFIXES = {
    "paragraph": "",
    "heading_1": "# ",
    "heading_2": "## ",
    "heading_3": "### ",
    "bulleted_list_item": "• ",
    "numbered_list_item": "- ",
}


def _plain_text(rich_text: list[dict[str, Any]]) -> str:
    return "".join(part.get("plain_text", "") for part in rich_text)


def _page_title(page: dict[str, Any]) -> str:
    for prop in (page.get("properties") or {}).values():
        if isinstance(prop, dict) and prop.get("type") == "title":
            title = prop.get("title") or []
            if title and title[0].get("plain_text"):
                return title[0]["plain_text"]
    return "Untitled"


def _block_text(block: dict[str, Any]) -> str:
    block_type = block.get("type", "")
    body = block.get(block_type) or {}
    rich_text = body.get("rich_text")
    if rich_text is None:
        return ""
    text = _plain_text(rich_text)
    if block_type in _BLOCK_PREFIXES:
        return _BLOCK_PREFIXES[block_type] + text
    if block_type == "to_do":
        return f"{'[x]' if body.get('checked') else '[ ]'} {text}"
    if block_type == "code":
        return f"```\n{text}\n```"
    return ""


def paragraph_blocks(content: str) -> list[dict[str, Any]]:
    """Split content into paragraph blocks within Notion's size limit."""
    blocks = []
    for paragraph in content.split("\n\n"):
        if not paragraph.strip():
            continue
        for start in range(0, len(paragraph), MAX_BLOCK_CHARS):
            blocks.append(
                {
                    "object": "block",
                    "type": "paragraph",
                    "paragraph": {
                        "rich_text": [
                            {
                                "type": "text",
                                "text": {"content": paragraph[start : start + MAX_BLOCK_CHARS]},
                            }
                        ]
                    },
                }
            )
    return blocks


class NotionConnector:
    """Workspace connector backed by the Notion API.

    Attributes:
        credentials: Store of per-user access tokens
    """

    def __init__(
        self,
        credentials: CredentialStore,
        base_url: str = "https://api.notion.com/v1",
        notion_version: str = "2022-06-28",
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.credentials = credentials
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Notion-Version": notion_version},
            timeout=timeout,
            transport=transport,
        )

    def has_credential(self, user_id: str) -> bool:
        return self.credentials.get(user_id) is not None

    def get_credential(self, user_id: str) -> str | None:
        return self.credentials.get(user_id)

    def set_credential(self, user_id: str, token: str) -> None:
        self.credentials.set(user_id, token)

    def remove_credential(self, user_id: str) -> bool:
        return self.credentials.remove(user_id)

    async def _request(
        self,
        method: str,
        path: str,
        token: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Notion request {method} {path} failed: {e}")
            raise WorkspaceError(f"Could not reach Notion: {e}") from e

        if response.is_error:
            try:
                message = response.json().get("message", response.text)
            except ValueError:
                message = response.text
            logger.warning(f"Notion returned {response.status_code} for {method} {path}")
            raise WorkspaceError(f"Notion API error ({response.status_code}): {message}")

        return response.json()

    async def search(self, query: str, token: str) -> dict[str, Any]:
        """Search pages shared with the integration."""
        data = await self._request(
            "POST",
            "/search",
            token,
            json={
                "query": query,
                "filter": {"property": "object", "value": "page"},
                "page_size": 10,
            },
        )
        results = [
            {
                "id": page["id"],
                "title": _page_title(page),
                "url": page.get("url"),
                "created_time": page.get("created_time"),
                "last_edited_time": page.get("last_edited_time"),
            }
            for page in data.get("results", [])
        ]
        return {"query": query, "results": results, "count": len(results)}

    async def get_page(self, page_id: str, token: str) -> dict[str, Any]:
        """Fetch a page's title and its top-level blocks rendered as text."""
        page = await self._request("GET", f"/pages/{page_id}", token)
        blocks = await self._request(
            "GET", f"/blocks/{page_id}/children", token, params={"page_size": 100}
        )
        texts = (_block_text(block) for block in blocks.get("results", []))
        return {
            "id": page_id,
            "title": _page_title(page),
            "url": page.get("url"),
            "content": "\n\n".join(text for text in texts if text),
            "created_time": page.get("created_time"),
            "last_edited_time": page.get("last_edited_time"),
        }

    async def create_page(
        self, database_id: str, title: str, content: str, token: str
    ) -> dict[str, Any]:
        """Create a page titled ``title`` in a database."""
        body: dict[str, Any] = {
            "parent": {"database_id": database_id},
            "properties": {"Name": {"title": [{"text": {"content": title}}]}},
        }
        children = paragraph_blocks(content)
        if children:
            body["children"] = children

        page = await self._request("POST", "/pages", token, json=body)
        logger.info(f"Created Notion page {page.get('id')} in database {database_id}")
        return {"id": page.get("id"), "url": page.get("url"), "title": title, "success": True}

    async def append_page(self, page_id: str, content: str, token: str) -> dict[str, Any]:
        """Append content to the end of a page."""
        children = paragraph_blocks(content)
        if not children:
            raise WorkspaceError("Cannot append empty content to a Notion page")

        await self._request(
            "PATCH", f"/blocks/{page_id}/children", token, json={"children": children}
        )
        return {"pageId": page_id, "success": True, "message": "Content appended successfully"}

    async def list_databases(self, token: str) -> dict[str, Any]:
        """List databases shared with the integration."""
        data = await self._request(
            "POST",
            "/search",
            token,
            json={"filter": {"property": "object", "value": "database"}, "page_size": 20},
        )
        databases = []
        for db in data.get("results", []):
            title = db.get("title") or []
            databases.append(
                {
                    "id": db["id"],
                    "title": (title[0].get("plain_text") if title else None)
                    or "Untitled Database",
                    "url": db.get("url"),
                    "created_time": db.get("created_time"),
                    "last_edited_time": db.get("last_edited_time"),
                }
            )
        return {"databases": databases, "count": len(databases)}

    async def close(self) -> None:
        await self._client.aclose()
        logger.debug("NotionConnector closed")
