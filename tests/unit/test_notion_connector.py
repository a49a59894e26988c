"""Unit tests for the Notion workspace connector and credential store."""

import json

import httpx
import pytest

from quill_server.tools.errors import WorkspaceError
from quill_server.workspace import CredentialStore, NotionConnector
from quill_server.workspace.connector import MAX_BLOCK_CHARS, paragraph_blocks


class NotionStub:
    """Records requests and replies with canned responses keyed by (method, path)."""

    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        status, body = self.responses.get(key, (404, {"message": "not stubbed"}))
        return httpx.Response(status, json=body)


@pytest.fixture
def credentials(tmp_path):
    return CredentialStore(tmp_path / "credentials.json")


def make_connector(credentials, stub):
    return NotionConnector(
        credentials=credentials,
        base_url="https://api.notion.test/v1",
        transport=httpx.MockTransport(stub),
    )


# --- CredentialStore ---


def test_credential_store_roundtrip(credentials):
    assert credentials.get("alice") is None

    credentials.set("alice", "token-a")
    credentials.set("bob", "token-b")

    assert credentials.get("alice") == "token-a"
    assert credentials.get("bob") == "token-b"
    assert json.loads(credentials.path.read_text()) == {"alice": "token-a", "bob": "token-b"}


def test_credential_store_remove(credentials):
    credentials.set("alice", "token-a")

    assert credentials.remove("alice") is True
    assert credentials.remove("alice") is False
    assert credentials.get("alice") is None


def test_connector_credential_helpers(credentials):
    connector = NotionConnector(credentials=credentials)

    assert connector.has_credential("alice") is False
    connector.set_credential("alice", "token-a")
    assert connector.has_credential("alice") is True
    assert connector.get_credential("alice") == "token-a"
    assert connector.remove_credential("alice") is True
    assert connector.has_credential("alice") is False


# --- paragraph_blocks ---


def test_paragraph_blocks_split_on_blank_lines():
    blocks = paragraph_blocks("First\n\nSecond\n\n   \n\nThird")

    texts = [b["paragraph"]["rich_text"][0]["text"]["content"] for b in blocks]
    assert texts == ["First", "Second", "Third"]


def test_paragraph_blocks_chunk_long_paragraphs():
    blocks = paragraph_blocks("x" * (MAX_BLOCK_CHARS + 10))

    assert len(blocks) == 2
    assert len(blocks[0]["paragraph"]["rich_text"][0]["text"]["content"]) == MAX_BLOCK_CHARS


def test_paragraph_blocks_empty():
    assert paragraph_blocks("  ") == []


# --- API operations ---


@pytest.mark.asyncio
async def test_search_returns_page_titles(credentials):
    stub = NotionStub(
        {
            ("POST", "/v1/search"): (
                200,
                {
                    "results": [
                        {
                            "id": "page-1",
                            "url": "https://notion.so/page-1",
                            "properties": {
                                "Name": {"type": "title", "title": [{"plain_text": "Roadmap"}]}
                            },
                        },
                        {"id": "page-2", "properties": {}},
                    ]
                },
            )
        }
    )
    connector = make_connector(credentials, stub)

    result = await connector.search("road", "token-a")
    await connector.close()

    assert result["count"] == 2
    assert [page["title"] for page in result["results"]] == ["Roadmap", "Untitled"]
    request = stub.requests[0]
    assert request.headers["Authorization"] == "Bearer token-a"
    assert request.headers["Notion-Version"] == "2022-06-28"
    assert json.loads(request.content)["filter"] == {"property": "object", "value": "page"}


@pytest.mark.asyncio
async def test_get_page_renders_blocks(credentials):
    stub = NotionStub(
        {
            ("GET", "/v1/pages/page-1"): (
                200,
                {"id": "page-1", "properties": {"title": {"type": "title", "title": [{"plain_text": "Plan"}]}}},
            ),
            ("GET", "/v1/blocks/page-1/children"): (
                200,
                {
                    "results": [
                        {"type": "heading_2", "heading_2": {"rich_text": [{"plain_text": "Goals"}]}},
                        {"type": "to_do", "to_do": {"rich_text": [{"plain_text": "Ship"}], "checked": True}},
                        {"type": "image", "image": {}},
                    ]
                },
            ),
        }
    )
    connector = make_connector(credentials, stub)

    page = await connector.get_page("page-1", "token-a")
    await connector.close()

    assert page["title"] == "Plan"
    assert page["content"] == "## Goals\n\n[x] Ship"


@pytest.mark.asyncio
async def test_create_page_sends_title_and_children(credentials):
    stub = NotionStub(
        {("POST", "/v1/pages"): (200, {"id": "page-9", "url": "https://notion.so/page-9"})}
    )
    connector = make_connector(credentials, stub)

    result = await connector.create_page("db-1", "Trip", "Pack bags\n\nBook hotel", "token-a")
    await connector.close()

    assert result == {
        "id": "page-9",
        "url": "https://notion.so/page-9",
        "title": "Trip",
        "success": True,
    }
    body = json.loads(stub.requests[0].content)
    assert body["parent"] == {"database_id": "db-1"}
    assert body["properties"]["Name"]["title"][0]["text"]["content"] == "Trip"
    assert len(body["children"]) == 2


@pytest.mark.asyncio
async def test_append_page(credentials):
    stub = NotionStub({("PATCH", "/v1/blocks/page-1/children"): (200, {"results": []})})
    connector = make_connector(credentials, stub)

    result = await connector.append_page("page-1", "More text", "token-a")
    await connector.close()

    assert result["success"] is True
    assert len(stub.requests) == 1


@pytest.mark.asyncio
async def test_append_empty_content_makes_no_request(credentials):
    stub = NotionStub({})
    connector = make_connector(credentials, stub)

    with pytest.raises(WorkspaceError):
        await connector.append_page("page-1", "  ", "token-a")
    await connector.close()

    assert stub.requests == []


@pytest.mark.asyncio
async def test_list_databases_untitled_fallback(credentials):
    stub = NotionStub(
        {
            ("POST", "/v1/search"): (
                200,
                {
                    "results": [
                        {"id": "db-1", "title": [{"plain_text": "Tasks"}]},
                        {"id": "db-2", "title": []},
                    ]
                },
            )
        }
    )
    connector = make_connector(credentials, stub)

    result = await connector.list_databases("token-a")
    await connector.close()

    assert result["count"] == 2
    assert [db["title"] for db in result["databases"]] == ["Tasks", "Untitled Database"]


@pytest.mark.asyncio
async def test_api_error_raises_workspace_error(credentials):
    stub = NotionStub({("POST", "/v1/search"): (401, {"message": "API token is invalid."})})
    connector = make_connector(credentials, stub)

    with pytest.raises(WorkspaceError) as exc_info:
        await connector.search("x", "bad-token")
    await connector.close()

    assert "401" in exc_info.value.message
    assert "API token is invalid." in exc_info.value.message


@pytest.mark.asyncio
async def test_network_error_raises_workspace_error(credentials):
    def handler(request):
        raise httpx.ConnectError("connection refused")

    connector = NotionConnector(credentials=credentials, transport=httpx.MockTransport(handler))

    with pytest.raises(WorkspaceError) as exc_info:
        await connector.list_databases("token-a")
    await connector.close()

    assert "Could not reach Notion" in exc_info.value.message
