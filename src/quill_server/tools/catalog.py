"""Static catalog of the tools advertised to the model.

The catalog is data: a fixed, ordered tuple of descriptors. All tools are
always advertised; authorization is enforced by the handlers at dispatch
time, never by hiding tools here.
"""

import json
import logging
from typing import Any

import jsonschema

from quill_server.tools.errors import UnknownToolError, ValidationError
from quill_server.tools.types import ToolDescriptor

logger = logging.getLogger(__name__)

TOOL_CATALOG: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="web_search",
        description=(
            "Search the web for current information, facts, or context that is "
            "not in the user's notes, such as recent events or news."
        ),
        parameters={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "The search query to look up",
                },
                "numResults": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 10,
                    "description": "Number of search results to return (default: 5)",
                },
            },
            "required": ["query"],
        },
        category="remote",
    ),
    ToolDescriptor(
        name="analyze_notes",
        description=(
            "Analyze the user's notes: a summary, topic keywords, sentiment, "
            "action items, or statistics."
        ),
        parameters={
            "type": "object",
            "properties": {
                "analysisType": {
                    "type": "string",
                    "enum": [
                        "summary",
                        "topics",
                        "sentiment",
                        "actionItems",
                        "statistics",
                    ],
                    "description": (
                        "'summary' for an overview, 'topics' for keywords, "
                        "'sentiment' for mood, 'actionItems' for todos, "
                        "'statistics' for counts and dates"
                    ),
                },
            },
            "required": ["analysisType"],
        },
        category="remote",
    ),
    ToolDescriptor(
        name="get_weather",
        description=(
            "Get the current weather for a location. Use when the user mentions "
            "the weather or asks about current conditions."
        ),
        parameters={
            "type": "object",
            "properties": {
                "location": {
                    "type": "string",
                    "description": "City name or location to get weather for",
                },
            },
            "required": ["location"],
        },
        category="remote",
    ),
    ToolDescriptor(
        name="extract_entities",
        description=(
            "Extract emails, URLs, dates and phone numbers from text. When no "
            "text is given, all of the user's notes are searched."
        ),
        parameters={
            "type": "object",
            "properties": {
                "text": {
                    "type": "string",
                    "description": "Text to extract entities from (defaults to all notes)",
                },
            },
            "required": [],
        },
        category="remote",
    ),
    ToolDescriptor(
        name="create_note",
        description=(
            "Create a new note for the user. Use when the user asks to save, "
            "remember, write down or jot down something new."
        ),
        parameters={
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "description": "Optional title for the note",
                },
                "content": {
                    "type": "string",
                    "description": "The content of the note to create",
                },
                "tags": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Optional tags for categorizing the note",
                },
            },
            "required": ["content"],
        },
        category="local",
    ),
    ToolDescriptor(
        name="update_note",
        description=(
            "Append to or replace the content of an existing note, usually the "
            "note the user is viewing. Only use when the user explicitly asks "
            "to add something to or change their note."
        ),
        parameters={
            "type": "object",
            "properties": {
                "noteId": {
                    "type": "string",
                    "description": "The ID of the note to update",
                },
                "newContent": {
                    "type": "string",
                    "description": "Content to append to or replace in the note",
                },
                "mode": {
                    "type": "string",
                    "enum": ["append", "replace"],
                    "description": "Append to existing content or replace it (default: append)",
                },
            },
            "required": ["noteId", "newContent"],
        },
        category="local",
    ),
    ToolDescriptor(
        name="search_notion",
        description="Search for pages in the user's connected Notion workspace.",
        parameters={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query to find Notion pages",
                },
            },
            "required": ["query"],
        },
        category="workspace",
    ),
    ToolDescriptor(
        name="get_notion_page",
        description="Read the full content of a Notion page by ID.",
        parameters={
            "type": "object",
            "properties": {
                "pageId": {
                    "type": "string",
                    "description": "The ID of the Notion page to retrieve",
                },
            },
            "required": ["pageId"],
        },
        category="workspace",
    ),
    ToolDescriptor(
        name="create_notion_page",
        description="Create a new page in a Notion database.",
        parameters={
            "type": "object",
            "properties": {
                "databaseId": {
                    "type": "string",
                    "description": "The ID of the Notion database to create the page in",
                },
                "title": {
                    "type": "string",
                    "description": "Title of the new page",
                },
                "content": {
                    "type": "string",
                    "description": "Content to add to the new page",
                },
            },
            "required": ["databaseId", "title", "content"],
        },
        category="workspace",
    ),
    ToolDescriptor(
        name="append_to_notion",
        description="Append content to an existing Notion page.",
        parameters={
            "type": "object",
            "properties": {
                "pageId": {
                    "type": "string",
                    "description": "The ID of the Notion page to append to",
                },
                "content": {
                    "type": "string",
                    "description": "Content to append to the page",
                },
            },
            "required": ["pageId", "content"],
        },
        category="workspace",
    ),
    ToolDescriptor(
        name="list_notion_databases",
        description=(
            "List the Notion databases the user has shared, to find where new "
            "pages can be created."
        ),
        parameters={
            "type": "object",
            "properties": {},
            "required": [],
        },
        category="workspace",
    ),
)

_BY_NAME: dict[str, ToolDescriptor] = {tool.name: tool for tool in TOOL_CATALOG}


def get_catalog() -> tuple[ToolDescriptor, ...]:
    """Return every tool descriptor, always in the same order."""
    return TOOL_CATALOG


def get_descriptor(name: str) -> ToolDescriptor:
    """Look up a descriptor by tool name.

    Raises:
        UnknownToolError: If no tool has this name
    """
    try:
        return _BY_NAME[name]
    except KeyError:
        raise UnknownToolError(name) from None


def validate_arguments(descriptor: ToolDescriptor, arguments: Any) -> dict[str, Any]:
    """Validate tool-call arguments against the descriptor's schema.

    Arguments may arrive as a dict or as a JSON-encoded object string,
    depending on the model backend.

    Returns:
        The decoded argument dict

    Raises:
        ValidationError: If the arguments cannot be decoded or do not match
    """
    if arguments is None or arguments == "":
        arguments = {}
    if isinstance(arguments, str):
        try:
            arguments = json.loads(arguments)
        except json.JSONDecodeError as e:
            raise ValidationError(
                f"Arguments for {descriptor.name} are not valid JSON: {e.msg}"
            ) from e

    try:
        jsonschema.validate(instance=arguments, schema=descriptor.parameters)
    except jsonschema.ValidationError as e:
        path = ".".join(str(part) for part in e.absolute_path)
        where = f" at '{path}'" if path else ""
        raise ValidationError(
            f"Invalid arguments for {descriptor.name}{where}: {e.message}"
        ) from e

    return dict(arguments)


def to_ollama_tools(tools: tuple[ToolDescriptor, ...]) -> list[dict[str, Any]]:
    """Convert descriptors to the function-tool format used by Ollama."""
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters,
            },
        }
        for tool in tools
    ]
