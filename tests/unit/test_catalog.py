"""Unit tests for the tool catalog and argument validation."""

import pytest

from quill_server.tools.catalog import (
    get_catalog,
    get_descriptor,
    to_ollama_tools,
    validate_arguments,
)
from quill_server.tools.errors import UnknownToolError, ValidationError

EXPECTED_TOOLS = [
    "web_search",
    "analyze_notes",
    "get_weather",
    "extract_entities",
    "create_note",
    "update_note",
    "search_notion",
    "get_notion_page",
    "create_notion_page",
    "append_to_notion",
    "list_notion_databases",
]


def test_catalog_lists_all_tools_in_stable_order():
    """The catalog always advertises every tool in the same order."""
    assert [tool.name for tool in get_catalog()] == EXPECTED_TOOLS
    assert get_catalog() is get_catalog()


def test_catalog_names_are_unique():
    names = [tool.name for tool in get_catalog()]
    assert len(names) == len(set(names))


def test_every_descriptor_has_object_schema():
    for tool in get_catalog():
        assert tool.parameters["type"] == "object"
        assert "properties" in tool.parameters
        assert "required" in tool.parameters
        for required in tool.parameters["required"]:
            assert required in tool.parameters["properties"]


def test_descriptor_categories():
    categories = {tool.name: tool.category for tool in get_catalog()}
    assert categories["create_note"] == "local"
    assert categories["update_note"] == "local"
    assert categories["web_search"] == "remote"
    assert categories["analyze_notes"] == "remote"
    assert categories["get_weather"] == "remote"
    assert categories["extract_entities"] == "remote"
    assert categories["search_notion"] == "workspace"
    assert categories["list_notion_databases"] == "workspace"


def test_enriched_parameters_are_not_required():
    """Parameters filled in by enrichment must not be demanded from the model."""
    assert "notes" not in get_descriptor("analyze_notes").parameters["required"]
    assert "text" not in get_descriptor("extract_entities").parameters["required"]


def test_get_descriptor_unknown_tool():
    with pytest.raises(UnknownToolError) as exc_info:
        get_descriptor("delete_everything")

    assert exc_info.value.message == "Unknown tool: delete_everything"
    assert exc_info.value.code == "unknown_tool"


def test_validate_arguments_accepts_valid_dict():
    args = validate_arguments(get_descriptor("get_weather"), {"location": "Paris"})
    assert args == {"location": "Paris"}


def test_validate_arguments_decodes_json_string():
    args = validate_arguments(
        get_descriptor("update_note"),
        '{"noteId": "n1", "newContent": "hello", "mode": "replace"}',
    )
    assert args == {"noteId": "n1", "newContent": "hello", "mode": "replace"}


def test_validate_arguments_treats_empty_as_no_arguments():
    assert validate_arguments(get_descriptor("list_notion_databases"), None) == {}
    assert validate_arguments(get_descriptor("list_notion_databases"), "") == {}


def test_validate_arguments_rejects_missing_required():
    with pytest.raises(ValidationError) as exc_info:
        validate_arguments(get_descriptor("update_note"), {"noteId": "n1"})

    assert "update_note" in exc_info.value.message
    assert "newContent" in exc_info.value.message


def test_validate_arguments_rejects_bad_enum():
    with pytest.raises(ValidationError) as exc_info:
        validate_arguments(
            get_descriptor("update_note"),
            {"noteId": "n1", "newContent": "x", "mode": "prepend"},
        )

    assert "mode" in exc_info.value.message


def test_validate_arguments_rejects_wrong_type():
    with pytest.raises(ValidationError):
        validate_arguments(get_descriptor("web_search"), {"query": "ai", "numResults": "five"})


def test_validate_arguments_rejects_out_of_range():
    with pytest.raises(ValidationError):
        validate_arguments(get_descriptor("web_search"), {"query": "ai", "numResults": 50})


def test_validate_arguments_rejects_invalid_json():
    with pytest.raises(ValidationError) as exc_info:
        validate_arguments(get_descriptor("get_weather"), "{location: Paris")

    assert "not valid JSON" in exc_info.value.message


def test_validate_arguments_rejects_non_object_json():
    with pytest.raises(ValidationError):
        validate_arguments(get_descriptor("get_weather"), '["Paris"]')


def test_to_ollama_tools_format():
    tools = to_ollama_tools(get_catalog())

    assert len(tools) == len(EXPECTED_TOOLS)
    first = tools[0]
    assert first["type"] == "function"
    assert first["function"]["name"] == "web_search"
    assert first["function"]["description"]
    assert first["function"]["parameters"]["required"] == ["query"]
