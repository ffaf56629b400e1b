"""Contract tests for the search tools exposed by the MCP server."""

import asyncio
import json
from unittest.mock import MagicMock

import pytest

from docsearch.errors import BatchCommitError, CacheConstructionError
from docsearch.mcp_server.server import (
    GENERIC_TOOL,
    MAX_TOP_K,
    build_server,
    handle_tool_call,
    tool_definitions,
    tool_name,
)

COLLECTIONS = ["laravel", "livewire"]


@pytest.fixture
def facade():
    mock = MagicMock()
    mock.default_top_k = 20
    mock.query.return_value = ["Routes are defined in routes/web.php.", "Named routes"]
    return mock


def _call(facade, name, arguments):
    return asyncio.run(handle_tool_call(facade, COLLECTIONS, name, arguments))


class TestToolDefinitions:
    def test_one_tool_per_collection_plus_generic(self):
        names = [tool.name for tool in tool_definitions(COLLECTIONS, 20)]
        assert names == ["search_laravel", "search_livewire", GENERIC_TOOL]

    def test_query_is_required(self):
        tool = tool_definitions(COLLECTIONS, 20)[0]
        assert tool.inputSchema["required"] == ["query"]
        assert tool.inputSchema["properties"]["top_k"]["default"] == 20

    def test_generic_tool_lists_collections(self):
        generic = tool_definitions(COLLECTIONS, 20)[-1]
        assert generic.inputSchema["properties"]["collection"]["enum"] == COLLECTIONS
        assert set(generic.inputSchema["required"]) == {"collection", "query"}

    def test_build_server(self, facade):
        assert build_server(facade, COLLECTIONS).name == "docsearch"


class TestSearchResponses:
    def test_documents_payload(self, facade):
        result = _call(facade, tool_name("laravel"), {"query": "routing"})
        assert len(result) == 1
        assert json.loads(result[0].text) == {
            "documents": ["Routes are defined in routes/web.php.", "Named routes"]
        }
        facade.query.assert_called_once_with("laravel", "routing", 20)

    def test_generic_tool_routes_by_collection(self, facade):
        _call(facade, GENERIC_TOOL, {"collection": "livewire", "query": "components", "top_k": 5})
        facade.query.assert_called_once_with("livewire", "components", 5)

    def test_no_results_message(self, facade):
        facade.query.return_value = []
        result = _call(facade, tool_name("laravel"), {"query": "kubernetes"})
        assert result[0].text == "No relevant laravel documentation found for the query."

    def test_top_k_is_capped(self, facade):
        _call(facade, tool_name("laravel"), {"query": "routing", "top_k": 500})
        facade.query.assert_called_once_with("laravel", "routing", MAX_TOP_K)


class TestErrors:
    def test_unknown_tool(self, facade):
        result = _call(facade, "search_symfony", {"query": "routing"})
        assert result[0].text == "Unknown tool: search_symfony"
        facade.query.assert_not_called()

    def test_unknown_collection(self, facade):
        result = _call(facade, GENERIC_TOOL, {"collection": "symfony", "query": "routing"})
        assert json.loads(result[0].text) == {"error": "unknown_collection", "collection": "symfony"}

    @pytest.mark.parametrize("query", ["", "   ", "x" * 1001, 42])
    def test_invalid_query(self, facade, query):
        result = _call(facade, tool_name("laravel"), {"query": query})
        assert json.loads(result[0].text) == {"error": "invalid_query"}
        facade.query.assert_not_called()

    @pytest.mark.parametrize("top_k", [0, -3, "many"])
    def test_invalid_top_k(self, facade, top_k):
        result = _call(facade, tool_name("laravel"), {"query": "routing", "top_k": top_k})
        assert json.loads(result[0].text) == {"error": "invalid_top_k"}

    def test_backend_failure_is_reported_not_raised(self, facade):
        facade.query.side_effect = CacheConstructionError("laravel", OSError("locked"))
        result = _call(facade, tool_name("laravel"), {"query": "routing"})
        payload = json.loads(result[0].text)
        assert payload["error"] == "CacheConstructionError"
        assert "laravel" in payload["message"]

    def test_error_payload_carries_extra_fields(self):
        error = BatchCommitError(3, "storage", OSError("disk full"))
        assert error.to_dict()["batch_index"] == 3
        assert error.to_dict()["stage"] == "storage"
