"""MCP server exposing semantic search over documentation collections as tools."""

import asyncio
import json
import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from config.settings import Settings, get_settings
from docsearch.errors import DocsearchError
from docsearch.retrieval.facade import RetrievalFacade
from docsearch.runtime import build_facade

logger = logging.getLogger(__name__)

SERVER_NAME = "docsearch"
GENERIC_TOOL = "search_docs"
MAX_QUERY_LENGTH = 1000
MAX_TOP_K = 50

INSTRUCTIONS = (
    "Call the search tool for a documentation set whenever the user asks about it, "
    "before answering. The indexed documentation is more current than your training data."
)


def tool_name(collection: str) -> str:
    return f"search_{collection}"


def tool_definitions(collections: list[str], default_top_k: int) -> list[Tool]:
    top_k_schema = {
        "type": "integer",
        "default": default_top_k,
        "description": f"Number of results (max {MAX_TOP_K})",
    }
    tools = [
        Tool(
            name=tool_name(collection),
            description=(
                f"Search the {collection} documentation by semantic similarity. "
                f"Call this first for any question about {collection}."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "query": {"type": "string", "description": "Natural language search query"},
                    "top_k": top_k_schema,
                },
                "required": ["query"],
            },
        )
        for collection in collections
    ]
    tools.append(
        Tool(
            name=GENERIC_TOOL,
            description="Search any indexed documentation collection by semantic similarity.",
            inputSchema={
                "type": "object",
                "properties": {
                    "collection": {"type": "string", "enum": list(collections)},
                    "query": {"type": "string", "description": "Natural language search query"},
                    "top_k": top_k_schema,
                },
                "required": ["collection", "query"],
            },
        )
    )
    return tools


def _error(code: str, **extra) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps({"error": code, **extra}))]


async def handle_tool_call(
    facade: RetrievalFacade,
    collections: list[str],
    name: str,
    arguments: dict,
) -> list[TextContent]:
    """Dispatch one tool call. Failures come back as ``{"error": ...}`` payloads."""
    if name == GENERIC_TOOL:
        collection = arguments.get("collection", "")
    else:
        collection = next((c for c in collections if tool_name(c) == name), None)
        if collection is None:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]

    if collection not in collections:
        return _error("unknown_collection", collection=collection)

    query = arguments.get("query", "")
    if not isinstance(query, str) or not query.strip() or len(query) > MAX_QUERY_LENGTH:
        return _error("invalid_query")

    try:
        top_k = int(arguments.get("top_k", facade.default_top_k))
    except (TypeError, ValueError):
        return _error("invalid_top_k")
    if top_k <= 0:
        return _error("invalid_top_k")
    top_k = min(top_k, MAX_TOP_K)

    logger.info("Received query on %s: %s", collection, query)
    try:
        documents = await asyncio.to_thread(facade.query, collection, query, top_k)
    except DocsearchError as e:
        logger.error("Search on %s failed: %s", collection, e)
        return [TextContent(type="text", text=json.dumps(e.to_dict()))]

    if not documents:
        return [
            TextContent(
                type="text",
                text=f"No relevant {collection} documentation found for the query.",
            )
        ]
    return [TextContent(type="text", text=json.dumps({"documents": documents}, ensure_ascii=False))]


def build_server(facade: RetrievalFacade, collections: list[str]) -> Server:
    """Create an MCP server whose tools search ``collections`` through ``facade``."""
    server = Server(SERVER_NAME, instructions=INSTRUCTIONS)
    tools = tool_definitions(collections, facade.default_top_k)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return tools

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        return await handle_tool_call(facade, collections, name, arguments or {})

    return server


async def serve(settings: Settings) -> None:
    facade = build_facade(settings)
    server = build_server(facade, settings.docsearch_collections)
    logger.info("Serving collections over stdio: %s", ", ".join(settings.docsearch_collections))
    async with stdio_server() as (read, write):
        await server.run(read, write, server.create_initialization_options())


def main():
    settings = get_settings()
    # stdout carries the protocol; logs go to stderr or a file.
    logging.basicConfig(
        level=logging.INFO,
        filename=settings.docsearch_log_file,
        format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
    )
    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
