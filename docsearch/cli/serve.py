"""CLI command for running the MCP server over stdio."""

import asyncio
import logging
from typing import Annotated

import typer

from config.settings import get_settings
from docsearch.mcp_server.server import serve as serve_stdio

app = typer.Typer()


@app.command()
def serve(
    collections: Annotated[
        list[str] | None,
        typer.Option("--collection", "-c", help="Collection to expose (repeatable)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Serve the configured collections as MCP search tools on stdio."""
    settings = get_settings()
    if collections:
        settings.docsearch_collections = collections

    # Never log to stdout: it carries the protocol.
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        filename=settings.docsearch_log_file,
    )
    asyncio.run(serve_stdio(settings))
