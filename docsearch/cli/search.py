"""CLI command for querying a collection."""

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel

from config.settings import get_settings
from docsearch.errors import DocsearchError
from docsearch.runtime import build_facade

console = Console()
app = typer.Typer()


@app.command()
def search(
    query: Annotated[
        str,
        typer.Argument(help="Natural language search query"),
    ],
    collection: Annotated[
        str,
        typer.Option("--collection", "-c", help="Collection to search"),
    ],
    top_k: Annotated[
        int | None,
        typer.Option("--top-k", "-k", help="Number of results"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Print the stored chunks most similar to QUERY."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        settings = get_settings()
        with console.status("[bold green]Searching..."):
            facade = build_facade(settings)
            documents = facade.query(collection, query, top_k)
    except (DocsearchError, ValueError) as e:
        console.print(f"[bold red]{e}[/bold red]")
        raise typer.Exit(1)

    if not documents:
        console.print(f"No relevant {collection} documentation found for the query.")
        return

    for rank, text in enumerate(documents, start=1):
        console.print(Panel(text.strip(), title=f"#{rank}", title_align="left", border_style="blue"))
