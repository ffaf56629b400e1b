"""CLI command for deleting a collection."""

import logging
from typing import Annotated

import typer
from rich.console import Console

from config.settings import get_settings
from docsearch.vectorstore.chroma_store import ChromaStore

console = Console()
app = typer.Typer()


@app.command()
def drop(
    collection: Annotated[
        str,
        typer.Argument(help="Collection to delete"),
    ],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Delete COLLECTION and every chunk stored in it."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()
    store = ChromaStore(path=str(settings.db_path))

    if not store.has_collection(collection):
        console.print(f"Collection '{collection}' does not exist.")
        return

    if not yes:
        typer.confirm(
            f"Delete '{collection}' ({store.count(collection)} chunks)?",
            abort=True,
        )

    store.drop_collection(collection)
    console.print(f"[bold green]Dropped '{collection}'.[/bold green]")
