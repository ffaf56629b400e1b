"""CLI command for loading a chunk file into a collection."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from config.settings import get_settings
from docsearch.errors import BatchCommitError, DocsearchError
from docsearch.ingestion.pipeline import run_load_pipeline
from docsearch.runtime import build_coordinator

console = Console()
app = typer.Typer()


@app.command()
def load(
    chunks_file: Annotated[
        Path,
        typer.Argument(help="JSONL chunk file produced by 'docsearch chunk'"),
    ],
    collection: Annotated[
        str,
        typer.Option("--collection", "-c", help="Target collection name"),
    ],
    reset: Annotated[
        bool,
        typer.Option("--reset", help="Empty the collection before loading"),
    ] = False,
    start_batch: Annotated[
        int,
        typer.Option("--start-batch", help="Resume from this batch index"),
    ] = 0,
    batch_size: Annotated[
        int | None,
        typer.Option("--batch-size", help="Chunks embedded and committed per batch"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Embed the chunks in CHUNKS_FILE and store them in a collection."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    if not chunks_file.is_file():
        console.print(f"[bold red]Chunk file not found:[/bold red] {chunks_file}")
        raise typer.Exit(1)

    try:
        settings = get_settings()
        with console.status("[bold green]Loading embedding model..."):
            coordinator = build_coordinator(settings, batch_size=batch_size)

        console.print(f"[bold]Loading {chunks_file} into '{collection}'[/bold]")
        console.print(f"Batch size: {coordinator.batch_size}, start batch: {start_batch}")

        with console.status("[bold green]Embedding and storing chunks..."):
            result = run_load_pipeline(
                chunks_file=chunks_file,
                collection=collection,
                coordinator=coordinator,
                reset=reset,
                start_batch=start_batch,
            )
    except BatchCommitError as e:
        console.print(f"[bold red]Batch {e.batch_index} failed during {e.stage}:[/bold red] {e.original}")
        console.print(f"Resume with: --start-batch {e.batch_index}")
        raise typer.Exit(1)
    except (DocsearchError, ValueError) as e:
        console.print(f"[bold red]{e}[/bold red]")
        raise typer.Exit(1)

    console.print("[bold green]Load complete![/bold green]")
    console.print(f"  Chunks read: {result['chunks_read']}")
    console.print(f"  Chunks stored: {result['chunks_stored']} in {result['batches']} batches")
    if result["first_id"] is not None:
        console.print(f"  Ids: {result['first_id']}-{result['last_id']}")
