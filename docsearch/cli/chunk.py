"""CLI command for splitting a documentation directory into a chunk file."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from config.settings import get_settings
from docsearch.errors import DocsearchError
from docsearch.ingestion.pipeline import run_chunking_pipeline
from docsearch.models.segmentation import SegmentationConfig

console = Console()
app = typer.Typer()


@app.command()
def chunk(
    input_dir: Annotated[
        Path,
        typer.Argument(help="Directory containing the documents to chunk"),
    ],
    chunk_size: Annotated[
        int | None,
        typer.Option("--chunk-size", help="Maximum chunk size in characters"),
    ] = None,
    chunk_overlap: Annotated[
        int | None,
        typer.Option("--chunk-overlap", help="Overlap between chunks in characters"),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Where to write the chunk file"),
    ] = None,
    pattern: Annotated[
        str,
        typer.Option("--pattern", help="Glob of files to include"),
    ] = "*.md",
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Split every matching document under INPUT_DIR into overlapping chunks."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()
    try:
        config = SegmentationConfig(
            max_size=chunk_size if chunk_size is not None else settings.docsearch_chunk_size,
            overlap=chunk_overlap if chunk_overlap is not None else settings.docsearch_chunk_overlap,
        )
    except DocsearchError as e:
        console.print(f"[bold red]{e}[/bold red]")
        raise typer.Exit(1)

    if not input_dir.is_dir():
        console.print(f"[bold red]Not a directory:[/bold red] {input_dir}")
        raise typer.Exit(1)

    console.print("[bold]docsearch chunking[/bold]")
    console.print(f"Input: {input_dir} ({pattern})")
    console.print(f"Chunk size: {config.max_size} chars, overlap: {config.overlap} chars")
    console.print()

    with console.status("[bold green]Chunking documents..."):
        result = run_chunking_pipeline(
            input_dir=input_dir,
            output_dir=output_dir or settings.chunks_path,
            config=config,
            pattern=pattern,
        )

    console.print("[bold green]Chunking complete![/bold green]")
    console.print(f"  Files processed: {result['files_processed']}")
    console.print(f"  Files failed: {result['files_failed']}")
    console.print(f"  Chunks written: {result['chunks']}")
    console.print(f"  Output: {result['output_file']}")
