"""docsearch CLI entry point."""

import typer

from docsearch.cli.chunk import chunk
from docsearch.cli.drop import drop
from docsearch.cli.load import load
from docsearch.cli.search import search
from docsearch.cli.serve import serve

app = typer.Typer(
    name="docsearch",
    help="Chunk documentation sets, index them by embedding, and search them from the shell or over MCP.",
)

app.command(name="chunk")(chunk)
app.command(name="load")(load)
app.command(name="search")(search)
app.command(name="drop")(drop)
app.command(name="serve")(serve)


if __name__ == "__main__":
    app()
