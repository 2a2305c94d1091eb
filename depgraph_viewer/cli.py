"""
Command-line interface for depgraph-viewer.
"""

import typer

from depgraph_viewer import __version__
from depgraph_viewer.cli_utils.constants import console
from depgraph_viewer.commands.scan import scan
from depgraph_viewer.commands.view import view

# --- Typer App ---
app = typer.Typer(
    help="Interactive viewer for dependency graphs computed by an analysis server."
)

app.command("scan")(scan)
app.command("view")(view)


@app.command()
def version():
    """Show the installed version."""
    console.print(f"depgraph-viewer {__version__}")


if __name__ == "__main__":
    app()
