"""One-shot scan command."""

from pathlib import Path

import typer

from depgraph_viewer.cli_utils.constants import console
from depgraph_viewer.cli_utils.helpers import (
    apply_settings,
    build_viewer,
    format_status,
    syncify,
)
from depgraph_viewer.exceptions import ViewerError
from depgraph_viewer.http_client import close_async_http_client
from depgraph_viewer.state import Severity


@syncify
async def scan(
    path: str = typer.Argument(
        ...,
        help="Directory to scan, as seen by the analysis server.",
    ),
    server: str | None = typer.Option(
        None,
        "--server",
        "-s",
        help="Base URL of the analysis server (default: http://localhost:8080).",
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the graph page and exported files (default: current directory).",
    ),
    relayout: bool = typer.Option(
        False,
        "--relayout",
        help="Run the layout once more after the initial render.",
    ),
    export: bool = typer.Option(
        False,
        "--export",
        "-e",
        help="Export the graph as dependency-graph.png.",
    ),
    export_html: bool = typer.Option(
        False,
        "--html",
        help="Export a standalone page as dependency-graph.html.",
    ),
    export_json: bool = typer.Option(
        False,
        "--json",
        help="Export elements and layout as dependency-graph.json.",
    ),
    open_browser: bool = typer.Option(
        False,
        "--open",
        help="Open the graph page in the web browser.",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Request timeout in seconds (default: 30).",
    ),
    verbose: bool | None = typer.Option(
        None,
        "--verbose",
        "-v",
        help="Enable verbose output. If not specified, uses config file default.",
    ),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Disable SSL certificate verification for HTTPS requests.",
    ),
    ca_cert: Path | None = typer.Option(
        None,
        "--ca-cert",
        help="Path to custom CA certificate file for SSL verification.",
    ),
) -> None:
    """
    Scan a directory and render its dependency graph.

    Example:
        depgraph-viewer scan /srv/repo
        depgraph-viewer scan /srv/repo --server http://analysis:8080 --export
    """
    apply_settings(
        server=server,
        timeout=timeout,
        output_dir=output_dir,
        verbose=verbose,
        insecure=insecure,
        ca_cert=ca_cert,
    )
    viewer = build_viewer(open_browser=open_browser)

    try:
        data = await viewer.dispatch("submit", path)
    finally:
        # Clean up HTTP clients
        await close_async_http_client()

    if data is None:
        message = viewer.state.status_message
        if message is None or message.severity == Severity.ERROR:
            raise typer.Exit(code=1)
        return

    console.print(
        f"[green]Rendered {len(data.nodes)} nodes and {len(data.edges)} edges to: "
        f"{viewer.renderer.surface.path}[/green]"
    )

    try:
        if relayout:
            await viewer.dispatch("relayout")
            console.print("[cyan]Layout refreshed.[/cyan]")
        if export:
            image_path = await viewer.dispatch("export_image")
            console.print(f"[green]Graph image exported to: {image_path}[/green]")
        if export_html:
            html_path = await viewer.dispatch("export_html")
            console.print(f"[green]Graph page exported to: {html_path}[/green]")
        if export_json:
            json_path = await viewer.dispatch("export_json")
            console.print(f"[green]Graph data exported to: {json_path}[/green]")
    except ViewerError as e:
        console.print(format_status(e.status_message()))
        raise typer.Exit(code=1)
