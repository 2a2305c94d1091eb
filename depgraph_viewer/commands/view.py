"""Interactive viewer session."""

from pathlib import Path

import typer
from rich.markup import escape
from rich.prompt import Prompt

from depgraph_viewer.cli_utils.constants import console
from depgraph_viewer.cli_utils.helpers import (
    apply_settings,
    build_viewer,
    format_status,
    syncify,
)
from depgraph_viewer.exceptions import ViewerError
from depgraph_viewer.http_client import close_async_http_client
from depgraph_viewer.viewer import parse_command

HELP_TEXT = """[bold cyan]depgraph-viewer[/bold cyan]
Enter a directory path to scan it, or one of:
  [bold]:relayout[/bold]      re-run the layout
  [bold]:export[/bold]        save dependency-graph.png
  [bold]:html[/bold]          save dependency-graph.html
  [bold]:json[/bold]          save dependency-graph.json
  [bold]:select <id>[/bold]   select a node or edge
  [bold]:quit[/bold]          leave"""


@syncify
async def view(
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
    open_browser: bool = typer.Option(
        True,
        "--open/--no-open",
        help="Open the graph page in the web browser after the first scan.",
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
    Start an interactive session: scan paths, re-layout, select and export.
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
    console.print(HELP_TEXT)

    try:
        while True:
            try:
                line = Prompt.ask("[bold]>[/bold]", console=console, default="")
            except (EOFError, KeyboardInterrupt):
                break

            try:
                command, argument = parse_command(line)
            except ValueError as e:
                console.print(f"[yellow]{escape(str(e))}[/yellow]")
                continue

            if command == "quit":
                break
            if command == "select" and not argument:
                console.print("[yellow]Usage: :select <id>[/yellow]")
                continue

            try:
                result = await viewer.dispatch(command, argument)
            except ViewerError as e:
                console.print(format_status(e.status_message()))
                continue

            if command.startswith("export_"):
                if result is None:
                    console.print("[dim]Nothing to export yet.[/dim]")
                else:
                    console.print(f"[green]Exported to: {result}[/green]")
            elif command == "select" and result is None:
                console.print(f"[dim]No element {escape(argument)} in the graph.[/dim]")
    finally:
        viewer.close()
        await close_async_http_client()
