"""Helper functions shared by CLI commands."""

import asyncio
import functools
from pathlib import Path

import typer
from rich.markup import escape
from rich.status import Status

from depgraph_viewer.cli_utils.constants import (
    LIVE_PAGE_FILENAME,
    SEVERITY_STYLES,
    console,
)
from depgraph_viewer.config import (
    get_output_dir,
    is_verbose_enabled,
    set_output_dir,
    set_server_url,
    set_timeout,
    set_verbose,
    set_verify_ssl,
)
from depgraph_viewer.state import StatusMessage, UIState
from depgraph_viewer.surface import HtmlSurface
from depgraph_viewer.viewer import Viewer


def syncify(func):
    """Run an async typer command to completion on a fresh event loop."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return asyncio.run(func(*args, **kwargs))

    return wrapper


def apply_settings(
    server: str | None = None,
    timeout: float | None = None,
    output_dir: Path | None = None,
    verbose: bool | None = None,
    insecure: bool = False,
    ca_cert: Path | None = None,
) -> None:
    """Apply CLI flags on top of the configured defaults."""
    if server:
        set_server_url(server)
    if timeout is not None:
        if timeout <= 0:
            console.print("[red]Invalid timeout. Must be a positive number.[/red]")
            raise typer.Exit(code=1)
        set_timeout(timeout)
    if output_dir is not None:
        set_output_dir(output_dir)
    if verbose is not None:
        set_verbose(verbose)

    # Configure SSL verification
    if insecure and ca_cert:
        console.print(
            "[yellow]⚠️  Both --insecure and --ca-cert specified. Using --ca-cert.[/yellow]"
        )
    if ca_cert:
        if not ca_cert.exists():
            console.print(f"[red]CA certificate file not found: {ca_cert}[/red]")
            raise typer.Exit(code=1)
        set_verify_ssl(str(ca_cert))
    else:
        set_verify_ssl(not insecure)


def format_status(message: StatusMessage) -> str:
    style = SEVERITY_STYLES[message.severity]
    return f"[{style}]{escape(message.text)}[/{style}]"


class ConsoleStateView:
    """Shows the UI state on the console: a spinner while loading, then the message."""

    def __init__(self):
        self._status: Status | None = None

    def __call__(self, state: UIState) -> None:
        if state.loading and self._status is None:
            self._status = console.status("[cyan]Scanning...[/cyan]")
            self._status.start()
        elif not state.loading and self._status is not None:
            self._status.stop()
            self._status = None

        if state.status_message is not None and not state.loading:
            console.print(format_status(state.status_message))


def print_selected(node_id: str) -> None:
    console.print(f"Clicked {escape(node_id)}")


def build_viewer(open_browser: bool = False) -> Viewer:
    """Create a viewer drawing on an HTML page in the output directory."""
    surface = HtmlSurface(
        get_output_dir() / LIVE_PAGE_FILENAME, open_browser=open_browser
    )
    viewer = Viewer.create(surface)
    viewer.state.subscribe(ConsoleStateView())
    viewer.renderer.on_select(print_selected)
    if is_verbose_enabled():
        console.print(f"[dim]Live graph page: {surface.path}[/dim]")
    return viewer
