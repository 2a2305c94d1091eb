"""
Wiring of the viewer components and dispatch of user commands.

An event source (the CLI) translates user actions into the named commands
``submit``, ``relayout``, ``export_image``, ``export_html``, ``export_json``,
``select`` and ``quit``, and hands them to :meth:`Viewer.dispatch`. Commands
are handled one at a time, in arrival order.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from depgraph_viewer.client import ScanClient
from depgraph_viewer.controller import ScanController
from depgraph_viewer.export import ExportService
from depgraph_viewer.layout import LayoutPolicy
from depgraph_viewer.renderer import GraphRenderer
from depgraph_viewer.state import UIState
from depgraph_viewer.surface import DisplaySurface

# Interactive shortcuts for the commands
_SHORTCUTS = {
    ":relayout": "relayout",
    ":export": "export_image",
    ":html": "export_html",
    ":json": "export_json",
    ":select": "select",
    ":quit": "quit",
    ":q": "quit",
}


def parse_command(line: str) -> tuple[str, str]:
    """
    Translate one line of interactive input into a command.

    Lines starting with ``:`` are commands; anything else is a path to scan.

    Raises:
        ValueError: If the line names an unknown command.
    """
    text = line.strip()
    if not text.startswith(":"):
        return "submit", text
    name, _, argument = text.partition(" ")
    if name not in _SHORTCUTS:
        known = ", ".join(sorted(_SHORTCUTS))
        raise ValueError(f"Unknown command: {name}. Known commands: {known}")
    return _SHORTCUTS[name], argument.strip()


@dataclass
class Viewer:
    """The scan controller, renderer and exporter of one viewer session."""

    controller: ScanController
    renderer: GraphRenderer
    exporter: ExportService

    @classmethod
    def create(
        cls,
        surface: DisplaySurface,
        client: ScanClient | None = None,
        layout: LayoutPolicy | None = None,
        output_dir: Path | str | None = None,
        state: UIState | None = None,
    ) -> "Viewer":
        renderer = GraphRenderer(surface, layout)
        controller = ScanController(client or ScanClient(), renderer, state)
        return cls(
            controller=controller,
            renderer=renderer,
            exporter=ExportService(renderer, output_dir),
        )

    @property
    def state(self) -> UIState:
        return self.controller.state

    async def dispatch(self, command: str, argument: str = "") -> Any:
        """
        Run a named command.

        Returns:
            What the command produced: the rendered GraphData for ``submit``,
            the written path for exports, the selected element kind for
            ``select``, otherwise None.

        Raises:
            ValueError: If ``command`` is unknown.
            RenderError: If redrawing the graph failed.
            ExportError: If an export could not be written.
        """
        if command == "submit":
            return await self.controller.submit(argument)
        if command == "relayout":
            return self.renderer.relayout()
        if command == "export_image":
            return self.exporter.export_image()
        if command == "export_html":
            return self.exporter.export_html()
        if command == "export_json":
            return self.exporter.export_json()
        if command == "select":
            return self.renderer.tap(argument)
        if command == "quit":
            return self.close()
        raise ValueError(f"Unknown command: {command}")

    def close(self) -> None:
        """Release the visualization at the end of the session."""
        self.renderer.release()
