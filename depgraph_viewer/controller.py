"""
Scan lifecycle controller.

Turns a submitted path into a rendered graph: validates the input, drives the
loading state, calls the backend and hands the result to the renderer. Every
failure is reported through the UI state and leaves the controller idle and
ready for the next submission.
"""

from depgraph_viewer.client import ScanClient
from depgraph_viewer.config import is_verbose_enabled
from depgraph_viewer.cli_utils.constants import console
from depgraph_viewer.exceptions import (
    EmptyPathError,
    EmptyResultError,
    ViewerError,
)
from depgraph_viewer.models import GraphData, ScanRequest
from depgraph_viewer.renderer import GraphRenderer
from depgraph_viewer.state import UIState


class ScanController:
    """Orchestrates one scan request at a time."""

    def __init__(
        self,
        client: ScanClient,
        renderer: GraphRenderer,
        state: UIState | None = None,
    ):
        self.client = client
        self.renderer = renderer
        self.state = state or UIState()
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def submit(self, path: str | None) -> GraphData | None:
        """
        Scan ``path`` and render the result.

        A blank path does nothing. A submission made while another is in
        flight is ignored; it is neither queued nor does it cancel the
        running one.

        Returns:
            The rendered graph, or None if nothing was rendered.
        """
        try:
            request = ScanRequest.from_input(path)
        except EmptyPathError:
            return None

        if self._in_flight:
            if is_verbose_enabled():
                console.print(
                    f"[dim]Scan already in progress, ignoring {request.path}[/dim]"
                )
            return None

        self._in_flight = True
        self.state.set_loading(True)
        self.state.clear_message()
        try:
            if is_verbose_enabled():
                console.print(f"[dim]POST {self.client.scan_url} {request.path}[/dim]")
            data = await self.client.scan(request)
            if data.is_empty:
                raise EmptyResultError()
            self.renderer.render(data)
        except EmptyResultError as e:
            # A graph from an earlier scan must not stay next to the warning
            self.renderer.release()
            self.state.show(e.status_message())
            return None
        except ViewerError as e:
            # Request, payload and drawing failures alike
            self.state.show(e.status_message())
            return None
        finally:
            self._in_flight = False
            self.state.set_loading(False)

        if is_verbose_enabled():
            console.print(
                f"[dim]Rendered {len(data.nodes)} nodes, {len(data.edges)} edges[/dim]"
            )
        return data
