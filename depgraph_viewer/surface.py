"""
Display surfaces for the live visualization.

A surface shows at most one visualization at a time. Binding a second one
while the first is still bound is refused.
"""

import webbrowser
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import plotly.graph_objects as go

from depgraph_viewer.exceptions import SurfaceBusyError


class DisplaySurface(ABC):
    """Abstract base class for the place a visualization is drawn on."""

    def __init__(self):
        self._bound: Any = None

    @property
    def bound(self) -> Any:
        """The visualization currently bound, if any."""
        return self._bound

    def bind(self, visualization: Any) -> None:
        """
        Attach ``visualization`` to this surface.

        Raises:
            SurfaceBusyError: If another visualization is still bound.
        """
        if self._bound is not None:
            raise SurfaceBusyError(
                "Surface already holds a visualization; release it first"
            )
        self._bound = visualization

    def unbind(self, visualization: Any) -> None:
        """Detach ``visualization`` and clear the surface."""
        if self._bound is not visualization:
            return
        self._bound = None
        self.clear()

    @abstractmethod
    def draw(self, figure: go.Figure) -> None:
        """Show ``figure``, replacing whatever is displayed."""

    @abstractmethod
    def clear(self) -> None:
        """Remove whatever is displayed."""


class HtmlSurface(DisplaySurface):
    """A standalone interactive HTML page, rewritten on every draw."""

    def __init__(self, path: Path | str, open_browser: bool = False):
        super().__init__()
        self.path = Path(path)
        self.open_browser = open_browser
        self._opened = False

    def draw(self, figure: go.Figure) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        figure.write_html(
            self.path,
            include_plotlyjs="cdn",
            auto_play=True,
            config={"displaylogo": False, "scrollZoom": True},
        )
        if self.open_browser and not self._opened:
            webbrowser.open(self.path.resolve().as_uri())
            self._opened = True

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
