"""Export of the current visualization to files."""

import json
from pathlib import Path

from depgraph_viewer.config import get_output_dir
from depgraph_viewer.exceptions import ExportError
from depgraph_viewer.renderer import GraphRenderer

IMAGE_FILENAME = "dependency-graph.png"
HTML_FILENAME = "dependency-graph.html"
JSON_FILENAME = "dependency-graph.json"
IMAGE_SCALE = 2


class ExportService:
    """Writes snapshots of the renderer's current visualization.

    Nothing is kept between exports; every call reads the visualization
    through the renderer and writes a fresh file.
    """

    def __init__(self, renderer: GraphRenderer, output_dir: Path | str | None = None):
        self.renderer = renderer
        self._output_dir = Path(output_dir) if output_dir is not None else None

    @property
    def output_dir(self) -> Path:
        return self._output_dir if self._output_dir is not None else get_output_dir()

    def export_image(self) -> Path | None:
        """
        Save a full-extent PNG of the graph at 2x scale.

        Returns:
            Path of the written image, or None if no graph is shown.

        Raises:
            ExportError: If the image could not be rendered or written, for
                example when kaleido cannot start its browser.
        """
        figure = self.renderer.snapshot()
        if figure is None:
            return None
        path = self._target(IMAGE_FILENAME)
        try:
            figure.write_image(path, format="png", scale=IMAGE_SCALE)
        except (OSError, ValueError, RuntimeError) as e:
            raise ExportError(f"Could not export {path.name}: {e}") from e
        return path

    def export_html(self) -> Path | None:
        """Save the graph as a standalone interactive HTML page."""
        figure = self.renderer.snapshot()
        if figure is None:
            return None
        path = self._target(HTML_FILENAME)
        try:
            figure.write_html(path, include_plotlyjs="cdn")
        except (OSError, ValueError) as e:
            raise ExportError(f"Could not export {path.name}: {e}") from e
        return path

    def export_json(self) -> Path | None:
        """Save elements, positions and layout options in cytoscape's shape."""
        document = self.renderer.cytoscape_document()
        if document is None:
            return None
        path = self._target(JSON_FILENAME)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
        except OSError as e:
            raise ExportError(f"Could not export {path.name}: {e}") from e
        return path

    def _target(self, filename: str) -> Path:
        output_dir = self.output_dir
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportError(f"Could not create {output_dir}: {e}") from e
        return output_dir / filename
