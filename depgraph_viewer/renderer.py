"""
Rendering of dependency graphs.

GraphRenderer is the only owner of the live Visualization. Every read or
write of it (render, relayout, selection, export snapshots) goes through the
renderer, and the previous visualization is always released before a new one
is bound to the surface.
"""

import math
from collections.abc import Callable

import networkx as nx
import plotly.graph_objects as go

from depgraph_viewer.exceptions import RenderError
from depgraph_viewer.layout import DEFAULT_LAYOUT, LayoutPolicy, Positions
from depgraph_viewer.models import GraphData
from depgraph_viewer.styles import (
    BACKGROUND_COLOR,
    EDGE_STYLE,
    NODE_STYLE,
    edge_color,
    node_color,
)
from depgraph_viewer.surface import DisplaySurface

SelectHandler = Callable[[str], None]

# Room around the outermost nodes so markers and labels are not clipped
EXTENT_PADDING = NODE_STYLE["size"] + 30
MIN_FIGURE_SIZE = 400


class Visualization:
    """One rendered graph with its positions and selection."""

    def __init__(self, data: GraphData):
        self.data = data
        self.graph = nx.MultiDiGraph()
        for node in data.nodes:
            self.graph.add_node(node.id, label=node.label)
        for edge in data.edges:
            self.graph.add_edge(edge.source, edge.target, key=edge.id, label=edge.label)
        self.positions: Positions = {}
        self.frames: list[Positions] = []
        self.selected: str | None = None
        self.destroyed = False

    @property
    def node_ids(self) -> list[str]:
        return [node.id for node in self.data.nodes]

    @property
    def edge_ids(self) -> list[str]:
        return [edge.id for edge in self.data.edges]

    def move_to(self, positions: Positions, frames: list[Positions]) -> None:
        """Set the final positions and the frames leading to them."""
        self.positions = positions
        self.frames = frames

    def select(self, element_id: str) -> str | None:
        """
        Select a node or an edge, replacing the previous selection.

        Returns:
            "node" or "edge", or None if the element is unknown.
        """
        if element_id in self.graph.nodes:
            kind = "node"
        elif element_id in self.edge_ids:
            kind = "edge"
        else:
            return None
        self.selected = element_id
        return kind

    def destroy(self) -> None:
        self.destroyed = True
        self.frames = []
        self.selected = None

    def extent(
        self, placements: list[Positions] | None = None
    ) -> tuple[float, float, float, float]:
        """Bounding box (min_x, max_x, min_y, max_y) of the placements, padded."""
        placements = placements or [self.positions]
        xs = [x for p in placements for x, _ in p.values()] or [0.0]
        ys = [y for p in placements for _, y in p.values()] or [0.0]
        return (
            min(xs) - EXTENT_PADDING,
            max(xs) + EXTENT_PADDING,
            min(ys) - EXTENT_PADDING,
            max(ys) + EXTENT_PADDING,
        )

    def figure(
        self,
        animated: bool = False,
        full_extent: bool = False,
        duration_ms: int = DEFAULT_LAYOUT.animation_duration_ms,
    ) -> go.Figure:
        """
        Build the plotly figure.

        Args:
            animated: Include the frames of the last layout transition, starting
                from the first frame.
            full_extent: Size the figure to the whole graph at one pixel per
                layout unit.
            duration_ms: Total duration of the animated transition.
        """
        animate = animated and len(self.frames) > 1
        start = self.frames[0] if animate else self.positions
        min_x, max_x, min_y, max_y = self.extent(
            self.frames if animate else [self.positions]
        )

        fig = go.Figure(data=[self._node_trace(start)])
        fig.update_layout(
            annotations=self._edge_annotations(start),
            showlegend=False,
            hovermode="closest",
            dragmode="pan",
            margin=dict(b=0, l=0, r=0, t=0),
            plot_bgcolor=BACKGROUND_COLOR,
            paper_bgcolor=BACKGROUND_COLOR,
            xaxis=dict(
                range=[min_x, max_x],
                showgrid=False,
                zeroline=False,
                showticklabels=False,
            ),
            yaxis=dict(
                range=[min_y, max_y],
                showgrid=False,
                zeroline=False,
                showticklabels=False,
                scaleanchor="x",
            ),
        )
        if full_extent:
            fig.update_layout(
                width=max(MIN_FIGURE_SIZE, math.ceil(max_x - min_x)),
                height=max(MIN_FIGURE_SIZE, math.ceil(max_y - min_y)),
            )
        if animate:
            self._add_frames(fig, duration_ms)
        return fig

    def _add_frames(self, fig: go.Figure, duration_ms: int) -> None:
        fig.frames = [
            go.Frame(
                name=str(index),
                data=[self._node_trace(frame)],
                layout=go.Layout(annotations=self._edge_annotations(frame)),
            )
            for index, frame in enumerate(self.frames)
        ]
        duration = duration_ms // len(self.frames)
        fig.update_layout(
            updatemenus=[
                dict(
                    type="buttons",
                    showactive=False,
                    visible=False,
                    buttons=[
                        dict(
                            label="Play",
                            method="animate",
                            args=[
                                None,
                                dict(
                                    frame=dict(duration=duration, redraw=True),
                                    transition=dict(duration=duration),
                                    fromcurrent=True,
                                ),
                            ],
                        )
                    ],
                )
            ]
        )

    def _node_trace(self, positions: Positions) -> go.Scatter:
        ids = self.node_ids
        return go.Scatter(
            x=[positions[node_id][0] for node_id in ids],
            y=[positions[node_id][1] for node_id in ids],
            mode="markers+text",
            text=[self.graph.nodes[node_id]["label"] for node_id in ids],
            customdata=ids,
            hovertext=ids,
            hoverinfo="text",
            textposition=NODE_STYLE["text_position"],
            textfont=dict(color=NODE_STYLE["font_color"], size=NODE_STYLE["font_size"]),
            marker=dict(
                symbol=NODE_STYLE["symbol"],
                size=NODE_STYLE["size"],
                color=[node_color(node_id == self.selected) for node_id in ids],
                line=dict(
                    width=NODE_STYLE["outline_width"],
                    color=NODE_STYLE["outline_color"],
                ),
            ),
            showlegend=False,
        )

    def _edge_annotations(self, positions: Positions) -> list[dict]:
        annotations = []
        standoff = NODE_STYLE["size"] / 2
        for edge in self.data.edges:
            x0, y0 = positions[edge.source]
            x1, y1 = positions[edge.target]
            color = edge_color(edge.id == self.selected)
            if edge.source != edge.target:
                annotations.append(
                    dict(
                        x=x1,
                        y=y1,
                        ax=x0,
                        ay=y0,
                        xref="x",
                        yref="y",
                        axref="x",
                        ayref="y",
                        text="",
                        showarrow=True,
                        arrowhead=EDGE_STYLE["arrowhead"],
                        arrowwidth=EDGE_STYLE["width"],
                        arrowcolor=color,
                        standoff=standoff,
                        startstandoff=standoff,
                    )
                )
            if edge.label:
                annotations.append(
                    dict(
                        x=(x0 + x1) / 2,
                        y=(y0 + y1) / 2,
                        xref="x",
                        yref="y",
                        text=edge.label,
                        showarrow=False,
                        textangle=_label_angle(x0, y0, x1, y1),
                        font=dict(
                            color=EDGE_STYLE["font_color"],
                            size=EDGE_STYLE["font_size"],
                        ),
                        bgcolor=EDGE_STYLE["label_background"],
                        borderpad=EDGE_STYLE["label_padding"],
                    )
                )
        return annotations


def _label_angle(x0: float, y0: float, x1: float, y1: float) -> float:
    """Rotation that keeps an edge label along its edge and upright."""
    if x0 == x1 and y0 == y1:
        return 0.0
    # Plotly measures text angles clockwise
    angle = -math.degrees(math.atan2(y1 - y0, x1 - x0))
    if angle > 90:
        angle -= 180
    elif angle < -90:
        angle += 180
    return angle


class GraphRenderer:
    """Owns the single live visualization bound to a display surface."""

    def __init__(self, surface: DisplaySurface, layout: LayoutPolicy | None = None):
        self.surface = surface
        self.layout = layout or DEFAULT_LAYOUT
        self._visualization: Visualization | None = None
        self._select_handlers: list[SelectHandler] = []

    @property
    def has_instance(self) -> bool:
        return self._visualization is not None

    @property
    def elements(self) -> GraphData | None:
        """The graph currently shown, if any."""
        return self._visualization.data if self._visualization else None

    @property
    def positions(self) -> Positions:
        return dict(self._visualization.positions) if self._visualization else {}

    @property
    def selected(self) -> str | None:
        return self._visualization.selected if self._visualization else None

    def render(self, data: GraphData) -> bool:
        """
        Replace the current visualization with one for ``data``.

        The previous visualization is released first. Empty data leaves no
        visualization at all, and neither does a failed bind or first draw.

        Returns:
            True if a visualization was created.

        Raises:
            RenderError: If the surface could not draw the graph.
            SurfaceBusyError: If the surface still holds another visualization.
        """
        self.release()
        if data.is_empty:
            return False

        visualization = Visualization(data)
        start = self.layout.initial_positions(visualization.graph)
        final = self.layout.run(visualization.graph, start)
        visualization.move_to(final, self.layout.transition(start, final))

        try:
            self.surface.bind(visualization)
        except Exception:
            visualization.destroy()
            raise
        self._visualization = visualization
        try:
            self._draw_transition(visualization)
        except Exception:
            self.release()
            raise
        return True

    def relayout(self) -> None:
        """Re-run the layout on the current visualization, animated."""
        visualization = self._visualization
        if visualization is None:
            return
        old = dict(visualization.positions)
        new = self.layout.run(visualization.graph, old)
        visualization.move_to(new, self.layout.transition(old, new))
        self._draw_transition(visualization)

    def release(self) -> None:
        """Destroy the current visualization and clear the surface."""
        visualization = self._visualization
        if visualization is None:
            return
        self._visualization = None
        self.surface.unbind(visualization)
        visualization.destroy()

    def on_select(self, handler: SelectHandler) -> None:
        """Register ``handler`` to be called with the id of every tapped node."""
        self._select_handlers.append(handler)

    def tap(self, element_id: str) -> str | None:
        """
        Handle a tap on a graph element.

        The element becomes the selection. Tapping a node notifies the
        selection handlers with its id.

        Returns:
            "node" or "edge", or None if nothing was selected.
        """
        visualization = self._visualization
        if visualization is None:
            return None
        kind = visualization.select(element_id)
        if kind is None:
            return None
        self._draw(visualization.figure())
        if kind == "node":
            for handler in list(self._select_handlers):
                handler(element_id)
        return kind

    def _draw_transition(self, visualization: Visualization) -> None:
        self._draw(
            visualization.figure(
                animated=True, duration_ms=self.layout.animation_duration_ms
            )
        )

    def _draw(self, figure: go.Figure) -> None:
        try:
            self.surface.draw(figure)
        except (OSError, ValueError) as e:
            raise RenderError(f"Could not draw the graph: {e}") from e

    def snapshot(self) -> go.Figure | None:
        """Static full-extent figure of the current visualization."""
        if self._visualization is None:
            return None
        return self._visualization.figure(full_extent=True)

    def cytoscape_document(self) -> dict | None:
        """Elements and layout options of the current visualization."""
        if self._visualization is None:
            return None
        elements = self._visualization.data.to_elements()
        for node in elements["nodes"]:
            x, y = self._visualization.positions[node["data"]["id"]]
            # cytoscape's y axis points down
            node["position"] = {"x": x, "y": -y}
        return {"elements": elements, "layout": self.layout.as_options()}
