"""
Deterministic force-directed layout.

A single LayoutPolicy is used for the initial layout and every re-layout, so
running it twice on the same graph and positions gives the same placement.
Starting positions are never randomized: nodes keep their current position,
and nodes without one start on a fixed circle in input order.

Placement is networkx's Fruchterman-Reingold spring layout with
``k = ideal_edge_length`` and ``iterations = max_iterations``, in layout
units. Nodes that start on top of each other are first moved
``node_overlap`` apart. The remaining cose parameters (repulsion, elasticity,
gravity, temperatures) are carried for the exported cytoscape options.
Components are kept together by packing them side by side.
"""

import math
from dataclasses import dataclass

import networkx as nx

Position = tuple[float, float]
Positions = dict[str, Position]


@dataclass(frozen=True)
class LayoutPolicy:
    """Parameters of the force-directed placement."""

    component_spacing: float = 100
    node_repulsion: float = 400_000
    node_overlap: float = 10
    ideal_edge_length: float = 100
    edge_elasticity: float = 100
    # Only affects compound (nested) nodes, which flat dependency graphs lack
    nesting_factor: float = 5
    gravity: float = 80
    max_iterations: int = 1000
    initial_temperature: float = 200
    cooling_factor: float = 0.95
    min_temperature: float = 1.0
    animate: bool = True
    animation_frames: int = 12
    animation_duration_ms: int = 500

    def initial_positions(
        self, graph: nx.MultiDiGraph, positions: Positions | None = None
    ) -> Positions:
        """Existing positions, or a fixed circle for nodes that have none."""
        positions = positions or {}
        nodes = list(graph.nodes)
        radius = max(
            self.ideal_edge_length,
            len(nodes) * self.ideal_edge_length / (2 * math.pi),
        )
        seeded: Positions = {}
        for index, node in enumerate(nodes):
            if node in positions:
                seeded[node] = positions[node]
                continue
            angle = 2 * math.pi * index / len(nodes)
            seeded[node] = (radius * math.cos(angle), radius * math.sin(angle))
        return seeded

    def run(
        self, graph: nx.MultiDiGraph, positions: Positions | None = None
    ) -> Positions:
        """
        Place every node of ``graph``.

        Weakly connected components are simulated independently and packed
        left to right, ``component_spacing`` apart, in order of first
        appearance.

        Args:
            graph: The graph to lay out.
            positions: Current node positions used as the starting point.

        Returns:
            New position of every node.
        """
        if graph.number_of_nodes() == 0:
            return {}

        seeded = self.initial_positions(graph, positions)
        order = {node: index for index, node in enumerate(graph.nodes)}
        components = sorted(
            (
                sorted(component, key=order.__getitem__)
                for component in nx.weakly_connected_components(graph)
            ),
            key=lambda nodes: order[nodes[0]],
        )

        placed: Positions = {}
        offset = 0.0
        for nodes in components:
            local = self._simulate(graph.subgraph(nodes), nodes, seeded)
            xs = [x for x, _ in local.values()]
            ys = [y for _, y in local.values()]
            min_x, max_x = min(xs), max(xs)
            center_y = (min(ys) + max(ys)) / 2
            for node in nodes:
                x, y = local[node]
                placed[node] = (x - min_x + offset, y - center_y)
            offset += (max_x - min_x) + self.component_spacing
        return placed

    def transition(self, old: Positions | None, new: Positions) -> list[Positions]:
        """
        Frames of the animated move from ``old`` to ``new``.

        The last frame is always ``new``. Without animation, or without a
        previous placement, the move is a single frame.
        """
        if not self.animate or not old or self.animation_frames <= 1:
            return [dict(new)]

        frames: list[Positions] = []
        for step in range(1, self.animation_frames):
            t = step / self.animation_frames
            frame: Positions = {}
            for node, (x1, y1) in new.items():
                x0, y0 = old.get(node, (x1, y1))
                frame[node] = (x0 + (x1 - x0) * t, y0 + (y1 - y0) * t)
            frames.append(frame)
        frames.append(dict(new))
        return frames

    def as_options(self) -> dict:
        """The equivalent cytoscape.js ``cose`` layout options."""
        return {
            "name": "cose",
            "animate": self.animate,
            "randomize": False,
            "componentSpacing": self.component_spacing,
            "nodeRepulsion": self.node_repulsion,
            "nodeOverlap": self.node_overlap,
            "idealEdgeLength": self.ideal_edge_length,
            "edgeElasticity": self.edge_elasticity,
            "nestingFactor": self.nesting_factor,
            "gravity": self.gravity,
            "numIter": self.max_iterations,
            "initialTemp": self.initial_temperature,
            "coolingFactor": self.cooling_factor,
            "minTemp": self.min_temperature,
        }

    def _simulate(
        self, graph: nx.MultiDiGraph, nodes: list[str], seeded: Positions
    ) -> Positions:
        if len(nodes) == 1:
            return {nodes[0]: seeded[nodes[0]]}

        # Fruchterman-Reingold attracts along undirected, unweighted edges
        undirected = nx.Graph()
        undirected.add_nodes_from(nodes)
        undirected.add_edges_from((u, v) for u, v in graph.edges() if u != v)

        placed = nx.spring_layout(
            undirected,
            k=self.ideal_edge_length,
            pos=self._separate(nodes, seeded),
            iterations=self.max_iterations,
            scale=None,
            seed=0,
        )
        return {node: (float(x), float(y)) for node, (x, y) in placed.items()}

    def _separate(self, nodes: list[str], seeded: Positions) -> Positions:
        """Seeded positions with coincident nodes moved ``node_overlap`` apart."""
        start: Positions = {}
        taken: set[Position] = set()
        for index, node in enumerate(nodes):
            x, y = seeded[node]
            if (x, y) in taken:
                angle = 2 * math.pi * index / len(nodes)
                x += self.node_overlap * math.cos(angle)
                y += self.node_overlap * math.sin(angle)
            taken.add((x, y))
            start[node] = (x, y)
        return start


DEFAULT_LAYOUT = LayoutPolicy()
