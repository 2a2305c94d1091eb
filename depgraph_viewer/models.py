"""
Graph data exchanged with the dependency-analysis backend.

The backend answers with cytoscape-shaped elements::

    {"elements": {"nodes": [{"data": {"id": "a", "label": "a.go"}}],
                  "edges": [{"data": {"id": "e1", "source": "a",
                                      "target": "b", "label": "GET /x"}}]}}
"""

from typing import Any, NamedTuple

from depgraph_viewer.exceptions import EmptyPathError, MalformedResponseError


class ScanRequest(NamedTuple):
    """A single scan submission."""

    path: str

    @classmethod
    def from_input(cls, raw_path: str | None) -> "ScanRequest":
        """
        Build a request from user input.

        Raises:
            EmptyPathError: If the trimmed path is empty.
        """
        path = (raw_path or "").strip()
        if not path:
            raise EmptyPathError()
        return cls(path)

    def to_json(self) -> dict[str, str]:
        return {"path": self.path}


class GraphNode(NamedTuple):
    """A code unit in the dependency graph."""

    id: str
    label: str


class GraphEdge(NamedTuple):
    """A directed dependency between two nodes."""

    id: str
    source: str
    target: str
    label: str = ""
    extra: dict[str, Any] | None = None  # backend fields beyond the contract


class GraphData(NamedTuple):
    """Nodes and edges of one scan result."""

    nodes: list[GraphNode]
    edges: list[GraphEdge]

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @classmethod
    def from_elements(cls, payload: Any) -> "GraphData":
        """
        Parse a scan response body.

        Args:
            payload: Decoded JSON body of a successful scan response.

        Returns:
            GraphData with validated nodes and edges.

        Raises:
            MalformedResponseError: If the payload is not a valid graph.
        """
        if not isinstance(payload, dict) or not isinstance(
            payload.get("elements"), dict
        ):
            raise MalformedResponseError("Response has no 'elements' object")

        elements = payload["elements"]
        nodes: list[GraphNode] = []
        seen: set[str] = set()
        for entry in elements.get("nodes") or []:
            data = _element_data(entry, "node")
            node_id = _require_str(data, "id", "node")
            if node_id in seen:
                raise MalformedResponseError(f"Duplicate node id: {node_id}")
            seen.add(node_id)
            nodes.append(GraphNode(node_id, str(data.get("label") or node_id)))

        edges: list[GraphEdge] = []
        edge_ids: set[str] = set()
        for entry in elements.get("edges") or []:
            data = _element_data(entry, "edge")
            edge_id = _require_str(data, "id", "edge")
            source = _require_str(data, "source", "edge")
            target = _require_str(data, "target", "edge")
            # Nodes and edges share one id space
            if edge_id in seen or edge_id in edge_ids:
                raise MalformedResponseError(f"Duplicate edge id: {edge_id}")
            edge_ids.add(edge_id)
            for endpoint in (source, target):
                if endpoint not in seen:
                    raise MalformedResponseError(
                        f"Edge {edge_id} references unknown node: {endpoint}"
                    )
            extra = {
                key: value
                for key, value in data.items()
                if key not in ("id", "source", "target", "label")
            }
            edges.append(
                GraphEdge(
                    id=edge_id,
                    source=source,
                    target=target,
                    label=str(data.get("label") or ""),
                    extra=extra or None,
                )
            )

        return cls(nodes=nodes, edges=edges)

    def to_elements(self) -> dict[str, Any]:
        """Render the graph back into the wire shape."""
        return {
            "nodes": [
                {"data": {"id": node.id, "label": node.label}} for node in self.nodes
            ],
            "edges": [
                {
                    "data": {
                        **(edge.extra or {}),
                        "id": edge.id,
                        "source": edge.source,
                        "target": edge.target,
                        "label": edge.label,
                    }
                }
                for edge in self.edges
            ],
        }


def _element_data(entry: Any, kind: str) -> dict[str, Any]:
    if not isinstance(entry, dict) or not isinstance(entry.get("data"), dict):
        raise MalformedResponseError(f"Every {kind} needs a 'data' object")
    return entry["data"]


def _require_str(data: dict[str, Any], key: str, kind: str) -> str:
    value = data.get(key)
    if value is None or value == "":
        raise MalformedResponseError(f"{kind.capitalize()} is missing '{key}'")
    return str(value)
