"""Fixed visual style of the dependency graph."""

SELECTED_COLOR = "#a78bfa"
BACKGROUND_COLOR = "#0f172a"

NODE_STYLE = {
    "symbol": "circle",
    "color": "#3b82f6",
    "size": 40,
    "font_color": "#f8fafc",
    "font_size": 12,
    "text_position": "bottom center",
    "outline_color": "#1e293b",
    "outline_width": 2,
}

EDGE_STYLE = {
    "color": "#475569",
    "width": 2,
    "arrowhead": 2,  # triangle
    "font_color": "#94a3b8",
    "font_size": 10,
    "label_background": BACKGROUND_COLOR,
    "label_padding": 2,
}

# Applied to selected nodes and edges alike
SELECTED_STYLE = {
    "color": SELECTED_COLOR,
}


def node_color(selected: bool) -> str:
    return SELECTED_STYLE["color"] if selected else NODE_STYLE["color"]


def edge_color(selected: bool) -> str:
    return SELECTED_STYLE["color"] if selected else EDGE_STYLE["color"]
