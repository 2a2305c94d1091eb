"""
depgraph-viewer: interactive viewer for dependency graphs.

Requests a precomputed dependency graph from an analysis server and renders
it as an interactive node/edge diagram with re-layout and image export.
"""

__version__ = "0.1.0"
