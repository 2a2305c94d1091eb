"""CLI commands of depgraph-viewer."""
