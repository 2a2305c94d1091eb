"""Constants shared by CLI commands."""

from rich.console import Console

from depgraph_viewer.state import Severity

console = Console()

# Rich styles of status messages by severity
SEVERITY_STYLES = {
    Severity.INFO: "cyan",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
}

# Page the live graph is drawn on, next to the exported files
LIVE_PAGE_FILENAME = "depgraph-viewer.html"
