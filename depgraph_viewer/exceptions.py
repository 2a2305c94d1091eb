"""
Exceptions raised by depgraph-viewer.

Every error is recovered at the UI boundary: the scan controller turns the
user-facing ones into a status message and returns to an idle state.
"""

from depgraph_viewer.state import Severity, StatusMessage

NO_DEPENDENCIES_MESSAGE = "No dependencies found."


class ViewerError(Exception):
    """Base class for depgraph-viewer errors."""

    severity = Severity.ERROR

    def status_message(self) -> StatusMessage:
        """Message shown to the user for this error."""
        return StatusMessage(f"Error: {self}", self.severity)


class EmptyPathError(ViewerError, ValueError):
    """Submission with a blank path. Suppressed without any message."""

    def __init__(self):
        super().__init__("Path is empty")


class RequestFailure(ViewerError):
    """The backend answered with a non-success status, or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def status_message(self) -> StatusMessage:
        return StatusMessage(f"Error: {self.message}", Severity.ERROR)


class MalformedResponseError(RequestFailure):
    """The backend answered 2xx with a body that is not a valid graph."""


class EmptyResultError(ViewerError):
    """The scan succeeded but found no dependencies."""

    severity = Severity.WARNING

    def __init__(self):
        super().__init__(NO_DEPENDENCIES_MESSAGE)

    def status_message(self) -> StatusMessage:
        return StatusMessage(NO_DEPENDENCIES_MESSAGE, Severity.WARNING)


class SurfaceBusyError(ViewerError, RuntimeError):
    """A visualization was bound to a surface that already holds one."""


class RenderError(ViewerError):
    """The graph could not be drawn on the display surface."""


class ExportError(ViewerError):
    """A snapshot of the graph could not be written."""
