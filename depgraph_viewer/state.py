"""
UI state owned by the scan controller.

The state is a plain observable record: the controller mutates it, and any
front end (the CLI spinner, tests) subscribes to changes.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    """Severity of a status message."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class StatusMessage:
    """A message shown to the user below the scan form."""

    text: str
    severity: Severity = Severity.INFO


StateListener = Callable[["UIState"], None]


@dataclass
class UIState:
    """Loading flag and status message of the viewer."""

    loading: bool = False
    status_message: StatusMessage | None = None
    _listeners: list[StateListener] = field(
        default_factory=list, repr=False, compare=False
    )

    @property
    def trigger_enabled(self) -> bool:
        """The scan trigger is disabled while a request is in flight."""
        return not self.loading

    def subscribe(self, listener: StateListener) -> None:
        """Call ``listener`` with the state after every change."""
        self._listeners.append(listener)

    def set_loading(self, loading: bool) -> None:
        if self.loading == loading:
            return
        self.loading = loading
        self._notify()

    def show(self, message: StatusMessage) -> None:
        self.status_message = message
        self._notify()

    def clear_message(self) -> None:
        if self.status_message is None:
            return
        self.status_message = None
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
