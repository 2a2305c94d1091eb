"""
Shared fixtures for depgraph-viewer tests.
"""

import copy
from unittest.mock import patch

import httpx
import pytest

import depgraph_viewer.config
from depgraph_viewer.surface import DisplaySurface

SINGLE_NODE_PAYLOAD = {
    "elements": {"nodes": [{"data": {"id": "a", "label": "a.go"}}], "edges": []}
}

EMPTY_PAYLOAD = {"elements": {"nodes": [], "edges": []}}

SERVICE_PAYLOAD = {
    "elements": {
        "nodes": [
            {"data": {"id": "orders", "label": "orders"}},
            {"data": {"id": "billing", "label": "billing"}},
            {"data": {"id": "users", "label": "users"}},
        ],
        "edges": [
            {
                "data": {
                    "id": "e1",
                    "source": "orders",
                    "target": "billing",
                    "label": "POST /charge",
                    "method": "POST",
                }
            },
            {
                "data": {
                    "id": "e2",
                    "source": "orders",
                    "target": "users",
                    "label": "GET /users",
                    "method": "GET",
                }
            },
        ],
    }
}


class FakeBackend:
    """Analysis server stand-in that records every request it receives."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.json = SINGLE_NODE_PAYLOAD
        self.text = ""
        self.error: Exception | None = None

    def respond(self, status_code=200, json=None, text=""):
        self.status_code = status_code
        self.json = json
        self.text = text

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.json is not None:
            return httpx.Response(self.status_code, json=self.json)
        return httpx.Response(self.status_code, text=self.text)

    async def get_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class RecordingSurface(DisplaySurface):
    """Surface that keeps every drawn figure in memory."""

    def __init__(self):
        super().__init__()
        self.figures = []
        self.clears = 0
        self.binds = 0

    def bind(self, visualization):
        super().bind(visualization)
        self.binds += 1

    def draw(self, figure):
        self.figures.append(figure)

    def clear(self):
        self.clears += 1


class FailingSurface(RecordingSurface):
    """Surface whose drawing always fails, as on a full disk."""

    def draw(self, figure):
        raise OSError("disk full")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep config files, environment and global settings out of every test."""
    config_root = tmp_path / "config-root"
    config_root.mkdir()
    monkeypatch.setattr(depgraph_viewer.config, "PROJECT_ROOT", config_root)
    for name in (
        "DEPGRAPH_VIEWER_SERVER_URL",
        "DEPGRAPH_VIEWER_TIMEOUT",
        "DEPGRAPH_VIEWER_OUTPUT_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    depgraph_viewer.config.reset_settings()
    yield config_root
    depgraph_viewer.config.reset_settings()


@pytest.fixture
def backend():
    """Patch the shared HTTP client with a fake analysis server."""
    server = FakeBackend()
    with patch(
        "depgraph_viewer.client._get_async_http_client", new=server.get_client
    ):
        yield server


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def single_node_payload():
    return copy.deepcopy(SINGLE_NODE_PAYLOAD)


@pytest.fixture
def service_payload():
    return copy.deepcopy(SERVICE_PAYLOAD)


@pytest.fixture
def empty_payload():
    return copy.deepcopy(EMPTY_PAYLOAD)


@pytest.fixture
def make_surface():
    """Factory for additional recording surfaces."""
    return RecordingSurface


@pytest.fixture
def failing_surface():
    return FailingSurface()
