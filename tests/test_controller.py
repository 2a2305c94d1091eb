"""
Tests for the scan lifecycle controller.
"""

import asyncio
import json
from unittest.mock import patch

import httpx
import pytest

from depgraph_viewer.client import ScanClient
from depgraph_viewer.controller import ScanController
from depgraph_viewer.renderer import GraphRenderer
from depgraph_viewer.state import Severity, StatusMessage


@pytest.fixture
def renderer(surface):
    return GraphRenderer(surface)


@pytest.fixture
def controller(renderer):
    return ScanController(ScanClient(server_url="http://analysis:8080"), renderer)


@pytest.fixture
def changes(controller):
    """Snapshots of (loading, message) after every state change."""
    recorded = []
    controller.state.subscribe(
        lambda state: recorded.append((state.loading, state.status_message))
    )
    return recorded


@pytest.mark.parametrize("path", ["", "   ", "\n\t"])
def test_blank_path_is_noop(backend, controller, changes, path):
    """Blank input issues no request and leaves the state untouched."""
    result = asyncio.run(controller.submit(path))

    assert result is None
    assert backend.requests == []
    assert changes == []
    assert controller.state.loading is False
    assert controller.state.status_message is None


def test_single_node_scan_renders_graph(backend, controller, renderer, single_node_payload):
    backend.respond(json=single_node_payload)

    data = asyncio.run(controller.submit("/repo"))

    assert [node.id for node in data.nodes] == ["a"]
    assert renderer.has_instance
    assert [node.id for node in renderer.elements.nodes] == ["a"]
    assert renderer.elements.edges == []
    assert controller.state.status_message is None
    assert controller.state.loading is False


def test_valid_path_issues_exactly_one_request(backend, controller):
    asyncio.run(controller.submit("  /repo  "))

    assert len(backend.requests) == 1
    request = backend.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/api/scan"
    assert json.loads(request.content) == {"path": "/repo"}


def test_loading_is_shown_during_request(backend, controller, changes):
    asyncio.run(controller.submit("/repo"))

    assert changes[0] == (True, None)
    assert changes[-1] == (False, None)
    assert controller.state.trigger_enabled


def test_server_error_shows_message(backend, controller, renderer, changes):
    backend.respond(status_code=500, text="scan failed")

    result = asyncio.run(controller.submit("/bad"))

    assert result is None
    assert controller.state.status_message == StatusMessage(
        "Error: scan failed", Severity.ERROR
    )
    assert controller.state.loading is False
    assert controller.state.trigger_enabled
    assert not renderer.has_instance
    assert changes[-1] == (False, StatusMessage("Error: scan failed", Severity.ERROR))


def test_empty_result_shows_warning(backend, controller, renderer, surface, empty_payload):
    backend.respond(json=empty_payload)

    result = asyncio.run(controller.submit("/empty"))

    assert result is None
    assert controller.state.status_message == StatusMessage(
        "No dependencies found.", Severity.WARNING
    )
    assert not renderer.has_instance
    assert surface.binds == 0
    assert controller.state.loading is False


def test_empty_result_clears_previous_graph(backend, controller, renderer, surface, service_payload, empty_payload):
    backend.respond(json=service_payload)
    asyncio.run(controller.submit("/repo"))
    previous = surface.bound

    backend.respond(json=empty_payload)
    asyncio.run(controller.submit("/empty"))

    assert not renderer.has_instance
    assert previous.destroyed
    assert controller.state.status_message.severity == Severity.WARNING


def test_transport_error_shows_message(backend, controller):
    backend.error = httpx.ConnectError("Connection refused")

    asyncio.run(controller.submit("/repo"))

    assert controller.state.status_message == StatusMessage(
        "Error: Connection refused", Severity.ERROR
    )
    assert controller.state.loading is False


def test_malformed_response_shows_message(backend, controller, renderer):
    backend.respond(status_code=200, text="not json")

    asyncio.run(controller.submit("/repo"))

    message = controller.state.status_message
    assert message.severity == Severity.ERROR
    assert message.text.startswith("Error: Invalid JSON")
    assert not renderer.has_instance


def test_success_clears_previous_error(backend, controller, single_node_payload):
    backend.respond(status_code=500, text="scan failed")
    asyncio.run(controller.submit("/bad"))

    backend.respond(json=single_node_payload)
    asyncio.run(controller.submit("/repo"))

    assert controller.state.status_message is None


def test_failure_keeps_controller_resubmittable(backend, controller, renderer, single_node_payload):
    backend.respond(status_code=400, text="Invalid directory path")
    asyncio.run(controller.submit("/missing"))
    assert controller.in_flight is False

    backend.respond(json=single_node_payload)
    asyncio.run(controller.submit("/repo"))

    assert renderer.has_instance
    assert len(backend.requests) == 2


def test_sequential_submissions_keep_one_instance(backend, controller, renderer, surface, service_payload, single_node_payload):
    backend.respond(json=service_payload)
    asyncio.run(controller.submit("/first"))
    first = surface.bound

    backend.respond(json=single_node_payload)
    asyncio.run(controller.submit("/second"))

    assert first.destroyed
    assert surface.bound is not first
    assert [node.id for node in renderer.elements.nodes] == ["a"]


def test_submit_while_in_flight_is_ignored(controller, renderer, single_node_payload):
    """A second submission during a pending request is neither sent nor queued."""
    requests = []

    async def scenario():
        release = asyncio.Event()

        async def handler(request):
            requests.append(request)
            await release.wait()
            return httpx.Response(200, json=single_node_payload)

        async def get_client():
            return httpx.AsyncClient(transport=httpx.MockTransport(handler))

        with patch("depgraph_viewer.client._get_async_http_client", new=get_client):
            first = asyncio.create_task(controller.submit("/first"))
            while not requests:
                await asyncio.sleep(0)

            assert controller.in_flight
            assert controller.state.loading
            assert not controller.state.trigger_enabled

            second = await controller.submit("/second")
            assert second is None

            release.set()
            return await first

    data = asyncio.run(scenario())

    assert len(requests) == 1
    assert json.loads(requests[0].content) == {"path": "/first"}
    assert data is not None
    assert renderer.has_instance
    assert controller.in_flight is False
    assert controller.state.trigger_enabled


def test_render_failure_shows_error_and_releases(backend, failing_surface, single_node_payload):
    """A surface that cannot draw leaves no bound instance and an error message."""
    backend.respond(json=single_node_payload)
    renderer = GraphRenderer(failing_surface)
    controller = ScanController(ScanClient(server_url="http://analysis:8080"), renderer)

    result = asyncio.run(controller.submit("/repo"))

    assert result is None
    assert not renderer.has_instance
    assert failing_surface.bound is None
    assert controller.state.status_message == StatusMessage(
        "Error: Could not draw the graph: disk full", Severity.ERROR
    )
    assert controller.state.loading is False
    assert controller.in_flight is False
