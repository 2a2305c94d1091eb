"""
Tests for the analysis server client.
"""

import asyncio
import json

import httpx
import pytest

from depgraph_viewer.client import ScanClient
from depgraph_viewer.config import set_server_url, set_timeout
from depgraph_viewer.exceptions import MalformedResponseError, RequestFailure
from depgraph_viewer.models import ScanRequest


def test_scan_posts_path_as_json(backend, service_payload):
    """The request is a single POST /api/scan with the path as JSON body."""
    backend.respond(json=service_payload)
    client = ScanClient(server_url="http://analysis:8080/")

    data = asyncio.run(client.scan(ScanRequest("/srv/repo")))

    assert len(backend.requests) == 1
    request = backend.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://analysis:8080/api/scan"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"path": "/srv/repo"}
    assert len(data.nodes) == 3
    assert len(data.edges) == 2


def test_client_uses_configured_server_and_timeout():
    set_server_url("http://configured:9000")
    set_timeout(4)

    client = ScanClient()

    assert client.scan_url == "http://configured:9000/api/scan"
    assert client.timeout == 4


def test_non_success_status_raises_request_failure(backend):
    """The plain-text body of an error response becomes the message."""
    backend.respond(status_code=500, text="scan failed")

    with pytest.raises(RequestFailure) as exc_info:
        asyncio.run(ScanClient().scan(ScanRequest("/bad")))

    assert exc_info.value.message == "scan failed"
    assert exc_info.value.status_code == 500


def test_bad_request_raises_request_failure(backend):
    backend.respond(status_code=400, text="Invalid directory path")

    with pytest.raises(RequestFailure, match="Invalid directory path"):
        asyncio.run(ScanClient().scan(ScanRequest("/missing")))


def test_transport_error_raises_request_failure(backend):
    backend.error = httpx.ConnectError("Connection refused")

    with pytest.raises(RequestFailure, match="Connection refused") as exc_info:
        asyncio.run(ScanClient().scan(ScanRequest("/srv/repo")))

    assert exc_info.value.status_code is None


def test_invalid_json_raises_malformed_response(backend):
    backend.respond(status_code=200, text="<html>not json</html>")

    with pytest.raises(MalformedResponseError, match="Invalid JSON"):
        asyncio.run(ScanClient().scan(ScanRequest("/srv/repo")))


def test_unexpected_json_raises_malformed_response(backend):
    backend.respond(json={"graph": []})

    with pytest.raises(MalformedResponseError):
        asyncio.run(ScanClient().scan(ScanRequest("/srv/repo")))
