"""
Client for the dependency-analysis backend.

The backend exposes a single endpoint, ``POST /api/scan``, which scans a
directory on the server side and returns the resulting graph.
"""

import httpx

from depgraph_viewer.config import get_server_url, get_timeout
from depgraph_viewer.exceptions import MalformedResponseError, RequestFailure
from depgraph_viewer.http_client import _get_async_http_client
from depgraph_viewer.models import GraphData, ScanRequest

SCAN_ENDPOINT = "/api/scan"


class ScanClient:
    """Requests precomputed dependency graphs from the backend."""

    def __init__(self, server_url: str | None = None, timeout: float | None = None):
        """
        Initialize the client.

        Args:
            server_url: Backend base URL. Defaults to the configured server URL.
            timeout: Request timeout in seconds. Defaults to the configured one.
        """
        self.server_url = (server_url or get_server_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else get_timeout()

    @property
    def scan_url(self) -> str:
        return f"{self.server_url}{SCAN_ENDPOINT}"

    async def scan(self, request: ScanRequest) -> GraphData:
        """
        Request the dependency graph of ``request.path``.

        Args:
            request: The validated scan request.

        Returns:
            The parsed graph.

        Raises:
            RequestFailure: If the backend answers with a non-success status or
                cannot be reached. The message is the response body.
            MalformedResponseError: If a success response is not a valid graph.
        """
        client = await _get_async_http_client()
        try:
            response = await client.post(
                self.scan_url,
                json=request.to_json(),
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise RequestFailure(str(e) or type(e).__name__) from e

        if not response.is_success:
            raise RequestFailure(response.text, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Invalid JSON in response: {e}") from e

        return GraphData.from_elements(payload)
