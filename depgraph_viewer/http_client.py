"""Shared HTTP client handling."""

import httpx

from depgraph_viewer.config import get_timeout, get_verify_ssl

# Scans run one at a time, so one kept-alive connection serves a whole session
MAX_CONNECTIONS = 2
MAX_KEEPALIVE_CONNECTIONS = 1
KEEPALIVE_EXPIRY = 30.0

_async_http_client: httpx.AsyncClient | None = None
_async_http_client_settings: tuple[bool | str, float] | None = None


async def _get_async_http_client() -> httpx.AsyncClient:
    """Get or create the async HTTP client used to talk to the analysis server.

    Recreates the client if the SSL verification or timeout setting has changed.
    """
    global _async_http_client, _async_http_client_settings
    settings = (get_verify_ssl(), get_timeout())

    if (
        _async_http_client is None
        or _async_http_client.is_closed
        or _async_http_client_settings != settings
    ):
        if _async_http_client is not None and not _async_http_client.is_closed:
            await _async_http_client.aclose()

        verify_ssl, timeout = settings
        _async_http_client = httpx.AsyncClient(
            verify=verify_ssl,
            timeout=timeout,
            limits=httpx.Limits(
                max_connections=MAX_CONNECTIONS,
                max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
                keepalive_expiry=KEEPALIVE_EXPIRY,
            ),
        )
        _async_http_client_settings = settings
    return _async_http_client


async def close_async_http_client():
    """Close the shared async HTTP client. Call this when shutting down."""
    global _async_http_client, _async_http_client_settings
    if _async_http_client is not None and not _async_http_client.is_closed:
        await _async_http_client.aclose()
    _async_http_client = None
    _async_http_client_settings = None
