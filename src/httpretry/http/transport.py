"""Process-wide pooled HTTP transport.

One ``httpx.Client`` is shared by every retryable request in the process so
connections are reused and file handles stay bounded, which matters for high
request volume and for constrained runtimes such as lambdas.
"""

import threading

import httpx
import structlog

from ..config import get_settings

logger = structlog.get_logger(__name__)

_client: httpx.Client | None = None
_lock = threading.Lock()


def _build_client() -> httpx.Client:
    settings = get_settings()
    limits = httpx.Limits(
        max_connections=settings.max_connections,
        max_keepalive_connections=settings.max_keepalive_connections,
    )
    return httpx.Client(timeout=httpx.Timeout(settings.timeout_seconds), limits=limits)


def get_http_client() -> httpx.Client:
    """Get the shared HTTP client, creating it on first use"""
    global _client
    if _client is None:
        with _lock:
            if _client is None:
                _client = _build_client()
                logger.debug("Shared HTTP client created", client_id=id(_client))
    return _client


def reset_http_client() -> None:
    """Close and forget the shared client; the next ``get_http_client`` builds a new one"""
    global _client
    with _lock:
        if _client is not None:
            _client.close()
        _client = None
