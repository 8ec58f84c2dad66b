"""HTTP requests with fixed-interval retries and retry conditions."""

from .debug import debug_request, debug_response
from .request import (
    DEFAULT_ACCEPT,
    DEFAULT_CONTENT_TYPE,
    HttpResult,
    RequestOptions,
    RetryableRequest,
    RetryPredicate,
    create_retryable_request,
)
from .transport import get_http_client, reset_http_client

__all__ = [
    "DEFAULT_ACCEPT",
    "DEFAULT_CONTENT_TYPE",
    "HttpResult",
    "RequestOptions",
    "RetryableRequest",
    "RetryPredicate",
    "create_retryable_request",
    "debug_request",
    "debug_response",
    "get_http_client",
    "reset_http_client",
]
