"""
Flakey HTTP API helper.

Retries requests on transport errors and, optionally, while a caller supplied
condition flags the response. Provides:
- Retryable requests sharing one pooled HTTP client
- Cancellable request contexts
- Structured logging with per-attempt request IDs
- Configuration from the environment
"""

from .context import RequestContext, background
from .errors import (
    HttpRetryError,
    InvalidRequestError,
    RequestCancelledError,
    UnexpectedStatusError,
    extract_error_from_response,
)
from .http import (
    HttpResult,
    RequestOptions,
    RetryableRequest,
    RetryPredicate,
    create_retryable_request,
    get_http_client,
)

__version__ = "1.0.0"
__author__ = "BPT Team"

__all__ = [
    "HttpResult",
    "HttpRetryError",
    "InvalidRequestError",
    "RequestCancelledError",
    "RequestContext",
    "RequestOptions",
    "RetryableRequest",
    "RetryPredicate",
    "UnexpectedStatusError",
    "background",
    "create_retryable_request",
    "extract_error_from_response",
    "get_http_client",
]
