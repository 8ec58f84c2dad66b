# Assumptions:
# - Failures are handed back to callers as values, not raised from the verbs
# - Transport failures keep httpx's own exception types
# - Only cancellation and URL problems need types of their own


class HttpRetryError(Exception):
    """Base exception for retryable requests"""

    pass


class RequestCancelledError(HttpRetryError):
    """Raised in place of a send when the request context is cancelled or expired"""

    def __init__(self, reason: str = "context canceled"):
        self.reason = reason
        super().__init__(reason)


class InvalidRequestError(HttpRetryError):
    """Raised when a request cannot be built, e.g. for a malformed URL"""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid request URL {url!r}: {reason}")


class UnexpectedStatusError(HttpRetryError):
    """Response status did not match what the caller expected"""

    def __init__(self, expected_status: int, actual_status: int, url: str, response_body: bytes):
        self.expected_status = expected_status
        self.actual_status = actual_status
        self.url = url
        self.response_body = response_body
        body = response_body.decode("utf-8", errors="replace")
        super().__init__(f"expected {expected_status},\nactual: {actual_status},\nURL: {url},\nresponse: {body}")


def extract_error_from_response(
    expected_status: int, actual_status: int, url_called, response_body: bytes
) -> UnexpectedStatusError:
    """Build an error describing an unexpected status code for callers to return or raise"""
    return UnexpectedStatusError(expected_status, actual_status, str(url_called), response_body)
