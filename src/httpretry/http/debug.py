import httpx
import structlog

from ..logging import get_request_id

logger = structlog.get_logger(__name__)

REDACTED = "[REDACTED]"


def _redact_authorization(value: str) -> str:
    scheme, _, credentials = value.partition(" ")
    return f"{scheme} {REDACTED}" if credentials else value


def _headers_for_log(headers: httpx.Headers) -> dict[str, str]:
    dumped: dict[str, str] = {}
    for name, value in headers.multi_items():
        if name == "authorization":
            value = _redact_authorization(value)
        dumped[name] = f"{dumped[name]}, {value}" if name in dumped else value
    return dumped


def _body_for_log(content: bytes) -> str:
    return content.decode("utf-8", errors="replace")


def debug_request(request: httpx.Request) -> None:
    """Dump an outgoing request at debug level, tagged with the current request ID"""
    logger.debug(
        "HTTP request",
        request_id=get_request_id(),
        method=request.method,
        url=str(request.url),
        headers=_headers_for_log(request.headers),
        body=_body_for_log(request.content),
    )


def debug_response(response: httpx.Response) -> None:
    """Dump a received response at debug level; the body must already be read"""
    logger.debug(
        "HTTP response",
        request_id=get_request_id(),
        method=response.request.method,
        url=str(response.request.url),
        status_code=response.status_code,
        headers=_headers_for_log(response.headers),
        body=_body_for_log(response.content),
    )
