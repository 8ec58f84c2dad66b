"""Retryable HTTP requests.

Requests are retried on transport failures (connection refused, TLS errors,
timeouts, cancellation) and, optionally, while a caller supplied retry condition
flags the received response.

Non-2xx status codes are not errors here. The status code is handed back so the
caller decides what success means; ``extract_error_from_response`` helps build an
error when it is not.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import NamedTuple

import httpx
import structlog

from ..config import get_settings
from ..context import RequestContext, background
from ..errors import InvalidRequestError, RequestCancelledError
from ..logging import new_request_id, reset_request_id
from .debug import debug_request, debug_response
from .transport import get_http_client

logger = structlog.get_logger(__name__)

RetryPredicate = Callable[[httpx.Response, int], bool]

DEFAULT_ACCEPT = ("application/vnd.api+json", "application/json", "*/*")
DEFAULT_CONTENT_TYPE = "application/vnd.api+json"


class HttpResult(NamedTuple):
    """Outcome of a call: check ``error`` first, then ``status_code``"""

    body: bytes
    status_code: int
    error: Exception | None


@dataclass(frozen=True)
class RequestOptions:
    """Construction parameters for a RetryableRequest.

    ``max_retries`` and ``retries_wait`` fall back to the configured defaults
    (10 attempts, 1 second) when unset or not positive.

    ``retry_condition`` returns False by default. Keep it narrow: a blanket
    ``resp.status_code != 201`` retries every unexpected answer, which slows
    tests, wastes resources and can trip rate limits (e.g. retrying a failed
    OAuth login on every run). Only flag the cases where another attempt has a
    real chance to succeed.
    """

    url: str | httpx.URL
    token: str = ""
    headers: Mapping[str, str] | httpx.Headers | None = None
    max_retries: int | None = None
    retries_wait: float | None = None
    retry_condition: RetryPredicate | None = None
    client: httpx.Client | None = None


def _merge_default_headers(headers: Mapping[str, str] | httpx.Headers | None, token: str) -> httpx.Headers:
    # Caller-set values win; an empty value counts as unset.
    merged = httpx.Headers(headers)
    if not merged.get("Accept"):
        items = [(k, v) for k, v in merged.raw if k.lower() != b"accept"]
        merged = httpx.Headers(items + [("Accept", value) for value in DEFAULT_ACCEPT])
    if not merged.get("Content-Type"):
        merged["Content-Type"] = DEFAULT_CONTENT_TYPE
    if not merged.get("Authorization"):
        merged["Authorization"] = f"Bearer {token}"
    return merged


def _parse_url(url: str | httpx.URL) -> httpx.URL:
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidRequestError(str(url), str(e)) from e
    if parsed.scheme not in ("http", "https"):
        raise InvalidRequestError(str(url), "scheme must be http or https")
    if not parsed.host:
        raise InvalidRequestError(str(url), "missing host")
    return parsed


class RetryableRequest:
    """One endpoint plus its retry configuration; reusable across calls"""

    def __init__(self, options: RequestOptions):
        settings = get_settings()
        self._url = options.url
        self._token = options.token
        self._headers = _merge_default_headers(options.headers, options.token)
        self._max_retries = (
            options.max_retries if options.max_retries and options.max_retries > 0 else settings.max_retries
        )
        self._retries_wait = (
            options.retries_wait
            if options.retries_wait and options.retries_wait > 0
            else settings.retries_wait_seconds
        )
        self._retry_condition = options.retry_condition
        self._client = options.client

    @property
    def url(self) -> str:
        return str(self._url)

    @property
    def token(self) -> str:
        return self._token

    @property
    def headers(self) -> httpx.Headers:
        """A copy of the headers sent with every request"""
        return httpx.Headers(self._headers)

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def retries_wait(self) -> float:
        return self._retries_wait

    @property
    def retry_condition(self) -> RetryPredicate | None:
        return self._retry_condition

    def get(self, ctx: RequestContext | None = None) -> HttpResult:
        """Send a GET request with retries"""
        return self._do("GET", None, ctx)

    def post(self, body: bytes, ctx: RequestContext | None = None) -> HttpResult:
        """Send a POST request with ``body`` sent verbatim"""
        return self._do("POST", body, ctx)

    def put(self, body: bytes, ctx: RequestContext | None = None) -> HttpResult:
        """Send a PUT request with ``body`` sent verbatim"""
        return self._do("PUT", body, ctx)

    def patch(self, body: bytes, ctx: RequestContext | None = None) -> HttpResult:
        """Send a PATCH request with ``body`` sent verbatim"""
        return self._do("PATCH", body, ctx)

    def delete(self, ctx: RequestContext | None = None) -> HttpResult:
        """Send a DELETE request with retries"""
        return self._do("DELETE", None, ctx)

    def _do(self, method: str, body: bytes | None, ctx: RequestContext | None) -> HttpResult:
        ctx = ctx or background()
        client = self._client or get_http_client()
        try:
            request = self._build_request(client, method, body)
        except InvalidRequestError as e:
            logger.warning("Request not sent", method=method, url=self.url, error=str(e))
            return HttpResult(b"", 0, e)
        return self._do_with_retries(client, request, ctx)

    def _build_request(self, client: httpx.Client, method: str, body: bytes | None) -> httpx.Request:
        url = _parse_url(self._url)
        # Values go on the wire trimmed, so an empty token sends "Bearer".
        headers = httpx.Headers([(name, value.strip()) for name, value in self._headers.raw])
        return client.build_request(method, url, headers=headers, content=body)

    def _send(self, client: httpx.Client, request: httpx.Request, ctx: RequestContext) -> httpx.Response:
        cancelled = ctx.error()
        if cancelled is not None:
            raise cancelled
        remaining = ctx.remaining()
        if remaining is not None:
            request.extensions["timeout"] = httpx.Timeout(remaining).as_dict()
        debug_request(request)
        # Not streamed: the whole body is read before send returns.
        response = client.send(request)
        debug_response(response)
        return response

    def _do_with_retries(self, client: httpx.Client, request: httpx.Request, ctx: RequestContext) -> HttpResult:
        """Run up to ``max_retries`` attempts, ``retries_wait`` seconds apart.

        Only the last attempt's outcome is kept. Exhausting the attempts on
        transport failures returns the last error with status 0; exhausting them
        because the retry condition kept returning True returns the last body and
        status with no error, so callers must still check the status code.
        """
        body, status_code, error = b"", 0, None
        attempt = 0

        while attempt < self._max_retries:
            attempt += 1
            request_id_token = new_request_id()
            try:
                response = self._send(client, request, ctx)
            except (httpx.RequestError, RequestCancelledError) as e:
                body, status_code, error = b"", 0, e
                logger.warning(
                    "HTTP request failed",
                    method=request.method,
                    url=str(request.url),
                    attempt=attempt,
                    max_retries=self._max_retries,
                    error=str(e),
                )
            else:
                body, status_code, error = response.content, response.status_code, None
                if self._retry_condition is None or not self._retry_condition(response, attempt):
                    return HttpResult(body, status_code, None)
                logger.info(
                    "Retry condition returned true",
                    method=request.method,
                    url=str(request.url),
                    status_code=status_code,
                    attempt=attempt,
                    max_retries=self._max_retries,
                )
            finally:
                reset_request_id(request_id_token)

            if attempt < self._max_retries:
                ctx.wait(self._retries_wait)

        return HttpResult(body, status_code, error)


def create_retryable_request(
    url: str | httpx.URL,
    token: str = "",
    headers: Mapping[str, str] | httpx.Headers | None = None,
    max_retries: int | None = None,
    retries_wait: float | None = None,
    retry_condition: RetryPredicate | None = None,
    client: httpx.Client | None = None,
) -> RetryableRequest:
    """Factory function to create a retryable request"""
    return RetryableRequest(
        RequestOptions(
            url=url,
            token=token,
            headers=headers,
            max_retries=max_retries,
            retries_wait=retries_wait,
            retry_condition=retry_condition,
            client=client,
        )
    )
