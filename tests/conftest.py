import os

import httpx
import pytest

from httpretry.config import get_settings
from httpretry.http import reset_http_client


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate tests from HTTPRETRY_* variables and from each other's shared client"""
    for key in list(os.environ):
        if key.startswith("HTTPRETRY_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    reset_http_client()


class RecordingHandler:
    """MockTransport handler that records requests and replays scripted outcomes.

    Each outcome is an exception to raise or a ``(status_code, body)`` pair; a
    ``None`` body echoes the request body. The last outcome repeats once the
    script runs out.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        status_code, body = outcome
        return httpx.Response(status_code, content=request.content if body is None else body)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def recording_client():
    """Build an httpx.Client backed by a RecordingHandler"""
    clients = []

    def factory(*outcomes):
        handler = RecordingHandler(*outcomes)
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client, handler

    yield factory

    for client in clients:
        client.close()
