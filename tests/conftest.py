"""Shared fixtures: fake transports so no test touches the network."""

from typing import Callable, List, Optional

import httpx
import pytest

from tersehttp.clients.transport import TransportResponse, reset_default_transport
from tersehttp.core.config import get_settings


class RecordingTransport:
    """Transport returning a canned response and remembering every call."""

    def __init__(self, response: Optional[TransportResponse] = None, error: Optional[BaseException] = None):
        self.response = response or TransportResponse(200, {}, "")
        self.error = error
        self.calls: List[dict] = []

    def send(self, method, url, headers, body):
        self.calls.append({"method": method, "url": url, "headers": list(headers), "body": body})
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last(self) -> dict:
        return self.calls[-1]


@pytest.fixture
def recorder():
    return RecordingTransport()


@pytest.fixture
def mock_client():
    """Factory building an ``httpx.Client`` served by a handler function."""
    clients = []

    def make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield make
    for client in clients:
        client.close()


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    reset_default_transport()
