"""Shared test fixtures for the eSignBase client."""

from __future__ import annotations

import json
from typing import Any, Callable, List, Union

import httpx
import pytest

from esignbase import ESignBaseClient, GrantType, Scope

BASE_URL = "https://api.example.com/"

Reply = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


def json_response(status_code: int, payload: Any) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


def token_response(token: str = "abc123") -> httpx.Response:
    return json_response(200, {"access_token": token})


class BrokenStream(httpx.SyncByteStream):
    """Response body whose read fails mid-transfer."""

    def __iter__(self):
        raise httpx.ReadError("connection reset")
        yield b""  # pragma: no cover


def broken_body_response(status_code: int) -> httpx.Response:
    return httpx.Response(status_code, stream=BrokenStream())


class RecordingTransport:
    """Replays queued responses in order and records every request."""

    def __init__(self) -> None:
        self.replies: List[Reply] = []
        self.requests: List[httpx.Request] = []

    def queue(self, *replies: Reply) -> "RecordingTransport":
        self.replies.extend(replies)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if not self.replies:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        reply = self.replies.pop(0)
        if callable(reply):
            return reply(request)
        return reply

    @property
    def token_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/oauth2/token")]

    @property
    def api_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if not r.url.path.endswith("/oauth2/token")]

    def json_body(self, index: int) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def http(transport: RecordingTransport):
    client = httpx.Client(transport=httpx.MockTransport(transport))
    yield client
    client.close()


@pytest.fixture
def client(http: httpx.Client) -> ESignBaseClient:
    return ESignBaseClient(
        client_id="id",
        client_secret="secret",
        grant_type=GrantType.CLIENT_CREDENTIALS,
        scope=[Scope.READ],
        base_url=BASE_URL,
        http=http,
    )


@pytest.fixture
def connected_client(client: ESignBaseClient, transport: RecordingTransport) -> ESignBaseClient:
    transport.queue(token_response("token"))
    client.connect()
    return client
