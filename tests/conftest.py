from typing import Any, Optional

import httpx
import pytest

from stripe_payment import ClientConfig, PaymentClient


class Recorder:
    """httpx.MockTransport handler that records requests and replays a canned response."""

    def __init__(self, status_code: int = 200, body: Any = None, content: Optional[bytes] = None):
        self.status_code = status_code
        self.body = {"id": "ch_recorded", "object": "charge"} if body is None else body
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def form(self, index: int = -1) -> dict[str, str]:
        return dict(httpx.QueryParams(self.requests[index].content.decode()))


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_client():
    def _make(handler=None, **config: Any) -> PaymentClient:
        transport = httpx.MockTransport(handler) if handler is not None else None
        return PaymentClient(ClientConfig(secret="sk_test_x", **config), transport=transport)
    return _make
