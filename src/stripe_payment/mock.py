"""
In-process stand-in for the Stripe charges API.

    server = MockPaymentServer(secret="sk_test_x")
    client = PaymentClient(ClientConfig(mocked=True, secret="sk_test_x"), mock=server)

Endpoints, below MOCK_PATH_PREFIX:

    POST /charges
    POST /charges/{id}/capture
    GET  /charges/{id}

The server does not track charges. It owns a single charge fixture and
fills in fields from each request only while they are still unset, so
the fixture accumulates state across calls for the lifetime of the
instance. There is no locking: use one server per test and drive it from a
single event loop.

A request that carries a ``token`` field together with the configured
secret as credentials is answered with HTTP 400 and an empty body.
"""

import base64
import binascii
import logging
import re
import time
from typing import Any, Optional

import httpx

from stripe_payment.config import DEFAULT_SECRET
from stripe_payment.models.charge import ChargeResult

logger = logging.getLogger(__name__)

MOCK_PATH_PREFIX = "/mocked/stripe-payment"
MOCK_BASE_URL = f"http://stripe-payment.mock{MOCK_PATH_PREFIX}"

FAIL_RESPONSE: dict[str, Any] = {}

_CAPTURE_ROUTE = re.compile(r"^/charges/(?P<id>[^/]+)/capture/?$")
_CHARGE_ROUTE = re.compile(r"^/charges/?(?P<id>[^/]*)/?$")


def default_fixture() -> ChargeResult:
    return ChargeResult(
        id="ch_15ceESLV2Qt9u2twk0Arv0Z8",
        object="charge",
        created=int(time.time()),
        paid=True,
        status="succeeded",
        refunded=False,
        source={},
        balance_transaction="txn_14sJxWLV2Qt9u2tw35SuFG9X",
        amount_refunded=0,
        dispute=0,
        metadata={},
        fraud_details={},
        refunds={},
    )


def _truthy(value: Optional[str]) -> bool:
    return value not in (None, "", "0", "false", "False")


def _amount(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip().isdigit():
        return None
    return int(value)


class MockPaymentServer:
    def __init__(self, secret: str = DEFAULT_SECRET, fixture: Optional[ChargeResult] = None):
        self.secret = secret
        self.charge = fixture or default_fixture()

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    # --- request helpers ---

    @staticmethod
    def _params(request: httpx.Request) -> httpx.QueryParams:
        """Query string and form body merged; body values win."""
        merged = dict(request.url.params.multi_items())
        if request.method != "GET" and request.content:
            merged.update(httpx.QueryParams(request.content.decode("utf-8")).multi_items())
        return httpx.QueryParams(merged)

    @staticmethod
    def _userinfo(request: httpx.Request) -> str:
        header = request.headers.get("Authorization", "")
        scheme, _, encoded = header.partition(" ")
        if scheme.lower() != "basic":
            return ""
        try:
            return base64.b64decode(encoded).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return ""

    def _should_fail(self, request: httpx.Request, params: httpx.QueryParams) -> bool:
        return bool(params.get("token")) and self._userinfo(request) == f"{self.secret}:"

    def _livemode(self) -> bool:
        return "test" not in self.secret

    def _render(self, status_code: int = 200) -> httpx.Response:
        return httpx.Response(status_code, json=self.charge.model_dump())

    @staticmethod
    def _fail() -> httpx.Response:
        return httpx.Response(400, json=FAIL_RESPONSE)

    # --- dispatch ---

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if not path.startswith(MOCK_PATH_PREFIX):
            return self._not_found(path)
        path = path[len(MOCK_PATH_PREFIX):]
        params = self._params(request)
        logger.debug("mock %s %s", request.method, path)

        capture = _CAPTURE_ROUTE.match(path)
        if capture and request.method == "POST":
            return self.capture_charge(request, params)
        charge = _CHARGE_ROUTE.match(path)
        if charge and request.method == "POST" and not charge.group("id"):
            return self.create_charge(request, params)
        if charge and request.method == "GET":
            return self.retrieve_charge(request, params, charge.group("id"))
        return self._not_found(path)

    def create_charge(self, request: httpx.Request, params: httpx.QueryParams) -> httpx.Response:
        if self._should_fail(request, params):
            return self._fail()
        c = self.charge
        if c.amount is None:
            c.amount = _amount(params.get("amount"))
        if c.captured is None:
            c.captured = _truthy(params.get("capture", "true"))
        if c.currency is None and params.get("currency"):
            c.currency = params["currency"].lower()
        if c.description is None:
            c.description = params.get("description") or ""
        if c.livemode is None:
            c.livemode = self._livemode()
        if c.receipt_email is None:
            c.receipt_email = params.get("receipt_email")
        return self._render()

    def capture_charge(self, request: httpx.Request, params: httpx.QueryParams) -> httpx.Response:
        if self._should_fail(request, params):
            return self._fail()
        c = self.charge
        if c.amount is None:
            c.amount = _amount(params.get("amount"))
        c.captured = True
        if c.livemode is None:
            c.livemode = self._livemode()
        if c.receipt_email is None:
            c.receipt_email = params.get("receipt_email")
        return self._render()

    def retrieve_charge(self, request: httpx.Request, params: httpx.QueryParams, charge_id: str) -> httpx.Response:
        if self._should_fail(request, params):
            return self._fail()
        if not charge_id:
            return self._fail()
        self.charge.id = charge_id
        return self._render()

    @staticmethod
    def _not_found(path: str) -> httpx.Response:
        return httpx.Response(404, json={
            "error": {"type": "invalid_request_error", "message": f"Unrecognized request URL ({path})"},
        })
