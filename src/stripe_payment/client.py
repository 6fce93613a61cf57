"""
PaymentClient / SyncPaymentClient — Stripe charges API clients.
"""

import asyncio
import logging
from typing import Any, Mapping, Optional
from urllib.parse import quote

import httpx

from stripe_payment.config import DEFAULT_SECRET, ClientConfig
from stripe_payment.errors import ValidationError
from stripe_payment.mock import MOCK_BASE_URL, MockPaymentServer
from stripe_payment.models.charge import ChargeResponse
from stripe_payment.transport.http import HttpClient
from stripe_payment.validation import ChargeRequestValidator, ParamLookup

logger = logging.getLogger(__name__)


class PaymentClient:
    """Async Stripe charges client (primary).

    Every operation returns a ChargeResponse exactly once; failures are
    reported through its ``error`` field, never raised.

        async with PaymentClient(ClientConfig(secret=...)) as stripe:
            error, charge = await stripe.create_charge({"amount": 100, "source": "tok_123"})
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        mock: Optional[MockPaymentServer] = None,
    ):
        self.config = config or ClientConfig()
        self.validator = ChargeRequestValidator(self.config)
        self.mock: Optional[MockPaymentServer] = None

        base_url = self.config.base_url
        if self.config.mocked:
            self.mock = mock or MockPaymentServer(secret=self.config.secret)
            base_url = MOCK_BASE_URL
            transport = transport or self.mock.transport()
        elif self.config.secret == DEFAULT_SECRET:
            logger.warning("No Stripe secret configured; using the placeholder test key")

        self.http = HttpClient(
            base_url=base_url,
            secret=self.config.secret,
            timeout=self.config.timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self.http.base_url

    def public_key(self) -> str:
        """Publishable key, for client-side checkout code."""
        return self.config.pub_key

    async def create_charge(
        self, args: Optional[Mapping[str, Any]] = None, params: Optional[ParamLookup] = None,
    ) -> ChargeResponse:
        """Create a charge.

        ``args`` may hold any of amount, application_fee, capture, currency,
        customer, description, metadata, receipt_email, shipping, source (or
        its alias token) and statement_descriptor. ``params`` supplies
        defaults for amount, description, stripeEmail and stripeToken.
        """
        try:
            form = self.validator.validate_charge(args, params)
        except ValidationError as e:
            logger.info("create_charge rejected: %s", e)
            return ChargeResponse(str(e), {})
        logger.debug("Charge %s %s %s", self.http.url("/charges"), form["amount"], form["currency"])
        return await self.http.post("/charges", form)

    async def capture_charge(self, args: Optional[Mapping[str, Any]]) -> ChargeResponse:
        """Capture a previously created charge. ``args`` needs "id"."""
        try:
            charge_id, form = self.validator.validate_capture(args)
        except ValidationError as e:
            logger.info("capture_charge rejected: %s", e)
            return ChargeResponse(str(e), {})
        path = f"/charges/{quote(charge_id, safe='')}/capture"
        logger.debug("Capture %s %s", self.http.url(path), charge_id)
        return await self.http.post(path, form)

    async def retrieve_charge(self, args: Optional[Mapping[str, Any]] = None) -> ChargeResponse:
        """Retrieve a charge by "id"."""
        charge_id = self.validator.validate_retrieve(args)
        path = f"/charges/{quote(charge_id, safe='')}"
        logger.debug("Retrieve charge %s", self.http.url(path))
        return await self.http.get(path)

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "PaymentClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


class SyncPaymentClient:
    """Sync wrapper around PaymentClient. Runs the event loop internally."""

    def __init__(self, config: Optional[ClientConfig] = None, **kwargs: Any):
        self._loop = asyncio.new_event_loop()
        self._async = PaymentClient(config, **kwargs)

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def config(self) -> ClientConfig:
        return self._async.config

    @property
    def mock(self) -> Optional[MockPaymentServer]:
        return self._async.mock

    def public_key(self) -> str:
        return self._async.public_key()

    def create_charge(
        self, args: Optional[Mapping[str, Any]] = None, params: Optional[ParamLookup] = None,
    ) -> ChargeResponse:
        return self._run(self._async.create_charge(args, params))

    def capture_charge(self, args: Optional[Mapping[str, Any]]) -> ChargeResponse:
        return self._run(self._async.capture_charge(args))

    def retrieve_charge(self, args: Optional[Mapping[str, Any]] = None) -> ChargeResponse:
        return self._run(self._async.retrieve_charge(args))

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()

    def __enter__(self) -> "SyncPaymentClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
