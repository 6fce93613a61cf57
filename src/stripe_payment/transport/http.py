"""
REST HTTP client for the Stripe charges API.

Every request resolves to a ChargeResponse; transport and HTTP errors are
normalized into its ``error`` slot instead of being raised.
"""

import logging
from typing import Any, Optional

import httpx

from stripe_payment.errors import TransportError
from stripe_payment.models.charge import ChargeResponse

logger = logging.getLogger(__name__)

USER_AGENT = "stripe-payment/0.1.0"


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class HttpClient:
    def __init__(
        self,
        base_url: str,
        secret: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        # Basic auth: the secret key is the username, the password is empty.
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            auth=httpx.BasicAuth(secret, ""),
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    @staticmethod
    def _json(resp: httpx.Response) -> dict[str, Any]:
        try:
            data = resp.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _error_message(resp: httpx.Response, body: dict[str, Any]) -> str:
        """Prefer the body's message, then its code, then the HTTP reason phrase."""
        error = body.get("error")
        if isinstance(error, dict):
            message = error.get("message") or error.get("code")
            if message:
                return str(message)
        message = body.get("message") or body.get("code")
        if message:
            return str(message)
        return resp.reason_phrase or f"HTTP {resp.status_code}"

    @classmethod
    def _to_response(cls, resp: httpx.Response) -> ChargeResponse:
        body = cls._json(resp)
        if resp.status_code >= 400:
            return ChargeResponse(cls._error_message(resp, body), body)
        return ChargeResponse("", body)

    async def _send(self, method: str, path: str, form: Optional[dict[str, Any]] = None) -> httpx.Response:
        data = {k: _form_value(v) for k, v in form.items()} if form is not None else None
        try:
            return await self._client.request(method, path, data=data)
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__) from e

    async def request(self, method: str, path: str, form: Optional[dict[str, Any]] = None) -> ChargeResponse:
        try:
            resp = await self._send(method, path, form)
        except TransportError as e:
            logger.warning("%s %s failed: %s", method, self.url(path), e)
            return ChargeResponse(str(e), {})
        logger.debug("%s %s -> %s", method, self.url(path), resp.status_code)
        return self._to_response(resp)

    async def get(self, path: str) -> ChargeResponse:
        return await self.request("GET", path)

    async def post(self, path: str, form: Optional[dict[str, Any]] = None) -> ChargeResponse:
        return await self.request("POST", path, form or {})

    async def close(self) -> None:
        await self._client.aclose()
