"""PaymentClient request building and error normalization, against recording transports."""

import asyncio
import base64

import httpx
import pytest

from stripe_payment import ClientConfig, PaymentClient, SyncPaymentClient

from conftest import Recorder


def _basic(secret: str) -> str:
    return "Basic " + base64.b64encode(f"{secret}:".encode()).decode()


class TestCreateCharge:
    @pytest.mark.asyncio
    async def test_request_shape(self, make_client, recorder):
        client = make_client(recorder)
        error, charge = await client.create_charge({"amount": 100, "currency": "usd", "source": "tok_1"})
        await client.close()

        assert error == ""
        assert charge == {"id": "ch_recorded", "object": "charge"}
        req = recorder.last
        assert req.method == "POST"
        assert str(req.url) == "https://api.stripe.com/v1/charges"
        assert req.headers["Authorization"] == _basic("sk_test_x")
        assert req.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert recorder.form() == {
            "amount": "100",
            "currency": "usd",
            "source": "tok_1",
            "description": "",
            "capture": "true",
        }

    @pytest.mark.asyncio
    async def test_metadata_is_sent_flattened(self, make_client, recorder):
        client = make_client(recorder)
        await client.create_charge({"amount": 100, "source": "tok_1", "metadata": {"city": "Oslo"}})
        await client.close()

        form = recorder.form()
        assert form["metadata[city]"] == "Oslo"
        assert "metadata" not in form

    @pytest.mark.asyncio
    async def test_caller_context_defaults(self, make_client, recorder):
        client = make_client(recorder, auto_capture=False)
        await client.create_charge(params={"amount": "250", "stripeToken": "tok_form", "stripeEmail": "a@b.c"})
        await client.close()

        form = recorder.form()
        assert form["amount"] == "250"
        assert form["source"] == "tok_form"
        assert form["receipt_email"] == "a@b.c"
        assert form["currency"] == "USD"
        assert form["capture"] == "false"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("args, message", [
        ({"source": "tok_1"}, "amount is required"),
        ({"amount": 100}, "source/token is required"),
        ({"amount": 100, "source": "tok_1", "statement_descriptor": "x" * 23}, "statement_descriptor is too long"),
    ])
    async def test_validation_failure_makes_no_request(self, make_client, recorder, args, message):
        client = make_client(recorder)
        error, charge = await client.create_charge(args)
        await client.close()

        assert error == message
        assert charge == {}
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_missing_currency_makes_no_request(self, make_client, recorder):
        client = make_client(recorder, currency_code="")
        error, charge = await client.create_charge({"amount": 100, "source": "tok_1"})
        await client.close()

        assert error == "currency is required"
        assert recorder.requests == []


class TestCaptureCharge:
    @pytest.mark.asyncio
    async def test_request_shape(self, make_client, recorder):
        client = make_client(recorder)
        error, _ = await client.capture_charge({"id": "ch_1", "amount": 50, "currency": "usd"})
        await client.close()

        assert error == ""
        req = recorder.last
        assert req.method == "POST"
        assert str(req.url) == "https://api.stripe.com/v1/charges/ch_1/capture"
        assert recorder.form() == {"amount": "50"}

    @pytest.mark.asyncio
    async def test_missing_id(self, make_client, recorder):
        client = make_client(recorder)
        error, charge = await client.capture_charge({"amount": 50})
        await client.close()

        assert error == "id is required"
        assert charge == {}
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_statement_descriptor_too_long(self, make_client, recorder):
        client = make_client(recorder)
        error, _ = await client.capture_charge({"id": "ch_1", "statement_descriptor": "z" * 23})
        await client.close()

        assert error == "statement_descriptor is too long"
        assert recorder.requests == []


class TestRetrieveCharge:
    @pytest.mark.asyncio
    async def test_request_shape(self, make_client, recorder):
        client = make_client(recorder)
        await client.retrieve_charge({"id": "ch_1"})
        await client.close()

        req = recorder.last
        assert req.method == "GET"
        assert str(req.url) == "https://api.stripe.com/v1/charges/ch_1"
        assert req.content == b""
        assert req.headers["Authorization"] == _basic("sk_test_x")

    @pytest.mark.asyncio
    async def test_missing_id_is_sent_as_invalid(self, make_client, recorder):
        client = make_client(recorder)
        await client.retrieve_charge({})
        await client.close()

        assert len(recorder.requests) == 1
        assert recorder.last.url.path.endswith("/charges/invalid")

    @pytest.mark.asyncio
    async def test_id_is_path_escaped(self, make_client, recorder):
        client = make_client(recorder)
        await client.retrieve_charge({"id": "ch 1/2"})
        await client.close()

        assert recorder.last.url.raw_path == b"/v1/charges/ch%201%2F2"


class TestErrorNormalization:
    @pytest.mark.asyncio
    async def test_api_error_message(self, make_client):
        body = {"error": {"type": "card_error", "code": "card_declined", "message": "Your card was declined."}}
        client = make_client(Recorder(402, body))
        error, charge = await client.create_charge({"amount": 100, "source": "tok_1"})
        await client.close()

        assert error == "Your card was declined."
        assert charge == body

    @pytest.mark.asyncio
    async def test_api_error_code_fallback(self, make_client):
        client = make_client(Recorder(400, {"error": {"code": "parameter_missing"}}))
        error, _ = await client.retrieve_charge({"id": "ch_1"})
        await client.close()

        assert error == "parameter_missing"

    @pytest.mark.asyncio
    async def test_reason_phrase_fallback(self, make_client):
        client = make_client(Recorder(400, {}))
        error, charge = await client.retrieve_charge({"id": "ch_1"})
        await client.close()

        assert error == "Bad Request"
        assert charge == {}

    @pytest.mark.asyncio
    async def test_unparsable_body(self, make_client):
        client = make_client(Recorder(500, content=b"<html>oops</html>"))
        error, charge = await client.retrieve_charge({"id": "ch_1"})
        await client.close()

        assert error == "Internal Server Error"
        assert charge == {}

    @pytest.mark.asyncio
    async def test_transport_error(self, make_client):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(refuse)
        error, charge = await client.create_charge({"amount": 100, "source": "tok_1"})
        await client.close()

        assert error == "connection refused"
        assert charge == {}


class TestClient:
    def test_public_key_is_stable(self):
        client = PaymentClient(ClientConfig(pub_key="pk_test_123"))
        assert client.public_key() == "pk_test_123"
        assert client.public_key() == client.public_key()

    def test_custom_base_url(self):
        client = PaymentClient(ClientConfig(base_url="https://stripe.example.com/v1/"))
        assert client.base_url == "https://stripe.example.com/v1"

    @pytest.mark.asyncio
    async def test_concurrent_calls(self, make_client, recorder):
        async with make_client(recorder) as client:
            results = await asyncio.gather(*(client.retrieve_charge({"id": f"ch_{i}"}) for i in range(5)))

        assert all(r.ok for r in results)
        assert sorted(r.url.path for r in recorder.requests) == [f"/v1/charges/ch_{i}" for i in range(5)]

    def test_sync_client(self):
        recorder = Recorder()
        with SyncPaymentClient(ClientConfig(secret="sk_test_x"), transport=httpx.MockTransport(recorder)) as client:
            error, charge = client.create_charge({"amount": 100, "source": "tok_1"})
            assert client.public_key() == "pk_test_not_secret_at_all"

        assert error == ""
        assert charge["id"] == "ch_recorded"
        assert recorder.last.url.path == "/v1/charges"
