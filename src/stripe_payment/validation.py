"""
Charge request validation.

Turns loosely-typed caller input into the form fields sent to Stripe.
Missing values fall back to the caller context (a ParamLookup, usually the
submitted checkout form) and then to the client configuration.
"""

import logging
from typing import Any, Mapping, Optional, Protocol

from stripe_payment.config import ClientConfig
from stripe_payment.errors import (
    AmountRequired,
    CurrencyRequired,
    IdRequired,
    SourceRequired,
    StatementDescriptorTooLong,
)
from stripe_payment.fields import flatten

logger = logging.getLogger(__name__)

CAPTURE_KEYS = ("amount", "application_fee", "receipt_email", "statement_descriptor")
CHARGE_KEYS = CAPTURE_KEYS + (
    "currency", "customer", "source", "description", "capture", "metadata", "shipping",
)
STATEMENT_DESCRIPTOR_MAX_LENGTH = 22
INVALID_ID = "invalid"


class ParamLookup(Protocol):
    """Caller context: anything with ``get(name)``, e.g. a dict or a form multidict."""

    def get(self, name: str) -> Optional[str]: ...


class _NoParams:
    def get(self, name: str) -> Optional[str]:
        return None


NO_PARAMS: ParamLookup = _NoParams()


def _check_statement_descriptor(form: Mapping[str, Any]) -> None:
    descriptor = form.get("statement_descriptor")
    if descriptor is not None and len(str(descriptor)) > STATEMENT_DESCRIPTOR_MAX_LENGTH:
        raise StatementDescriptorTooLong()


class ChargeRequestValidator:
    def __init__(self, config: ClientConfig):
        self._config = config

    def validate_charge(
        self, args: Optional[Mapping[str, Any]] = None, params: Optional[ParamLookup] = None,
    ) -> dict[str, Any]:
        """Build the create-charge form. Raises a ValidationError subclass.

        The descriptor length is checked before amount, currency and source,
        so a too-long descriptor wins when several fields are wrong.
        """
        args = args or {}
        params = params or NO_PARAMS
        form: dict[str, Any] = {k: args[k] for k in CHARGE_KEYS if args.get(k) is not None}

        form["amount"] = form.get("amount") or params.get("amount")
        form["currency"] = form.get("currency") or self._config.currency_code
        if form.get("description") is None:
            form["description"] = params.get("description") or ""
        flatten(form)
        if not form.get("receipt_email") and params.get("stripeEmail"):
            form["receipt_email"] = params.get("stripeEmail")
        # "token" is the legacy name of "source" and is still sent along.
        if args.get("token"):
            form["token"] = args["token"]
        form["source"] = form.get("source") or args.get("token") or params.get("stripeToken")
        if form.get("capture") is None:
            form["capture"] = self._config.auto_capture

        _check_statement_descriptor(form)
        if not form["amount"]:
            raise AmountRequired()
        if not form["currency"]:
            raise CurrencyRequired()
        if not form["source"]:
            raise SourceRequired()
        return form

    def validate_capture(self, args: Optional[Mapping[str, Any]]) -> tuple[str, dict[str, Any]]:
        """Return (charge id, capture form)."""
        args = args or {}
        if not args.get("id"):
            raise IdRequired()
        form = {k: args[k] for k in CAPTURE_KEYS if args.get(k) is not None}
        _check_statement_descriptor(form)
        return str(args["id"]), form

    def validate_retrieve(self, args: Optional[Mapping[str, Any]]) -> str:
        """Return the charge id; a missing id is left for the server to reject."""
        charge_id = (args or {}).get("id")
        if not charge_id:
            logger.debug("retrieve_charge without id, requesting %r", INVALID_ID)
            return INVALID_ID
        return str(charge_id)
