"""
stripe-payment error types.

Validation errors are raised by the request validator and converted by the
client into a failed ChargeResponse; they never escape PaymentClient calls.
"""

from typing import Any, Optional


class StripePaymentError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ValidationError(StripePaymentError):
    """A request was rejected locally, before any network call."""

    code = "validation_error"
    message = "invalid request"

    def __init__(self, message: Optional[str] = None):
        super().__init__(type(self).code, message or type(self).message)


class AmountRequired(ValidationError):
    code = "amount_required"
    message = "amount is required"


class CurrencyRequired(ValidationError):
    code = "currency_required"
    message = "currency is required"


class SourceRequired(ValidationError):
    code = "source_required"
    message = "source/token is required"


class IdRequired(ValidationError):
    code = "id_required"
    message = "id is required"


class StatementDescriptorTooLong(ValidationError):
    code = "statement_descriptor_too_long"
    message = "statement_descriptor is too long"


class TransportError(StripePaymentError):
    def __init__(self, message: str):
        super().__init__("transport_error", message)


class ChargeError(StripePaymentError):
    """Raised by ChargeResponse.raise_for_error() for callers preferring exceptions."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("charge_error", message, details)
