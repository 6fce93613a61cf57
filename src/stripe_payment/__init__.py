"""
stripe-payment — Stripe charges for Python.

Async REST client for creating, capturing and retrieving charges, plus an
in-process mock of the API for offline tests.
"""

from stripe_payment.client import PaymentClient, SyncPaymentClient
from stripe_payment.config import ClientConfig
from stripe_payment.errors import (
    StripePaymentError,
    ValidationError,
    AmountRequired,
    CurrencyRequired,
    SourceRequired,
    IdRequired,
    StatementDescriptorTooLong,
    TransportError,
    ChargeError,
)
from stripe_payment.mock import MockPaymentServer
from stripe_payment.models.charge import ChargeResponse, ChargeResult

__version__ = "0.1.0"
__all__ = [
    "PaymentClient",
    "SyncPaymentClient",
    "ClientConfig",
    "MockPaymentServer",
    "ChargeResponse",
    "ChargeResult",
    "StripePaymentError",
    "ValidationError",
    "AmountRequired",
    "CurrencyRequired",
    "SourceRequired",
    "IdRequired",
    "StatementDescriptorTooLong",
    "TransportError",
    "ChargeError",
]
