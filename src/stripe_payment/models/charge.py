"""
Charge models — the provider's charge object and the uniform call result.
"""

from typing import Any, NamedTuple, Optional
from pydantic import BaseModel

from stripe_payment.errors import ChargeError


class ChargeResult(BaseModel):
    """Stripe charge object. Unknown keys are kept as extra fields."""
    id: Optional[str] = None
    object: str = "charge"
    created: Optional[int] = None
    paid: Optional[bool] = None
    status: Optional[str] = None      # "succeeded" | "failed" | "pending"
    refunded: Optional[bool] = None
    captured: Optional[bool] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    livemode: Optional[bool] = None
    description: Optional[str] = None
    receipt_email: Optional[str] = None
    statement_descriptor: Optional[str] = None
    balance_transaction: Optional[str] = None
    failure_message: Optional[str] = None
    failure_code: Optional[str] = None
    amount_refunded: int = 0
    customer: Optional[str] = None
    invoice: Optional[str] = None
    dispute: Optional[Any] = None
    receipt_number: Optional[str] = None
    metadata: dict[str, Any] = {}
    shipping: Optional[dict[str, Any]] = None
    # Opaque passthrough sub-objects
    source: dict[str, Any] = {}
    fraud_details: dict[str, Any] = {}
    refunds: dict[str, Any] = {}

    model_config = {"extra": "allow"}


class ChargeResponse(NamedTuple):
    """Result of every PaymentClient call: ``error, charge = await client.create_charge(...)``.

    ``error`` is an empty string on success. ``charge`` is the parsed response
    body, or ``{}`` for local validation and transport failures.
    """
    error: str
    charge: dict[str, Any]

    @property
    def ok(self) -> bool:
        return not self.error

    def result(self) -> ChargeResult:
        return ChargeResult.model_validate(self.charge)

    def raise_for_error(self) -> "ChargeResponse":
        if self.error:
            raise ChargeError(self.error, details=self.charge)
        return self
