"""
Client configuration — read-only for the lifetime of a PaymentClient.
"""

import os
from typing import Any, Mapping, Optional

from pydantic import BaseModel

DEFAULT_BASE_URL = "https://api.stripe.com/v1"
DEFAULT_SECRET = "sk_test_super_secret_key"
DEFAULT_PUB_KEY = "pk_test_not_secret_at_all"

# Option name -> environment variable
ENV_VARS = {
    "secret": "STRIPE_SECRET",
    "pub_key": "STRIPE_PUB_KEY",
    "base_url": "STRIPE_BASE_URL",
    "currency_code": "STRIPE_CURRENCY_CODE",
    "auto_capture": "STRIPE_AUTO_CAPTURE",
    "mocked": "STRIPE_MOCKED",
    "timeout": "STRIPE_TIMEOUT",
}


class ClientConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    secret: str = DEFAULT_SECRET
    pub_key: str = DEFAULT_PUB_KEY
    currency_code: str = "USD"       # ISO 4217
    auto_capture: bool = True
    mocked: bool = False
    timeout: float = 30.0

    # Unknown keys are ignored so a host's whole plugin config can be passed in.
    model_config = {"frozen": True, "extra": "ignore"}

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        defaults: Optional[Mapping[str, Any]] = None,
        **overrides: Any,
    ) -> "ClientConfig":
        """Build a config from STRIPE_* environment variables.

        Precedence, lowest first: ``defaults``, environment, keyword overrides
        (None overrides are skipped).
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = dict(defaults or {})
        for name, var in ENV_VARS.items():
            if env.get(var):
                values[name] = env[var]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
