"""
stripe-payment CLI — `stripe-payment` command.

Commands:
  stripe-payment config set|show     Saved client settings
  stripe-payment charge create       Create a charge
  stripe-payment charge capture ID   Capture an authorized charge
  stripe-payment charge retrieve ID  Fetch a charge
  stripe-payment pub-key             Print the publishable key
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install stripe-payment[cli]")

from stripe_payment import __version__
from stripe_payment.client import PaymentClient
from stripe_payment.config import ClientConfig

console = Console()
CONFIG_FILE = Path.home() / ".stripe-payment" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _get_config(mocked: Optional[bool] = None) -> ClientConfig:
    return ClientConfig.from_env(defaults=_load_config(), mocked=mocked)


def _get_client(mocked: Optional[bool] = None) -> PaymentClient:
    return PaymentClient(_get_config(mocked))


def _run(coro: Any) -> Any:
    return asyncio.run(coro)


@click.group()
@click.version_option(__version__)
@click.option("--debug", is_flag=True, envvar="STRIPE_PAYMENT_DEBUG", help="Log HTTP traffic.")
def main(debug: bool):
    """stripe-payment CLI — create, capture and retrieve Stripe charges."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="[stripe-payment] %(name)s: %(message)s")


# Register subcommands from separate modules
from stripe_payment.cli.charges import charge, pub_key  # noqa: E402
from stripe_payment.cli.settings import config  # noqa: E402

main.add_command(charge)
main.add_command(pub_key)
main.add_command(config)


if __name__ == "__main__":
    main()
