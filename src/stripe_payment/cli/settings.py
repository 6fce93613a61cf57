"""CLI: stripe-payment config set|show"""

import click
import pydantic
from rich.console import Console
from rich.table import Table

from stripe_payment.config import ClientConfig

console = Console()

SECRET_FIELDS = {"secret"}


def _load_config() -> dict:
    from stripe_payment.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from stripe_payment.cli.main import _save_config
    _save_config(cfg)


def _mask(value: str) -> str:
    return value[:7] + "…" if len(value) > 7 else "…"


@click.group()
def config():
    """Saved client settings."""


@config.command("set")
@click.option("--secret", default=None, help="Stripe secret key")
@click.option("--pub-key", default=None, help="Stripe publishable key")
@click.option("--base-url", default=None)
@click.option("--currency-code", default=None, help="ISO 4217 code, e.g. USD")
@click.option("--auto-capture/--no-auto-capture", default=None)
def config_set(**options):
    """Save settings to ~/.stripe-payment/config.json."""
    cfg = {**_load_config(), **{k: v for k, v in options.items() if v is not None}}
    try:
        ClientConfig.model_validate(cfg)
    except pydantic.ValidationError as e:
        raise click.ClickException(str(e))
    _save_config(cfg)
    console.print("[green]Settings saved.[/green]")


@config.command("show")
def config_show():
    """Show the effective settings (file, then STRIPE_* environment)."""
    from stripe_payment.cli.main import _get_config
    cfg = _get_config()
    table = Table(title="stripe-payment settings")
    table.add_column("Option", style="bold")
    table.add_column("Value")
    for name, value in cfg.model_dump().items():
        shown = _mask(value) if name in SECRET_FIELDS else str(value)
        table.add_row(name, shown)
    console.print(table)
