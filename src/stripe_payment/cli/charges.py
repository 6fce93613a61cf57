"""CLI: stripe-payment charge create|capture|retrieve, stripe-payment pub-key"""

import json
from typing import Any, Optional

import click
from rich.console import Console
from rich.table import Table

from stripe_payment.models.charge import ChargeResponse

console = Console()

SUMMARY_FIELDS = ("id", "status", "amount", "currency", "captured", "paid", "livemode", "description")

mocked_option = click.option(
    "--mocked/--live", default=None, help="Use the in-process mock instead of api.stripe.com.",
)
json_option = click.option("--json-output", "--json", is_flag=True)


def _get_client(mocked: Optional[bool]):
    from stripe_payment.cli.main import _get_client
    return _get_client(mocked)


def _run(coro):
    from stripe_payment.cli.main import _run
    return _run(coro)


def _parse_pairs(pairs: tuple[str, ...]) -> dict[str, str]:
    out = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}")
        out[key] = value
    return out


def _show(response: ChargeResponse, json_output: bool) -> None:
    error, charge = response
    if json_output:
        click.echo(json.dumps({"error": error, "charge": charge}, indent=2))
    elif error:
        console.print(f"[red]Error: {error}[/red]")
    else:
        table = Table(title=f"Charge {charge.get('id', '')}")
        table.add_column("Field", style="bold")
        table.add_column("Value")
        for name in SUMMARY_FIELDS:
            table.add_row(name, str(charge.get(name, "")))
        console.print(table)
    if error:
        raise SystemExit(1)


async def _call(mocked: Optional[bool], op: str, *args: Any) -> ChargeResponse:
    async with _get_client(mocked) as client:
        return await getattr(client, op)(*args)


def _call_with_status(status: str, json_output: bool, mocked: Optional[bool], op: str, *args: Any) -> ChargeResponse:
    if json_output:
        return _run(_call(mocked, op, *args))
    with console.status(status):
        return _run(_call(mocked, op, *args))


@click.group()
def charge():
    """Charge operations."""


@charge.command("create")
@click.option("--amount", default=None, help="Amount in the smallest currency unit, e.g. cents")
@click.option("--currency", default=None)
@click.option("--source", default=None, help="Card token or source id, e.g. tok_visa")
@click.option("--customer", default=None)
@click.option("--description", default=None)
@click.option("--receipt-email", default=None)
@click.option("--statement-descriptor", default=None)
@click.option("--application-fee", default=None)
@click.option("--capture/--no-capture", default=None, help="Defaults to the auto_capture setting")
@click.option("-m", "--metadata", multiple=True, help="KEY=VALUE, repeatable")
@mocked_option
@json_option
def charge_create(mocked, json_output, metadata, **fields):
    """Create a charge."""
    args = {k: v for k, v in fields.items() if v is not None}
    if metadata:
        args["metadata"] = _parse_pairs(metadata)
    response = _call_with_status("Creating charge...", json_output, mocked, "create_charge", args)
    _show(response, json_output)


@charge.command("capture")
@click.argument("charge_id")
@click.option("--amount", default=None)
@click.option("--receipt-email", default=None)
@click.option("--statement-descriptor", default=None)
@click.option("--application-fee", default=None)
@mocked_option
@json_option
def charge_capture(charge_id, mocked, json_output, **fields):
    """Capture an authorized charge."""
    args = {"id": charge_id, **{k: v for k, v in fields.items() if v is not None}}
    response = _call_with_status("Capturing charge...", json_output, mocked, "capture_charge", args)
    _show(response, json_output)


@charge.command("retrieve")
@click.argument("charge_id")
@mocked_option
@json_option
def charge_retrieve(charge_id, mocked, json_output):
    """Fetch a charge."""
    response = _run(_call(mocked, "retrieve_charge", {"id": charge_id}))
    _show(response, json_output)


@click.command("pub-key")
def pub_key():
    """Print the publishable key (for checkout pages)."""
    from stripe_payment.cli.main import _get_config
    click.echo(_get_config().pub_key)
