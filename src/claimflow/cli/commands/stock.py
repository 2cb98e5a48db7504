"""Stock commands."""

import click
from claimflow.domain.stock import StockLedger


@click.group()
def stock_group():
    """Inspect stock totals."""
    pass


@stock_group.command("list")
@click.pass_context
def list_stock(ctx):
    """List stock totals per item."""
    ledger = StockLedger(ctx.obj["db"])

    entries = ledger.list_entries()
    if not entries:
        click.echo("No stock entries found.")
        return

    click.echo("\nStock:")
    click.echo("-" * 40)
    for entry in entries:
        click.echo(f"{entry.item_name:30s} {entry.total_quantity:8d}")


def register_commands(cli):
    """Register stock commands with main CLI."""
    cli.add_command(stock_group, name="stock")
