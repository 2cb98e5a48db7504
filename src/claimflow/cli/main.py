"""Main CLI entry point."""

import logging
from decimal import Decimal, InvalidOperation

import click
from claimflow.database.factories import create_sqlite_database
from claimflow.domain.invoice import DEFAULT_TAX_RATE

# Import and register all commands at module level
from claimflow.cli.commands import claim, invoice, stock, dashboard


def _parse_tax_rate(ctx, param, value: str | None) -> Decimal:
    if value is None:
        return DEFAULT_TAX_RATE
    try:
        rate = Decimal(value)
    except InvalidOperation:
        raise click.BadParameter(f"'{value}' is not a decimal number")
    if rate < 0:
        raise click.BadParameter("tax rate must not be negative")
    return rate


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CLAIMFLOW_DB_PATH environment variable)",
    envvar="CLAIMFLOW_DB_PATH",
)
@click.option(
    "--tax-rate",
    callback=_parse_tax_rate,
    help="Flat invoice tax rate (default 0.10)",
    envvar="CLAIMFLOW_TAX_RATE",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, tax_rate: Decimal, verbose: bool):
    """Claimflow - Expense claim lifecycle tracking.

    Move expense claims from draft through review to invoicing, with
    invoices and stock totals kept in step with each claim's status.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["tax_rate"] = tax_rate


# Register all commands
claim.register_commands(cli)
invoice.register_commands(cli)
stock.register_commands(cli)
dashboard.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
