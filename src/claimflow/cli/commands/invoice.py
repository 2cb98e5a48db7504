"""Invoice commands."""

import click
from claimflow.cli.error_handling import handle_domain_error
from claimflow.domain.entities import InvoiceStatus, InvoiceView
from claimflow.domain.errors import DomainError
from claimflow.domain.invoice import InvoiceService


def print_invoice(invoice: InvoiceView) -> None:
    """Print an invoice with its lines and totals."""
    click.echo(f"\nInvoice {invoice.invoice_number} (ID: {invoice.id})")
    click.echo("-" * 60)
    click.echo(f"Status:   {invoice.status.value}")
    click.echo(f"Claim:    {invoice.claim_reference} ({invoice.claimant_name})")
    click.echo(f"Created:  {invoice.created_at:%Y-%m-%d}")
    if invoice.approved_at is not None:
        click.echo(f"Approved: {invoice.approved_at:%Y-%m-%d}")
    for line in invoice.lines:
        click.echo(
            f"  {line.name:20s} {line.quantity:5d} x {line.unit_price:>10.2f} = {line.line_total:>10.2f}"
        )
    click.echo(f"Subtotal: {invoice.subtotal:>10.2f}")
    click.echo(f"Tax:      {invoice.tax:>10.2f}")
    click.echo(f"Total:    {invoice.total:>10.2f}")


@click.group()
def invoice_group():
    """Manage invoices."""
    pass


@invoice_group.command("show")
@click.argument("invoice_id", type=int)
@click.pass_context
def show_invoice(ctx, invoice_id: int):
    """Show an invoice."""
    service = InvoiceService(ctx.obj["db"], tax_rate=ctx.obj["tax_rate"])
    try:
        print_invoice(service.get_invoice(invoice_id))
    except DomainError as e:
        handle_domain_error(ctx, e)


@invoice_group.command("list")
@click.option(
    "--status",
    type=click.Choice([status.value for status in InvoiceStatus], case_sensitive=False),
    help="Only show invoices in this status",
)
@click.pass_context
def list_invoices(ctx, status: str | None):
    """List invoices, newest first."""
    service = InvoiceService(ctx.obj["db"], tax_rate=ctx.obj["tax_rate"])
    invoices = service.list_invoices(status=InvoiceStatus(status.upper()) if status else None)
    if not invoices:
        click.echo("No invoices found.")
        return

    click.echo("\nInvoices:")
    click.echo("-" * 80)
    for inv in invoices:
        click.echo(
            f"ID: {inv.id:3d} | {inv.invoice_number} | {inv.status.value:8s} | "
            f"{inv.claim_reference} | {inv.total:>10.2f}"
        )


@invoice_group.command("approve")
@click.argument("invoice_id", type=int)
@click.pass_context
def approve_invoice(ctx, invoice_id: int):
    """Approve an invoice and add its lines to stock.

    Stock is only applied the first time an invoice is approved.
    """
    service = InvoiceService(ctx.obj["db"], tax_rate=ctx.obj["tax_rate"])
    try:
        invoice = service.approve(invoice_id)
        click.echo(f"Approved invoice {invoice.invoice_number}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
