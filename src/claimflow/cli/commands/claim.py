"""Claim management commands."""

import click
from claimflow.cli.error_handling import handle_domain_error
from claimflow.domain.claim import ClaimService
from claimflow.domain.entities import ClaimLine, ClaimStatus, ClaimView
from claimflow.domain.errors import DomainError
from claimflow.domain.invoice import InvoiceService
from claimflow.utils.amount_parser import parse_line

STATUS_CHOICE = click.Choice([status.value for status in ClaimStatus], case_sensitive=False)


def claim_service(ctx) -> ClaimService:
    """Build a ClaimService from the CLI context."""
    db = ctx.obj["db"]
    return ClaimService(db, invoices=InvoiceService(db, tax_rate=ctx.obj["tax_rate"]))


def parse_lines(ctx, lines: tuple[str, ...]) -> list[ClaimLine]:
    """Parse --line options or exit with an error."""
    try:
        return [parse_line(line) for line in lines]
    except ValueError as e:
        click.echo(f"Error: Invalid line: {e}", err=True)
        ctx.exit(1)


def print_claim(claim: ClaimView) -> None:
    """Print a claim with its lines and next statuses."""
    click.echo(f"\nClaim {claim.reference_number} (ID: {claim.id})")
    click.echo("-" * 60)
    click.echo(f"Status:      {claim.status.value}")
    click.echo(f"Claimant:    {claim.claimant_name}")
    if claim.description:
        click.echo(f"Description: {claim.description}")
    for line in claim.lines:
        click.echo(
            f"  {line.name:20s} {line.quantity:5d} x {line.unit_price:>10.2f} = {line.line_total:>10.2f}"
        )
    click.echo(f"Total:       {claim.total_amount:.2f}")
    if claim.invoice_id is not None:
        click.echo(f"Invoice ID:  {claim.invoice_id}")
    allowed = ", ".join(status.value for status in claim.allowed_transitions)
    click.echo(f"Next:        {allowed or '-'}")


@click.group()
def claim_group():
    """Manage expense claims."""
    pass


@claim_group.command("create")
@click.argument("claimant", metavar="CLAIMANT_NAME")
@click.option("--description", help="Free-text description")
@click.option("--line", "lines", multiple=True, help="Line item as NAME:QUANTITY:UNIT_PRICE (repeatable)")
@click.pass_context
def create_claim(ctx, claimant: str, description: str | None, lines: tuple[str, ...]):
    """Create a new draft claim.

    Examples:
        claimflow claim create "Alice" --line "Pen:10:1.00" --line "Paper:2:5.00"
        claimflow claim create "Bob" --description "Team offsite"
    """
    service = claim_service(ctx)
    claim_lines = parse_lines(ctx, lines)

    try:
        claim = service.create_claim(claimant_name=claimant, description=description, lines=claim_lines)
        click.echo(f"Created claim {claim.reference_number} (ID: {claim.id})")
        click.echo(f"Total: {claim.total_amount:.2f}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@claim_group.command("update")
@click.argument("claim_id", type=int)
@click.argument("claimant", metavar="CLAIMANT_NAME")
@click.option("--description", help="Free-text description")
@click.option("--line", "lines", multiple=True, help="Line item as NAME:QUANTITY:UNIT_PRICE (repeatable)")
@click.pass_context
def update_claim(ctx, claim_id: int, claimant: str, description: str | None, lines: tuple[str, ...]):
    """Replace the contents of a draft claim.

    All lines are replaced by the ones given. Only DRAFT claims can be edited.
    """
    service = claim_service(ctx)
    claim_lines = parse_lines(ctx, lines)

    try:
        claim = service.update_draft(
            claim_id=claim_id, claimant_name=claimant, description=description, lines=claim_lines
        )
        click.echo(f"Updated claim {claim.reference_number}")
        click.echo(f"Total: {claim.total_amount:.2f}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@claim_group.command("show")
@click.argument("claim_id", type=int)
@click.pass_context
def show_claim(ctx, claim_id: int):
    """Show a claim."""
    service = claim_service(ctx)
    try:
        print_claim(service.get_claim(claim_id))
    except DomainError as e:
        handle_domain_error(ctx, e)


@claim_group.command("list")
@click.option("--status", type=STATUS_CHOICE, help="Only show claims in this status")
@click.pass_context
def list_claims(ctx, status: str | None):
    """List claims, newest first."""
    service = claim_service(ctx)
    claims = service.list_claims(status=ClaimStatus(status.upper()) if status else None)
    if not claims:
        click.echo("No claims found.")
        return

    click.echo("\nClaims:")
    click.echo("-" * 80)
    for c in claims:
        click.echo(
            f"ID: {c.id:3d} | {c.reference_number} | {c.status.value:12s} | "
            f"{c.claimant_name:20s} | {c.total_amount:>10.2f}"
        )


@claim_group.command("transition")
@click.argument("claim_id", type=int)
@click.argument("status", type=STATUS_CHOICE)
@click.option("--comment", "-m", required=True, help="Reason for the status change")
@click.pass_context
def transition_claim(ctx, claim_id: int, status: str, comment: str):
    """Move a claim to another status.

    Moving back one step restores the claim's data as it was when it last
    entered that status. Moving to INVOICED creates the invoice; moving back
    from INVOICED removes it.

    Examples:
        claimflow claim transition 1 SUBMITTED -m "Ready for review"
        claimflow claim transition 1 DRAFT -m "Needs receipts"
    """
    service = claim_service(ctx)
    try:
        claim = service.transition(claim_id, ClaimStatus(status.upper()), comment)
        click.echo(f"Claim {claim.reference_number} is now {claim.status.value}")
        if claim.invoice_id is not None:
            click.echo(f"Invoice ID: {claim.invoice_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@claim_group.command("history")
@click.argument("claim_id", type=int)
@click.pass_context
def claim_history(ctx, claim_id: int):
    """Show the status history of a claim."""
    service = claim_service(ctx)
    try:
        entries = service.history(claim_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nHistory for claim {claim_id}:")
    click.echo("-" * 80)
    for entry in entries:
        click.echo(
            f"{entry.created_at:%Y-%m-%d %H:%M:%S} | {entry.from_status.value:12s} -> "
            f"{entry.to_status.value:12s} | {entry.comment}"
        )


def register_commands(cli):
    """Register claim commands with main CLI."""
    cli.add_command(claim_group, name="claim")
