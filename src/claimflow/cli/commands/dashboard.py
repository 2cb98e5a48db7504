"""Dashboard command."""

import click
from claimflow.domain.dashboard import DashboardService


@click.command("dashboard")
@click.pass_context
def dashboard(ctx):
    """Show headline claim, invoice and stock figures."""
    metrics = DashboardService(ctx.obj["db"]).get_metrics()

    click.echo("\nDashboard:")
    click.echo("-" * 40)
    click.echo(f"Total claims:                {metrics.total_claims}")
    click.echo(f"Pending claims:              {metrics.pending_claims}")
    click.echo(f"Total claim value:           {metrics.total_claim_value:.2f}")
    click.echo(f"Invoices awaiting approval:  {metrics.invoices_awaiting_approval}")
    click.echo(f"Invoice approval rate:       {metrics.invoice_approval_rate}%")
    click.echo(f"Stock items tracked:         {metrics.stock_tracked}")


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
