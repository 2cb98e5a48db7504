"""Rendering of domain failures for CLI commands."""

import logging

import click

from claimflow.domain.errors import DomainError, SnapshotError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError) -> None:
    """Print the error to stderr and exit with status 1.

    Snapshot failures are also logged with their traceback.
    """
    if isinstance(error, SnapshotError):
        logger.error("Stored claim history could not be restored", exc_info=error)
    else:
        logger.debug("Command failed: %s", error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
