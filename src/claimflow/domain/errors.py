"""Shared domain error messages and error types."""

from claimflow.domain.entities import ClaimStatus


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested claim or invoice does not exist."""


class InvalidTransitionError(DomainError):
    """Target status is not reachable from the claim's current status."""


class InvalidStateError(DomainError):
    """Operation not permitted in the claim's current status."""


class SnapshotError(DomainError):
    """A claim snapshot could not be encoded or decoded."""


def claim_not_found(claim_id: int) -> str:
    """Return message for missing claim."""
    return f"Claim {claim_id} not found"


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return f"Invoice {invoice_id} not found"


def transition_not_allowed(current: ClaimStatus, target: ClaimStatus) -> str:
    """Return message for a transition outside the status graph."""
    return f"Transition not allowed: {current.value} -> {target.value}"


def only_drafts_editable(claim_id: int, status: ClaimStatus) -> str:
    """Return message when editing a claim that left DRAFT."""
    return f"Only draft claims can be edited (claim {claim_id} is {status.value})"


def snapshot_unreadable(claim_id: int, status: ClaimStatus) -> str:
    """Return message when a stored snapshot cannot be restored."""
    return f"Could not restore {status.value} snapshot for claim {claim_id}"
