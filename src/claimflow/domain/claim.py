"""Claim lifecycle domain service.

Orchestrates claim creation, draft edits and status transitions. A backward
transition restores the claim's editable fields from the most recent snapshot
recorded on entry to the target status and unwinds any invoice (and the stock
it applied). Entering INVOICED materializes the invoice. Every operation
appends a history entry and runs as a single unit of work.
"""

import dataclasses
import logging
from datetime import datetime, timedelta, UTC
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Optional, Sequence

from claimflow.database.base import Database
from claimflow.domain.entities import (
    Claim,
    ClaimLine,
    ClaimStatus,
    ClaimView,
    HistoryEntryView,
    lines_total,
)
from claimflow.domain.errors import (
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    SnapshotError,
    ValidationError,
    claim_not_found,
    only_drafts_editable,
    snapshot_unreadable,
    transition_not_allowed,
)
from claimflow.domain.invoice import CENTS, InvoiceService
from claimflow.domain.snapshots import SnapshotStore
from claimflow.domain.status_graph import StatusGraph
from claimflow.utils.references import claim_reference

logger = logging.getLogger(__name__)

CREATED_COMMENT = "Claim created"
DRAFT_UPDATED_COMMENT = "Draft updated"
# Largest price a Numeric(12, 2) column holds
MAX_UNIT_PRICE = Decimal("9999999999.99")


class ClaimService:
    """Service for managing expense claims through their lifecycle."""

    def __init__(
        self,
        db: Database,
        graph: Optional[StatusGraph] = None,
        snapshots: Optional[SnapshotStore] = None,
        invoices: Optional[InvoiceService] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        """Initialize claim service.

        Args:
            db: Database instance
            graph: Status transition graph
            snapshots: History/snapshot store
            invoices: Invoice service used when entering or leaving INVOICED
            clock: Source of timestamps
        """
        self.db = db
        self.graph = graph or StatusGraph()
        self.snapshots = snapshots or SnapshotStore(db, clock=clock)
        self.invoices = invoices or InvoiceService(db, clock=clock)
        self.clock = clock

    def create_claim(
        self,
        claimant_name: str,
        description: Optional[str],
        lines: Sequence[ClaimLine],
    ) -> ClaimView:
        """Create a DRAFT claim and seed its DRAFT snapshot.

        Args:
            claimant_name: Name of the person claiming
            description: Optional free-text description
            lines: Line items (quantity >= 1, unit price >= 0)

        Returns:
            Claim view

        Raises:
            ValidationError: If claimant or any line is invalid
        """
        lines = _validated_lines(lines)
        claimant_name = _validated_claimant(claimant_name)

        with self.db.unit_of_work():
            now = self.clock()
            claim_id = self.db.create_claim(
                reference_number=self._next_reference(now),
                claimant_name=claimant_name,
                description=description,
                lines=list(lines),
                total_amount=lines_total(lines),
                status=ClaimStatus.DRAFT,
                created_at=now,
            )
            claim = self._load(claim_id)
            self.snapshots.record(claim, ClaimStatus.DRAFT, ClaimStatus.DRAFT, CREATED_COMMENT)
            logger.info("Claim %s created (%s)", claim.id, claim.reference_number)
            return self.to_view(claim)

    def update_draft(
        self,
        claim_id: int,
        claimant_name: str,
        description: Optional[str],
        lines: Sequence[ClaimLine],
    ) -> ClaimView:
        """Replace the editable fields of a DRAFT claim.

        Raises:
            NotFoundError: If the claim doesn't exist
            InvalidStateError: If the claim is not DRAFT
            ValidationError: If claimant or any line is invalid
        """
        with self.db.unit_of_work():
            claim = self._load(claim_id)
            if claim.status != ClaimStatus.DRAFT:
                raise InvalidStateError(only_drafts_editable(claim_id, claim.status))

            lines = _validated_lines(lines)
            claim = dataclasses.replace(
                claim,
                claimant_name=_validated_claimant(claimant_name),
                description=description,
                lines=lines,
                total_amount=lines_total(lines),
                updated_at=self.clock(),
            )
            self.db.save_claim(claim)
            self.snapshots.record(claim, ClaimStatus.DRAFT, ClaimStatus.DRAFT, DRAFT_UPDATED_COMMENT)
            return self.to_view(claim)

    def get_claim(self, claim_id: int) -> ClaimView:
        """Get claim by ID.

        Raises:
            NotFoundError: If the claim doesn't exist
        """
        return self.to_view(self._load(claim_id))

    def list_claims(self, status: Optional[ClaimStatus] = None) -> list[ClaimView]:
        """List claims, newest first, optionally filtered by status."""
        return [self.to_view(claim) for claim in self.db.list_claims(status=status)]

    def transition(self, claim_id: int, target: ClaimStatus, comment: str) -> ClaimView:
        """Move a claim to target status.

        Args:
            claim_id: Claim ID
            target: Status to move to
            comment: Reason recorded in the history entry

        Returns:
            Claim view after the transition

        Raises:
            NotFoundError: If the claim doesn't exist
            ValidationError: If comment is empty
            InvalidTransitionError: If target is not reachable from the current status
            SnapshotError: If a snapshot needed for a backward move cannot be decoded
        """
        with self.db.unit_of_work():
            claim = self._load(claim_id)
            if not comment or not comment.strip():
                raise ValidationError("A comment is required for a status change")

            current = claim.status
            if not self.graph.is_allowed(current, target):
                raise InvalidTransitionError(transition_not_allowed(current, target))

            if self.graph.is_backward(current, target):
                claim = self._restore(claim, target)
                if current == ClaimStatus.INVOICED and claim.invoice_id is not None:
                    invoice_id = claim.invoice_id
                    claim = dataclasses.replace(claim, invoice_id=None)
                    self.invoices.remove(invoice_id)

            claim = dataclasses.replace(claim, status=target, updated_at=self.clock())
            self.db.save_claim(claim)

            if target == ClaimStatus.INVOICED:
                invoice = self.invoices.create_from_claim(claim)
                claim = dataclasses.replace(claim, invoice_id=invoice.id)
                self.db.save_claim(claim)

            self.snapshots.record(claim, current, target, comment)
            logger.info("Claim %s moved %s -> %s", claim.id, current.value, target.value)
            return self.to_view(claim)

    def history(self, claim_id: int) -> list[HistoryEntryView]:
        """Transition history for a claim, oldest first.

        Raises:
            NotFoundError: If the claim doesn't exist
        """
        self._load(claim_id)
        return self.snapshots.history(claim_id)

    def to_view(self, claim: Claim) -> ClaimView:
        return ClaimView(
            id=claim.id,
            reference_number=claim.reference_number,
            claimant_name=claim.claimant_name,
            description=claim.description,
            status=claim.status,
            total_amount=claim.total_amount,
            created_at=claim.created_at,
            updated_at=claim.updated_at,
            lines=claim.lines,
            allowed_transitions=self.graph.allowed_targets(claim.status),
            invoice_id=claim.invoice_id,
        )

    def _restore(self, claim: Claim, target: ClaimStatus) -> Claim:
        """Overwrite editable fields with the latest snapshot taken on entry to target."""
        entry = self.snapshots.most_recent_snapshot_for(claim.id, target)
        if entry is None:
            logger.debug("No %s snapshot for claim %s, keeping current data", target.value, claim.id)
            return claim
        try:
            snapshot = self.snapshots.restore(entry)
        except SnapshotError as e:
            raise SnapshotError(snapshot_unreadable(claim.id, target)) from e
        return dataclasses.replace(
            claim,
            claimant_name=snapshot.claimant_name,
            description=snapshot.description,
            lines=snapshot.lines,
            total_amount=lines_total(snapshot.lines),
        )

    def _next_reference(self, now: datetime) -> str:
        """Claim code for now, stepping forward a second while taken."""
        reference = claim_reference(now)
        while self.db.claim_reference_exists(reference):
            now += timedelta(seconds=1)
            reference = claim_reference(now)
        return reference

    def _load(self, claim_id: int) -> Claim:
        claim = self.db.get_claim(claim_id)
        if claim is None:
            raise NotFoundError(claim_not_found(claim_id))
        return claim


def _validated_claimant(claimant_name: str) -> str:
    if claimant_name is None or not claimant_name.strip():
        raise ValidationError("Claimant name is required")
    return claimant_name.strip()


def _validated_lines(lines: Sequence[ClaimLine]) -> tuple[ClaimLine, ...]:
    """Check line items and return them with prices in whole cents."""
    validated = []
    for line in lines:
        if not line.name or not line.name.strip():
            raise ValidationError("Item name is required")
        if line.quantity < 1:
            raise ValidationError(f"Quantity for '{line.name}' must be at least 1")
        unit_price = Decimal(line.unit_price)
        if not unit_price.is_finite():
            raise ValidationError(f"Unit price for '{line.name}' must be a finite number")
        if unit_price < 0:
            raise ValidationError(f"Unit price for '{line.name}' must not be negative")
        if unit_price > MAX_UNIT_PRICE:
            raise ValidationError(f"Unit price for '{line.name}' must not exceed {MAX_UNIT_PRICE}")
        validated.append(
            ClaimLine(
                name=line.name.strip(),
                quantity=line.quantity,
                unit_price=unit_price.quantize(CENTS, rounding=ROUND_HALF_UP),
            )
        )
    return tuple(validated)
