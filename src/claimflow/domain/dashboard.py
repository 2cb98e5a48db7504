"""Dashboard metrics domain service."""

from decimal import Decimal, ROUND_HALF_UP

from claimflow.database.base import Database
from claimflow.domain.entities import ClaimStatus, DashboardMetrics, InvoiceStatus

PENDING_STATUSES = frozenset({ClaimStatus.DRAFT, ClaimStatus.SUBMITTED, ClaimStatus.UNDER_REVIEW})


def approval_rate(approved: int, total: int) -> int:
    """Percentage of approved invoices, halves rounded up, 0 when there are none."""
    if not total:
        return 0
    return int((Decimal(approved * 100) / total).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class DashboardService:
    """Service for headline counts over claims, invoices and stock."""

    def __init__(self, db: Database):
        """Initialize dashboard service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_metrics(self) -> DashboardMetrics:
        """Compute dashboard metrics.

        The approval rate is the rounded percentage of approved invoices
        among all invoices, or 0 when there are none.
        """
        claims = self.db.list_claims()
        invoices = self.db.list_invoices()
        approved = sum(1 for invoice in invoices if invoice.status == InvoiceStatus.APPROVED)
        awaiting = sum(1 for invoice in invoices if invoice.status == InvoiceStatus.DRAFT)
        rate = approval_rate(approved, len(invoices))

        return DashboardMetrics(
            total_claims=len(claims),
            pending_claims=sum(1 for claim in claims if claim.status in PENDING_STATUSES),
            total_claim_value=sum((claim.total_amount for claim in claims), Decimal("0")),
            invoices_awaiting_approval=awaiting,
            invoice_approval_rate=rate,
            stock_tracked=len(self.db.list_stock_entries()),
        )
