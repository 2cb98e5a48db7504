"""Domain model entities for claimflow.

These are pure data classes representing business concepts, independent of
database schema. Entities reference each other by id only: a claim owns its
lines and holds an optional invoice id, an invoice owns its own copied lines.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class ClaimStatus(Enum):
    """Claim lifecycle status, declared in rank order."""

    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    INVOICED = "INVOICED"

    @property
    def rank(self) -> int:
        """Position of the status in the lifecycle (DRAFT is 0)."""
        return list(ClaimStatus).index(self)


class InvoiceStatus(Enum):
    """Invoice status."""

    DRAFT = "DRAFT"
    APPROVED = "APPROVED"


@dataclass(frozen=True)
class ClaimLine:
    """Single line item of a claim or invoice."""

    name: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


def lines_total(lines: tuple[ClaimLine, ...] | list[ClaimLine]) -> Decimal:
    """Sum of quantity x unit price over lines."""
    return sum((line.line_total for line in lines), Decimal("0"))


def stock_key(item_name: str) -> str:
    """Case-insensitive matching key for stock item names, Unicode-aware."""
    return item_name.casefold()


@dataclass(frozen=True)
class Claim:
    """Expense claim domain entity."""

    id: int
    reference_number: str
    claimant_name: str
    description: Optional[str]
    lines: tuple[ClaimLine, ...]
    total_amount: Decimal
    status: ClaimStatus
    created_at: datetime
    updated_at: datetime
    invoice_id: Optional[int] = None


@dataclass(frozen=True)
class Snapshot:
    """Editable fields of a claim captured on entry to a status."""

    claimant_name: str
    description: Optional[str]
    lines: tuple[ClaimLine, ...]


@dataclass(frozen=True)
class HistoryEntry:
    """Append-only record of one claim transition."""

    id: int
    claim_id: int
    from_status: ClaimStatus
    to_status: ClaimStatus
    comment: str
    created_at: datetime
    snapshot: str


@dataclass(frozen=True)
class Invoice:
    """Invoice domain entity."""

    id: int
    invoice_number: str
    claim_id: int
    status: InvoiceStatus
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    stock_applied: bool
    lines: tuple[ClaimLine, ...]
    created_at: datetime
    updated_at: datetime
    approved_at: Optional[datetime] = None


@dataclass(frozen=True)
class StockEntry:
    """Running quantity total for one item name."""

    id: int
    item_name: str
    total_quantity: int


@dataclass(frozen=True)
class ClaimView:
    """Claim projection returned to callers."""

    id: int
    reference_number: str
    claimant_name: str
    description: Optional[str]
    status: ClaimStatus
    total_amount: Decimal
    created_at: datetime
    updated_at: datetime
    lines: tuple[ClaimLine, ...]
    allowed_transitions: tuple[ClaimStatus, ...]
    invoice_id: Optional[int]


@dataclass(frozen=True)
class HistoryEntryView:
    """History entry projection for display, without the snapshot payload."""

    id: int
    from_status: ClaimStatus
    to_status: ClaimStatus
    comment: str
    created_at: datetime


@dataclass(frozen=True)
class InvoiceView:
    """Invoice projection returned to callers."""

    id: int
    invoice_number: str
    claim_id: int
    claim_reference: str
    claimant_name: str
    status: InvoiceStatus
    created_at: datetime
    approved_at: Optional[datetime]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    stock_applied: bool
    lines: tuple[ClaimLine, ...]


@dataclass(frozen=True)
class DashboardMetrics:
    """Headline counts and sums over claims, invoices and stock."""

    total_claims: int
    pending_claims: int
    total_claim_value: Decimal
    invoices_awaiting_approval: int
    invoice_approval_rate: int
    stock_tracked: int
