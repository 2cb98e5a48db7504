"""Invoice domain service."""

import dataclasses
import logging
from datetime import datetime, UTC
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Optional

from claimflow.database.base import Database
from claimflow.domain.entities import (
    Claim,
    Invoice,
    InvoiceStatus,
    InvoiceView,
    lines_total,
)
from claimflow.domain.errors import NotFoundError, ValidationError, invoice_not_found
from claimflow.domain.stock import StockLedger
from claimflow.utils.references import invoice_reference

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = Decimal("0.10")
CENTS = Decimal("0.01")


class InvoiceService:
    """Service for deriving, approving and removing claim invoices."""

    def __init__(
        self,
        db: Database,
        tax_rate: Decimal = DEFAULT_TAX_RATE,
        stock: Optional[StockLedger] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        """Initialize invoice service.

        Args:
            db: Database instance
            tax_rate: Flat tax rate applied to the subtotal
            stock: Stock ledger adjusted on approval and removal
            clock: Source of timestamps
        """
        if tax_rate < 0:
            raise ValidationError(f"Tax rate must not be negative, got {tax_rate}")
        self.db = db
        self.tax_rate = Decimal(tax_rate)
        self.stock = stock or StockLedger(db)
        self.clock = clock

    def create_from_claim(self, claim: Claim) -> Invoice:
        """Return the claim's invoice, creating it from the claim's lines if needed.

        Idempotent: an existing invoice for the claim is returned unchanged.
        """
        existing = self.db.get_invoice_by_claim(claim.id)
        if existing is not None:
            return existing

        subtotal = lines_total(claim.lines).quantize(CENTS, rounding=ROUND_HALF_UP)
        tax = (subtotal * self.tax_rate).quantize(CENTS, rounding=ROUND_HALF_UP)
        invoice_id = self.db.create_invoice(
            invoice_number=invoice_reference(),
            claim_id=claim.id,
            lines=list(claim.lines),
            subtotal=subtotal,
            tax=tax,
            total=subtotal + tax,
            created_at=self.clock(),
        )
        logger.info("Invoice %s created for claim %s (subtotal %s)", invoice_id, claim.id, subtotal)
        return self._load(invoice_id)

    def approve(self, invoice_id: int) -> InvoiceView:
        """Approve an invoice, applying its lines to stock the first time only.

        Raises:
            NotFoundError: If the invoice doesn't exist
        """
        with self.db.unit_of_work():
            invoice = self._load(invoice_id)
            now = self.clock()
            stock_applied = invoice.stock_applied
            if not stock_applied:
                self.stock.apply(invoice.lines)
                stock_applied = True
            self.db.save_invoice(
                dataclasses.replace(
                    invoice,
                    status=InvoiceStatus.APPROVED,
                    approved_at=now,
                    updated_at=now,
                    stock_applied=stock_applied,
                )
            )
            logger.info("Invoice %s approved", invoice_id)
            return self.get_invoice(invoice_id)

    def remove(self, invoice_id: int) -> None:
        """Delete an invoice, reverting stock if it had been applied.

        Does nothing if the invoice no longer exists.
        """
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None:
            return
        if invoice.stock_applied:
            self.stock.revert(invoice.lines)
        self.db.delete_invoice(invoice_id)
        logger.info("Invoice %s removed", invoice_id)

    def get_invoice(self, invoice_id: int) -> InvoiceView:
        """Get invoice by ID.

        Raises:
            NotFoundError: If the invoice doesn't exist
        """
        return self.to_view(self._load(invoice_id))

    def list_invoices(self, status: Optional[InvoiceStatus] = None) -> list[InvoiceView]:
        """List invoices, newest first."""
        return [self.to_view(invoice) for invoice in self.db.list_invoices(status=status)]

    def to_view(self, invoice: Invoice) -> InvoiceView:
        claim = self.db.get_claim(invoice.claim_id)
        return InvoiceView(
            id=invoice.id,
            invoice_number=invoice.invoice_number,
            claim_id=invoice.claim_id,
            claim_reference=claim.reference_number if claim is not None else "",
            claimant_name=claim.claimant_name if claim is not None else "",
            status=invoice.status,
            created_at=invoice.created_at,
            approved_at=invoice.approved_at,
            subtotal=invoice.subtotal,
            tax=invoice.tax,
            total=invoice.total,
            stock_applied=invoice.stock_applied,
            lines=invoice.lines,
        )

    def _load(self, invoice_id: int) -> Invoice:
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return invoice
