"""Tests for the invoice service."""

from decimal import Decimal

import pytest

from claimflow.domain.entities import ClaimLine, InvoiceStatus
from claimflow.domain.errors import NotFoundError, ValidationError
from claimflow.domain.invoice import InvoiceService


def _stock(temp_db) -> dict[str, int]:
    return {entry.item_name: entry.total_quantity for entry in temp_db.list_stock_entries()}


class TestCreateFromClaim:
    """Tests for InvoiceService.create_from_claim."""

    def test_totals_and_lines(self, temp_db, invoice_service, sample_claim):
        """Subtotal 20.00, 10% tax 2.00, total 22.00."""
        invoice = invoice_service.create_from_claim(temp_db.get_claim(sample_claim.id))

        assert invoice.subtotal == Decimal("20.00")
        assert invoice.tax == Decimal("2.00")
        assert invoice.total == Decimal("22.00")
        assert invoice.status == InvoiceStatus.DRAFT
        assert invoice.stock_applied is False
        assert invoice.lines == sample_claim.lines
        assert invoice.claim_id == sample_claim.id

    def test_invoice_number_format(self, temp_db, invoice_service, sample_claim):
        invoice = invoice_service.create_from_claim(temp_db.get_claim(sample_claim.id))
        assert invoice.invoice_number.startswith("INV-")
        suffix = invoice.invoice_number[4:]
        assert len(suffix) == 8
        assert suffix == suffix.upper()
        int(suffix, 16)

    def test_idempotent(self, temp_db, invoice_service, sample_claim):
        """A second call returns the same invoice without duplicating lines."""
        claim = temp_db.get_claim(sample_claim.id)
        first = invoice_service.create_from_claim(claim)
        second = invoice_service.create_from_claim(claim)

        assert second.id == first.id
        assert second.lines == first.lines
        assert len(temp_db.list_invoices()) == 1
        assert temp_db.list_stock_entries() == []

    def test_zero_lines(self, temp_db, invoice_service, claim_service):
        claim = claim_service.create_claim("Alice", None, [])
        invoice = invoice_service.create_from_claim(temp_db.get_claim(claim.id))

        assert claim.total_amount == Decimal("0")
        assert invoice.subtotal == Decimal("0")
        assert invoice.tax == Decimal("0")
        assert invoice.total == Decimal("0")

    def test_custom_tax_rate(self, temp_db, clock, sample_claim):
        service = InvoiceService(temp_db, tax_rate=Decimal("0.25"), clock=clock)
        invoice = service.create_from_claim(temp_db.get_claim(sample_claim.id))
        assert invoice.tax == Decimal("5.00")
        assert invoice.total == Decimal("25.00")

    def test_tax_rounded_to_cents(self, temp_db, invoice_service, claim_service):
        claim = claim_service.create_claim("Alice", None, [ClaimLine("Gum", 1, Decimal("0.05"))])
        invoice = invoice_service.create_from_claim(temp_db.get_claim(claim.id))
        assert invoice.tax == Decimal("0.01")
        assert invoice.total == Decimal("0.06")

    def test_negative_tax_rate_rejected(self, temp_db):
        with pytest.raises(ValidationError):
            InvoiceService(temp_db, tax_rate=Decimal("-0.1"))


class TestApprove:
    """Tests for InvoiceService.approve."""

    def test_approve_applies_stock(self, temp_db, invoice_service, sample_claim):
        invoice = invoice_service.create_from_claim(temp_db.get_claim(sample_claim.id))

        view = invoice_service.approve(invoice.id)

        assert view.status == InvoiceStatus.APPROVED
        assert view.stock_applied is True
        assert view.approved_at is not None
        assert _stock(temp_db) == {"Paper": 2, "Pen": 10}

    def test_reapprove_does_not_double_apply(self, temp_db, invoice_service, sample_claim):
        invoice = invoice_service.create_from_claim(temp_db.get_claim(sample_claim.id))
        invoice_service.approve(invoice.id)
        invoice_service.approve(invoice.id)

        assert _stock(temp_db) == {"Paper": 2, "Pen": 10}

    def test_approve_missing_invoice(self, invoice_service):
        with pytest.raises(NotFoundError):
            invoice_service.approve(999)

    def test_removed_invoice_id_not_reused(self, temp_db, invoice_service, claim_service, sample_lines):
        first_claim = claim_service.create_claim("Alice", None, sample_lines)
        removed = invoice_service.create_from_claim(temp_db.get_claim(first_claim.id))
        invoice_service.remove(removed.id)

        second_claim = claim_service.create_claim("Bob", None, sample_lines)
        replacement = invoice_service.create_from_claim(temp_db.get_claim(second_claim.id))

        assert replacement.id != removed.id
        with pytest.raises(NotFoundError):
            invoice_service.approve(removed.id)
        assert _stock(temp_db) == {}


class TestRemove:
    """Tests for InvoiceService.remove."""

    def test_remove_reverts_applied_stock(self, temp_db, invoice_service, sample_claim):
        invoice = invoice_service.create_from_claim(temp_db.get_claim(sample_claim.id))
        invoice_service.approve(invoice.id)

        invoice_service.remove(invoice.id)

        assert temp_db.get_invoice(invoice.id) is None
        assert _stock(temp_db) == {"Paper": 0, "Pen": 0}

    def test_remove_unapproved_leaves_stock(self, temp_db, invoice_service, stock_ledger, sample_claim):
        stock_ledger.apply([ClaimLine("Pen", 4, Decimal("1.00"))])
        invoice = invoice_service.create_from_claim(temp_db.get_claim(sample_claim.id))

        invoice_service.remove(invoice.id)

        assert temp_db.get_invoice(invoice.id) is None
        assert _stock(temp_db) == {"Pen": 4}

    def test_remove_missing_is_noop(self, invoice_service):
        invoice_service.remove(999)


class TestViews:
    """Tests for invoice views."""

    def test_get_invoice_includes_claim_details(self, temp_db, invoice_service, sample_claim):
        invoice = invoice_service.create_from_claim(temp_db.get_claim(sample_claim.id))
        view = invoice_service.get_invoice(invoice.id)

        assert view.claim_reference == sample_claim.reference_number
        assert view.claimant_name == "Alice"

    def test_get_missing_invoice(self, invoice_service):
        with pytest.raises(NotFoundError):
            invoice_service.get_invoice(42)

    def test_list_invoices_by_status(self, temp_db, invoice_service, claim_service, sample_lines):
        first = claim_service.create_claim("Alice", None, sample_lines)
        second = claim_service.create_claim("Bob", None, sample_lines)
        inv1 = invoice_service.create_from_claim(temp_db.get_claim(first.id))
        invoice_service.create_from_claim(temp_db.get_claim(second.id))
        invoice_service.approve(inv1.id)

        approved = invoice_service.list_invoices(status=InvoiceStatus.APPROVED)
        assert [v.id for v in approved] == [inv1.id]
        assert len(invoice_service.list_invoices()) == 2
