"""Tests for Database interface returning domain models."""

import dataclasses
from datetime import datetime, UTC
from decimal import Decimal

import pytest

from claimflow.domain import entities
from claimflow.domain.entities import ClaimLine, ClaimStatus

NOW = datetime(2024, 1, 15, 9, 0, 0, tzinfo=UTC)


def _create_claim(db, reference="CLM-20240115090000", lines=None):
    lines = lines if lines is not None else [ClaimLine("Pen", 10, Decimal("1.00"))]
    return db.create_claim(
        reference_number=reference,
        claimant_name="Alice",
        description=None,
        lines=lines,
        total_amount=entities.lines_total(lines),
        status=ClaimStatus.DRAFT,
        created_at=NOW,
    )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_claim_returns_domain_model(self, temp_db):
        claim_id = _create_claim(temp_db)

        claim = temp_db.get_claim(claim_id)

        assert isinstance(claim, entities.Claim)
        assert claim.id == claim_id
        assert claim.status == ClaimStatus.DRAFT
        assert claim.lines == (ClaimLine("Pen", 10, Decimal("1.00")),)
        assert claim.total_amount == Decimal("10.00")
        assert claim.created_at == NOW

    def test_get_missing_claim_returns_none(self, temp_db):
        assert temp_db.get_claim(1) is None

    def test_claim_reference_exists(self, temp_db):
        _create_claim(temp_db)
        assert temp_db.claim_reference_exists("CLM-20240115090000")
        assert not temp_db.claim_reference_exists("CLM-20240115090001")

    def test_save_claim_replaces_lines(self, temp_db):
        claim_id = _create_claim(temp_db)
        claim = temp_db.get_claim(claim_id)
        new_lines = (ClaimLine("Ink", 1, Decimal("3.00")), ClaimLine("Tape", 2, Decimal("0.50")))

        temp_db.save_claim(
            dataclasses.replace(claim, lines=new_lines, total_amount=Decimal("4.00"), invoice_id=7)
        )

        stored = temp_db.get_claim(claim_id)
        assert stored.lines == new_lines
        assert stored.total_amount == Decimal("4.00")
        assert stored.invoice_id == 7

    def test_invoice_round_trip(self, temp_db):
        claim_id = _create_claim(temp_db)
        lines = [ClaimLine("Pen", 10, Decimal("1.00"))]
        invoice_id = temp_db.create_invoice(
            invoice_number="INV-0000ABCD",
            claim_id=claim_id,
            lines=lines,
            subtotal=Decimal("10.00"),
            tax=Decimal("1.00"),
            total=Decimal("11.00"),
            created_at=NOW,
        )

        invoice = temp_db.get_invoice(invoice_id)
        assert isinstance(invoice, entities.Invoice)
        assert invoice.status == entities.InvoiceStatus.DRAFT
        assert invoice.stock_applied is False
        assert invoice.lines == tuple(lines)
        assert temp_db.get_invoice_by_claim(claim_id).id == invoice_id

        temp_db.delete_invoice(invoice_id)
        assert temp_db.get_invoice(invoice_id) is None
        assert temp_db.get_invoice_by_claim(claim_id) is None

    def test_latest_history_entry(self, temp_db):
        claim_id = _create_claim(temp_db)
        temp_db.add_history_entry(claim_id, ClaimStatus.DRAFT, ClaimStatus.DRAFT, "a", "{}", NOW)
        second = temp_db.add_history_entry(claim_id, ClaimStatus.DRAFT, ClaimStatus.DRAFT, "b", "{}", NOW)
        temp_db.add_history_entry(claim_id, ClaimStatus.DRAFT, ClaimStatus.SUBMITTED, "c", "{}", NOW)

        # Equal timestamps fall back to insertion order
        latest = temp_db.get_latest_history_entry(claim_id, ClaimStatus.DRAFT)
        assert latest.id == second
        assert isinstance(latest, entities.HistoryEntry)
        assert [e.comment for e in temp_db.list_history(claim_id)] == ["a", "b", "c"]

    def test_stock_lookup_ignores_case(self, temp_db):
        entry_id = temp_db.create_stock_entry("Pen", 5)
        entry = temp_db.get_stock_entry_by_name("PEN")
        assert isinstance(entry, entities.StockEntry)
        assert entry.id == entry_id

        temp_db.update_stock_quantity(entry_id, -2)
        assert temp_db.get_stock_entry_by_name("pen").total_quantity == -2


class TestUnitOfWork:
    """Tests for all-or-nothing writes."""

    def test_commits_on_success(self, temp_db):
        with temp_db.unit_of_work():
            claim_id = _create_claim(temp_db)
            temp_db.create_stock_entry("Pen", 1)

        assert temp_db.get_claim(claim_id) is not None
        assert len(temp_db.list_stock_entries()) == 1

    def test_rolls_back_on_error(self, temp_db):
        with pytest.raises(RuntimeError):
            with temp_db.unit_of_work():
                _create_claim(temp_db)
                temp_db.create_stock_entry("Pen", 1)
                raise RuntimeError("boom")

        assert temp_db.list_claims() == []
        assert temp_db.list_stock_entries() == []

    def test_nested_units_join_outer(self, temp_db):
        with pytest.raises(RuntimeError):
            with temp_db.unit_of_work():
                with temp_db.unit_of_work():
                    temp_db.create_stock_entry("Pen", 1)
                raise RuntimeError("boom")

        assert temp_db.list_stock_entries() == []
