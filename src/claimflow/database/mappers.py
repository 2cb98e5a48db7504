"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, keeping ORM rows out of the
domain services.
"""

from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional

from claimflow.domain import entities as domain
from claimflow.database.models import (
    Claim as ORMClaim,
    ClaimLine as ORMClaimLine,
    Invoice as ORMInvoice,
    InvoiceLine as ORMInvoiceLine,
    HistoryEntry as ORMHistoryEntry,
    StockEntry as ORMStockEntry,
)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite drops tzinfo; stored timestamps are always UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def line_to_domain(orm_line: ORMClaimLine | ORMInvoiceLine) -> domain.ClaimLine:
    """Convert a SQLAlchemy claim or invoice line to a domain ClaimLine."""
    return domain.ClaimLine(
        name=orm_line.item_name,
        quantity=orm_line.quantity,
        unit_price=Decimal(orm_line.unit_price),
    )


def claim_to_domain(orm_claim: ORMClaim) -> domain.Claim:
    """Convert SQLAlchemy Claim model to domain Claim entity."""
    return domain.Claim(
        id=orm_claim.id,
        reference_number=orm_claim.reference_number,
        claimant_name=orm_claim.claimant_name,
        description=orm_claim.description,
        lines=tuple(line_to_domain(line) for line in orm_claim.lines),
        total_amount=Decimal(orm_claim.total_amount),
        status=domain.ClaimStatus(orm_claim.status),
        created_at=_as_utc(orm_claim.created_at),
        updated_at=_as_utc(orm_claim.updated_at),
        invoice_id=orm_claim.invoice_id,
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        invoice_number=orm_invoice.invoice_number,
        claim_id=orm_invoice.claim_id,
        status=domain.InvoiceStatus(orm_invoice.status),
        subtotal=Decimal(orm_invoice.subtotal),
        tax=Decimal(orm_invoice.tax),
        total=Decimal(orm_invoice.total),
        stock_applied=orm_invoice.stock_applied,
        lines=tuple(line_to_domain(line) for line in orm_invoice.lines),
        created_at=_as_utc(orm_invoice.created_at),
        updated_at=_as_utc(orm_invoice.updated_at),
        approved_at=_as_utc(orm_invoice.approved_at),
    )


def history_entry_to_domain(orm_entry: ORMHistoryEntry) -> domain.HistoryEntry:
    """Convert SQLAlchemy HistoryEntry model to domain HistoryEntry entity."""
    return domain.HistoryEntry(
        id=orm_entry.id,
        claim_id=orm_entry.claim_id,
        from_status=domain.ClaimStatus(orm_entry.from_status),
        to_status=domain.ClaimStatus(orm_entry.to_status),
        comment=orm_entry.comment,
        created_at=_as_utc(orm_entry.created_at),
        snapshot=orm_entry.snapshot,
    )


def stock_entry_to_domain(orm_entry: ORMStockEntry) -> domain.StockEntry:
    """Convert SQLAlchemy StockEntry model to domain StockEntry entity."""
    return domain.StockEntry(
        id=orm_entry.id,
        item_name=orm_entry.item_name,
        total_quantity=orm_entry.total_quantity,
    )
