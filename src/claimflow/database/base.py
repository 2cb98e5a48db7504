"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from claimflow.domain.entities import (
    Claim,
    ClaimLine,
    ClaimStatus,
    HistoryEntry,
    Invoice,
    InvoiceStatus,
    StockEntry,
)


class Database(ABC):
    """Abstract database interface for claimflow."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Group writes into one all-or-nothing unit.

        Nested calls join the outermost unit. Writes are committed when the
        outermost block exits normally and rolled back if it raises.
        """
        pass

    # Claim operations
    @abstractmethod
    def create_claim(
        self,
        reference_number: str,
        claimant_name: str,
        description: Optional[str],
        lines: list[ClaimLine],
        total_amount: Decimal,
        status: ClaimStatus,
        created_at: datetime,
    ) -> int:
        """Create a claim. Returns claim ID."""
        pass

    @abstractmethod
    def claim_reference_exists(self, reference_number: str) -> bool:
        """Check if a claim with given reference number exists."""
        pass

    @abstractmethod
    def get_claim(self, claim_id: int) -> Optional[Claim]:
        """Get claim by ID."""
        pass

    @abstractmethod
    def list_claims(self, status: Optional[ClaimStatus] = None) -> list[Claim]:
        """List claims, optionally filtered by status."""
        pass

    @abstractmethod
    def save_claim(self, claim: Claim) -> None:
        """Overwrite the stored claim (fields, lines, status, invoice link)."""
        pass

    # Invoice operations
    @abstractmethod
    def create_invoice(
        self,
        invoice_number: str,
        claim_id: int,
        lines: list[ClaimLine],
        subtotal: Decimal,
        tax: Decimal,
        total: Decimal,
        created_at: datetime,
    ) -> int:
        """Create a DRAFT invoice with stock not applied. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice by ID."""
        pass

    @abstractmethod
    def get_invoice_by_claim(self, claim_id: int) -> Optional[Invoice]:
        """Get the invoice linked to a claim."""
        pass

    @abstractmethod
    def list_invoices(self, status: Optional[InvoiceStatus] = None) -> list[Invoice]:
        """List invoices, optionally filtered by status."""
        pass

    @abstractmethod
    def save_invoice(self, invoice: Invoice) -> None:
        """Update invoice status, approval time and stock flag."""
        pass

    @abstractmethod
    def delete_invoice(self, invoice_id: int) -> None:
        """Delete an invoice and its lines."""
        pass

    # History operations
    @abstractmethod
    def add_history_entry(
        self,
        claim_id: int,
        from_status: ClaimStatus,
        to_status: ClaimStatus,
        comment: str,
        snapshot: str,
        created_at: datetime,
    ) -> int:
        """Append a history entry. Returns entry ID."""
        pass

    @abstractmethod
    def list_history(self, claim_id: int) -> list[HistoryEntry]:
        """List history entries for a claim, oldest first."""
        pass

    @abstractmethod
    def get_latest_history_entry(
        self, claim_id: int, to_status: ClaimStatus
    ) -> Optional[HistoryEntry]:
        """Get the most recent entry for a claim that entered to_status."""
        pass

    # Stock operations
    @abstractmethod
    def get_stock_entry_by_name(self, item_name: str) -> Optional[StockEntry]:
        """Get stock entry by item name, ignoring case."""
        pass

    @abstractmethod
    def create_stock_entry(self, item_name: str, total_quantity: int) -> int:
        """Create a stock entry. Returns entry ID."""
        pass

    @abstractmethod
    def update_stock_quantity(self, entry_id: int, total_quantity: int) -> None:
        """Set the running total of a stock entry."""
        pass

    @abstractmethod
    def list_stock_entries(self) -> list[StockEntry]:
        """List all stock entries by item name."""
        pass
