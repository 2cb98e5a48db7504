"""Stock ledger domain service."""

import logging
from typing import Iterable

from claimflow.database.base import Database
from claimflow.domain.entities import ClaimLine, StockEntry

logger = logging.getLogger(__name__)


class StockLedger:
    """Per-item running quantity totals adjusted by invoiced lines.

    Item names are matched case-insensitively. Lines are processed one by
    one; atomicity comes from the caller's unit of work.
    """

    def __init__(self, db: Database):
        """Initialize stock ledger.

        Args:
            db: Database instance
        """
        self.db = db

    def apply(self, lines: Iterable[ClaimLine]) -> None:
        """Add each line's quantity to its item total, creating entries as needed."""
        for line in lines:
            entry = self.db.get_stock_entry_by_name(line.name)
            if entry is None:
                self.db.create_stock_entry(item_name=line.name, total_quantity=line.quantity)
                logger.debug("Stock entry created: %s = %d", line.name, line.quantity)
            else:
                quantity = entry.total_quantity + line.quantity
                self.db.update_stock_quantity(entry.id, quantity)
                logger.debug("Stock applied: %s = %d", entry.item_name, quantity)

    def revert(self, lines: Iterable[ClaimLine]) -> None:
        """Subtract each line's quantity from its item total.

        Items without an entry are skipped. Totals are not floored at zero.
        """
        for line in lines:
            entry = self.db.get_stock_entry_by_name(line.name)
            if entry is None:
                logger.debug("Stock revert skipped, no entry for %s", line.name)
                continue
            quantity = entry.total_quantity - line.quantity
            self.db.update_stock_quantity(entry.id, quantity)
            logger.debug("Stock reverted: %s = %d", entry.item_name, quantity)

    def list_entries(self) -> list[StockEntry]:
        """List all stock entries."""
        return self.db.list_stock_entries()
