"""Claim snapshot history.

Every transition appends a history entry carrying a JSON copy of the claim's
editable fields as they stood once the transition completed. The log is
append-only; a backward move reads the most recent entry tagged with the
status being returned to.
"""

import json
import logging
from datetime import datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from claimflow.database.base import Database
from claimflow.domain.entities import (
    Claim,
    ClaimLine,
    ClaimStatus,
    HistoryEntry,
    HistoryEntryView,
    Snapshot,
)
from claimflow.domain.errors import SnapshotError

logger = logging.getLogger(__name__)

# Stored when a snapshot cannot be encoded.
PLACEHOLDER_PAYLOAD = "{}"


class SnapshotCodec:
    """Round-trips a Snapshot to and from a JSON string."""

    def encode(self, snapshot: Snapshot) -> str:
        payload = {
            "claimantName": snapshot.claimant_name,
            "description": snapshot.description,
            "items": [
                {
                    "itemName": line.name,
                    "quantity": line.quantity,
                    "unitPrice": str(line.unit_price),
                }
                for line in snapshot.lines
            ],
        }
        try:
            return json.dumps(payload)
        except (TypeError, ValueError) as e:
            raise SnapshotError(f"Could not encode snapshot: {e}") from e

    def decode(self, payload: str) -> Snapshot:
        try:
            data = json.loads(payload)
            items = data.get("items") or []
            return Snapshot(
                claimant_name=data["claimantName"],
                description=data.get("description"),
                lines=tuple(
                    ClaimLine(
                        name=item["itemName"],
                        quantity=int(item["quantity"]),
                        unit_price=Decimal(item["unitPrice"]),
                    )
                    for item in items
                ),
            )
        except (ValueError, TypeError, KeyError, AttributeError, InvalidOperation) as e:
            raise SnapshotError(f"Could not decode snapshot: {e}") from e


def snapshot_of(claim: Claim) -> Snapshot:
    """Capture the editable fields of a claim."""
    return Snapshot(
        claimant_name=claim.claimant_name,
        description=claim.description,
        lines=tuple(claim.lines),
    )


class SnapshotStore:
    """Append-only log of claim transitions, queried by target status."""

    def __init__(
        self,
        db: Database,
        codec: Optional[SnapshotCodec] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        """Initialize snapshot store.

        Args:
            db: Database instance
            codec: Serializer for snapshot payloads (JSON by default)
            clock: Source of entry timestamps
        """
        self.db = db
        self.codec = codec or SnapshotCodec()
        self.clock = clock

    def record(
        self,
        claim: Claim,
        from_status: ClaimStatus,
        to_status: ClaimStatus,
        comment: str,
    ) -> int:
        """Append a history entry for a completed transition.

        An encoding failure does not abort the transition: the entry is
        stored with a placeholder payload instead.

        Returns:
            History entry ID
        """
        try:
            payload = self.codec.encode(snapshot_of(claim))
        except SnapshotError as e:
            logger.warning(
                "Storing placeholder snapshot for claim %s (%s -> %s): %s",
                claim.id,
                from_status.value,
                to_status.value,
                e,
            )
            payload = PLACEHOLDER_PAYLOAD

        return self.db.add_history_entry(
            claim_id=claim.id,
            from_status=from_status,
            to_status=to_status,
            comment=comment,
            snapshot=payload,
            created_at=self.clock(),
        )

    def most_recent_snapshot_for(self, claim_id: int, status: ClaimStatus) -> Optional[HistoryEntry]:
        """Latest entry whose target status is status, or None."""
        return self.db.get_latest_history_entry(claim_id, status)

    def restore(self, entry: HistoryEntry) -> Snapshot:
        """Decode the snapshot carried by a history entry.

        Raises:
            SnapshotError: If the payload cannot be decoded
        """
        return self.codec.decode(entry.snapshot)

    def history(self, claim_id: int) -> list[HistoryEntryView]:
        """All entries for a claim, oldest first."""
        return [
            HistoryEntryView(
                id=entry.id,
                from_status=entry.from_status,
                to_status=entry.to_status,
                comment=entry.comment,
                created_at=entry.created_at,
            )
            for entry in self.db.list_history(claim_id)
        ]
