"""Reference code generation for claims and invoices."""

import uuid
from datetime import datetime, UTC
from typing import Optional


def claim_reference(now: Optional[datetime] = None) -> str:
    """Return a claim code like CLM-20240115093012."""
    now = now or datetime.now(UTC)
    return f"CLM-{now:%Y%m%d%H%M%S}"


def invoice_reference() -> str:
    """Return an invoice code like INV-1A2B3C4D."""
    return f"INV-{uuid.uuid4().hex[:8].upper()}"
