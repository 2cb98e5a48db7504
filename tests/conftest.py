"""Shared pytest fixtures for claimflow tests."""

import tempfile
import os
from datetime import datetime, timedelta, UTC
from decimal import Decimal
import pytest

from claimflow.database.factories import create_sqlite_database
from claimflow.domain.claim import ClaimService
from claimflow.domain.entities import ClaimLine
from claimflow.domain.invoice import InvoiceService
from claimflow.domain.snapshots import SnapshotStore
from claimflow.domain.stock import StockLedger


class SteppingClock:
    """Clock that advances one second on every call."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clock():
    """Deterministic clock starting 2024-01-15 09:00:00 UTC."""
    return SteppingClock(datetime(2024, 1, 15, 9, 0, 0, tzinfo=UTC))


@pytest.fixture
def stock_ledger(temp_db):
    """Create a StockLedger with a temporary database."""
    return StockLedger(temp_db)


@pytest.fixture
def snapshot_store(temp_db, clock):
    """Create a SnapshotStore with a temporary database."""
    return SnapshotStore(temp_db, clock=clock)


@pytest.fixture
def invoice_service(temp_db, stock_ledger, clock):
    """Create an InvoiceService with the default 10% tax rate."""
    return InvoiceService(temp_db, stock=stock_ledger, clock=clock)


@pytest.fixture
def claim_service(temp_db, snapshot_store, invoice_service, clock):
    """Create a ClaimService wired to the shared collaborators."""
    return ClaimService(temp_db, snapshots=snapshot_store, invoices=invoice_service, clock=clock)


@pytest.fixture
def sample_lines():
    """Pen and paper lines totalling 20.00."""
    return [
        ClaimLine(name="Pen", quantity=10, unit_price=Decimal("1.00")),
        ClaimLine(name="Paper", quantity=2, unit_price=Decimal("5.00")),
    ]


@pytest.fixture
def sample_claim(claim_service, sample_lines):
    """Create a DRAFT claim for Alice with the sample lines."""
    return claim_service.create_claim(
        claimant_name="Alice", description="Office supplies", lines=sample_lines
    )


@pytest.fixture
def walk_to(claim_service):
    """Return a helper that moves a claim forward step by step to a status."""
    from claimflow.domain.entities import ClaimStatus

    def _walk(claim_id: int, target: ClaimStatus):
        claim = claim_service.get_claim(claim_id)
        for status in list(ClaimStatus)[claim.status.rank + 1 : target.rank + 1]:
            claim = claim_service.transition(claim_id, status, f"to {status.value}")
        return claim

    return _walk


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
