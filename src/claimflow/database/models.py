"""SQLAlchemy models for claimflow database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Claim(Base):
    """Expense claim model."""

    __tablename__ = "claims"

    id = Column(Integer, primary_key=True)
    reference_number = Column(String, unique=True, nullable=False)
    claimant_name = Column(String, nullable=False)
    description = Column(String(2000), nullable=True)
    status = Column(String, default="DRAFT", nullable=False)
    total_amount = Column(Numeric(12, 2), default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    # Plain id reference; the invoice side owns the foreign key.
    invoice_id = Column(Integer, nullable=True)

    # Relationships
    lines = relationship(
        "ClaimLine",
        back_populates="claim",
        cascade="all, delete-orphan",
        order_by="ClaimLine.position",
    )
    history = relationship("HistoryEntry", back_populates="claim", cascade="all, delete-orphan")


class ClaimLine(Base):
    """Claim line item model."""

    __tablename__ = "claim_lines"

    id = Column(Integer, primary_key=True)
    claim_id = Column(Integer, ForeignKey("claims.id"), nullable=False)
    position = Column(Integer, nullable=False)
    item_name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)

    # Relationships
    claim = relationship("Claim", back_populates="lines")


class Invoice(Base):
    """Invoice model."""

    __tablename__ = "invoices"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    invoice_number = Column(String, unique=True, nullable=False)
    claim_id = Column(Integer, ForeignKey("claims.id"), unique=True, nullable=False)
    status = Column(String, default="DRAFT", nullable=False)
    subtotal = Column(Numeric(12, 2), default=0, nullable=False)
    tax = Column(Numeric(12, 2), default=0, nullable=False)
    total = Column(Numeric(12, 2), default=0, nullable=False)
    stock_applied = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    approved_at = Column(DateTime, nullable=True)

    # Relationships
    lines = relationship(
        "InvoiceLine",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceLine.position",
    )


class InvoiceLine(Base):
    """Invoice line item model, copied from the claim at invoice creation."""

    __tablename__ = "invoice_lines"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False)
    position = Column(Integer, nullable=False)
    item_name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)

    # Relationships
    invoice = relationship("Invoice", back_populates="lines")


class HistoryEntry(Base):
    """Claim status history model with the serialized claim snapshot."""

    __tablename__ = "claim_history"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    claim_id = Column(Integer, ForeignKey("claims.id"), nullable=False)
    from_status = Column(String, nullable=False)
    to_status = Column(String, nullable=False)
    comment = Column(String(2000), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    snapshot = Column(Text, nullable=False)

    # Relationships
    claim = relationship("Claim", back_populates="history")


class StockEntry(Base):
    """Per-item running stock quantity model."""

    __tablename__ = "stock_entries"

    id = Column(Integer, primary_key=True)
    item_name = Column(String, nullable=False)
    item_key = Column(String, unique=True, nullable=False)
    total_quantity = Column(Integer, default=0, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
