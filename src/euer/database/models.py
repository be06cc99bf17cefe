"""SQLAlchemy models for euer database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class Invoice(Base):
    """Invoice model."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    number = Column(String, unique=True, nullable=False)
    client = Column(String, nullable=False)
    issue_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    payments = relationship("InvoicePayment", back_populates="invoice", cascade="all, delete-orphan")


class InvoicePayment(Base):
    """Settled payment of an invoice."""

    __tablename__ = "invoice_payments"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)

    # Relationships
    invoice = relationship("Invoice", back_populates="payments")


class BankTransaction(Base):
    """Bank transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    flow_type = Column(String, nullable=False)
    counterparty = Column(String, nullable=False, default="")
    purpose = Column(String, nullable=False, default="")
    account_id = Column(String, nullable=True)
    status = Column(String, nullable=False, default="booked")
    linked_invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class EurClassification(Base):
    """User classification of one event for one tax year."""

    __tablename__ = "eur_classifications"

    id = Column(Integer, primary_key=True)
    source_type = Column(String, nullable=False)
    source_id = Column(String, nullable=False)
    tax_year = Column(Integer, nullable=False)
    eur_line_id = Column(String, nullable=True)
    excluded = Column(Boolean, default=False, nullable=False)
    vat_mode = Column(String, default="none", nullable=False)
    note = Column(String, nullable=True)
    updated_at = Column(DateTime, default=_now, nullable=False)

    # One classification per source and tax year
    __table_args__ = (
        UniqueConstraint("source_type", "source_id", "tax_year", name="uq_eur_classification_source"),
    )


class EurRule(Base):
    """User-authored suggestion rule."""

    __tablename__ = "eur_rules"

    id = Column(Integer, primary_key=True)
    tax_year = Column(Integer, nullable=False, index=True)
    priority = Column(Integer, nullable=False, default=100)
    field = Column(String, nullable=False)
    operator = Column(String, nullable=False)
    value = Column(String, nullable=False)
    target_eur_line_id = Column(String, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
