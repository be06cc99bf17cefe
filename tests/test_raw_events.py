"""Tests for the raw event projection of the database layer."""

from datetime import date
from decimal import Decimal

import pytest

from euer.database.factories import create_sqlite_database
from euer.domain.entities import FlowType, SourceType, VatMode
from euer.domain.errors import ConflictError, NotFoundError

YEAR_START = date(2025, 1, 1)
YEAR_END = date(2025, 12, 31)


def _events(db):
    return {event.key: event for event in db.list_raw_events(YEAR_START, YEAR_END)}


def test_linked_income_is_dropped(temp_db, sample_events):
    """Test that income settled through an invoice appears only as the payment."""
    events = _events(temp_db)

    assert f"transaction:{sample_events['linked_income']}" not in events
    assert f"invoice:{sample_events['invoice']}" in events
    assert len(events) == 4


def test_linked_expense_is_kept(temp_db):
    """Test that expense transactions are kept even when linked."""
    invoice_id = temp_db.create_invoice(number="R-1", client="Lieferant")
    txn_id = temp_db.create_transaction(
        date=date(2025, 6, 1),
        amount=Decimal("-20.00"),
        flow_type=FlowType.EXPENSE,
        counterparty="Lieferant",
        linked_invoice_id=invoice_id,
    )

    event = _events(temp_db)[f"transaction:{txn_id}"]
    assert event.linked_via_invoice is True
    assert event.amount_gross == Decimal("20.00")


def test_pending_and_deleted_are_skipped(temp_db):
    """Test that only booked, not deleted transactions are events."""
    pending = temp_db.create_transaction(
        date=date(2025, 6, 1), amount=Decimal("-5.00"), flow_type=FlowType.EXPENSE, status="pending"
    )
    deleted = temp_db.create_transaction(
        date=date(2025, 6, 1), amount=Decimal("-5.00"), flow_type=FlowType.EXPENSE
    )
    temp_db.soft_delete_transaction(deleted)

    events = _events(temp_db)
    assert f"transaction:{pending}" not in events
    assert f"transaction:{deleted}" not in events


def test_invoice_payments_share_source_id(temp_db):
    """Test that all payments of one invoice use the invoice ID."""
    invoice_id = temp_db.create_invoice(number="R-2", client="Kunde")
    temp_db.add_invoice_payment(invoice_id, date=date(2025, 3, 1), amount=Decimal("100.00"))
    temp_db.add_invoice_payment(invoice_id, date=date(2025, 4, 1), amount=Decimal("50.00"))

    events = temp_db.list_raw_events(YEAR_START, YEAR_END)

    assert [e.source_id for e in events] == [str(invoice_id), str(invoice_id)]
    assert all(e.source_type == SourceType.INVOICE for e in events)
    assert [e.amount_gross for e in events] == [Decimal("50.00"), Decimal("100.00")]


def test_date_range_and_order(temp_db):
    """Test inclusive bounds and newest-first ordering with source ID ties."""
    ids = [
        temp_db.create_transaction(date=d, amount=Decimal("-1.00"), flow_type=FlowType.EXPENSE)
        for d in (date(2024, 12, 31), date(2025, 1, 1), date(2025, 5, 5), date(2025, 5, 5), date(2025, 12, 31))
    ]

    events = temp_db.list_raw_events(YEAR_START, YEAR_END)

    assert [e.source_id for e in events] == [str(ids[4]), str(ids[2]), str(ids[3]), str(ids[1])]


def test_missing_references(temp_db):
    """Test errors for unknown invoices and transactions."""
    with pytest.raises(NotFoundError, match="Invoice 42 not found"):
        temp_db.add_invoice_payment(42, date=date(2025, 1, 1), amount=Decimal("1.00"))

    with pytest.raises(NotFoundError, match="Invoice 42 not found"):
        temp_db.create_transaction(
            date=date(2025, 1, 1), amount=Decimal("1.00"), flow_type=FlowType.INCOME, linked_invoice_id=42
        )

    with pytest.raises(NotFoundError, match="Transaction 42 not found"):
        temp_db.soft_delete_transaction(42)


def test_duplicate_invoice_number(temp_db):
    """Test that invoice numbers are unique."""
    temp_db.create_invoice(number="R-3", client="Kunde")

    with pytest.raises(ConflictError, match="already exists"):
        temp_db.create_invoice(number="R-3", client="Anderer Kunde")


def test_classification_history_joins_event_text(temp_db, sample_events, classification_service):
    """Test that training examples carry the text of their event."""
    classification_service.upsert("invoice", sample_events["invoice"], 2025, eur_line_id="E2025_KZ112")
    classification_service.upsert("transaction", sample_events["rent"], 2025, excluded=True)
    classification_service.upsert("transaction", "999", 2025, eur_line_id="E2025_KZ183")

    history = temp_db.list_classification_history(2025)

    assert len(history) == 1
    assert history[0].counterparty == "ACME GmbH"
    assert history[0].purpose == "Rechnung 2025-001"
    assert history[0].eur_line_id == "E2025_KZ112"


def test_save_classification_recovers_from_concurrent_insert(temp_db, monkeypatch):
    """Test that a key inserted by another writer after the lookup is updated."""
    other = create_sqlite_database(database_path=temp_db.database_path)
    find_classification = temp_db._find_classification
    lookups = []

    def find_after_other_writer(session, source_type, source_id, tax_year):
        if not lookups:
            lookups.append(source_id)
            other.save_classification(
                source_type=SourceType.TRANSACTION,
                source_id="1",
                tax_year=2025,
                eur_line_id="E2025_KZ183",
                excluded=False,
                vat_mode=VatMode.NONE,
                note="first",
            )
            return None
        return find_classification(session, source_type, source_id, tax_year)

    monkeypatch.setattr(temp_db, "_find_classification", find_after_other_writer)

    try:
        saved = temp_db.save_classification(
            source_type=SourceType.TRANSACTION,
            source_id="1",
            tax_year=2025,
            eur_line_id="E2025_KZ228",
            excluded=False,
            vat_mode=VatMode.DEFAULT,
            note="second",
        )
    finally:
        other.disconnect()

    assert saved.eur_line_id == "E2025_KZ228"
    assert saved.note == "second"

    stored = temp_db.list_classifications(2025)
    assert len(stored) == 1
    assert stored[0].id == saved.id
    assert stored[0].eur_line_id == "E2025_KZ228"
    assert stored[0].vat_mode == VatMode.DEFAULT
