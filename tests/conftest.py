"""Shared pytest fixtures for euer tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from euer.database.factories import create_sqlite_database
from euer.domain.catalog import CatalogService
from euer.domain.classification import ClassificationService
from euer.domain.entities import FlowType, TaxConfig
from euer.domain.pipeline import ClassificationPipeline
from euer.domain.report import ReportService
from euer.domain.rules import RuleService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def catalog_service():
    """Create a CatalogService with the shipped schedules."""
    return CatalogService()


@pytest.fixture
def classification_service(temp_db):
    """Create a ClassificationService with a temporary database."""
    return ClassificationService(temp_db)


@pytest.fixture
def rule_service(temp_db):
    """Create a RuleService with a temporary database."""
    return RuleService(temp_db)


@pytest.fixture
def pipeline(temp_db, catalog_service):
    """Create a ClassificationPipeline with a temporary database."""
    return ClassificationPipeline(temp_db, catalog_service)


@pytest.fixture
def report_service(temp_db, catalog_service):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db, catalog_service)


@pytest.fixture
def tax_config():
    """Regular VAT taxpayer with 19 % default rate."""
    return TaxConfig(small_business_rule=False, default_vat_rate=Decimal("19"))


@pytest.fixture
def sample_events(temp_db):
    """Create a small mix of transactions and invoice payments in 2025.

    Returns a dict of names to source IDs.
    """
    invoice_id = temp_db.create_invoice(number="2025-001", client="ACME GmbH", issue_date=date(2025, 2, 1))
    temp_db.add_invoice_payment(invoice_id, date=date(2025, 2, 20), amount=Decimal("1190.00"))

    hosting = temp_db.create_transaction(
        date=date(2025, 3, 1),
        amount=Decimal("-119.00"),
        flow_type=FlowType.EXPENSE,
        counterparty="Hetzner Online",
        purpose="Hosting Maerz",
        account_id="DE01",
    )
    rent = temp_db.create_transaction(
        date=date(2025, 3, 3),
        amount=Decimal("-500.00"),
        flow_type=FlowType.EXPENSE,
        counterparty="Vermieter Schulz",
        purpose="Miete Buero",
        account_id="DE01",
    )
    # Linked income is represented by the invoice payment
    linked_income = temp_db.create_transaction(
        date=date(2025, 2, 20),
        amount=Decimal("1190.00"),
        flow_type=FlowType.INCOME,
        counterparty="ACME GmbH",
        purpose="RE 2025-001",
        account_id="DE01",
        linked_invoice_id=invoice_id,
    )
    other_income = temp_db.create_transaction(
        date=date(2025, 4, 10),
        amount=Decimal("300.00"),
        flow_type=FlowType.INCOME,
        counterparty="Kunde Meier",
        purpose="Beratung",
        account_id="DE02",
    )

    return {
        "invoice": str(invoice_id),
        "hosting": str(hosting),
        "rent": str(rent),
        "linked_income": str(linked_income),
        "other_income": str(other_income),
    }


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
