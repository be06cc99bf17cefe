"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from euer.domain.entities import (
    Classification,
    FlowType,
    RawEvent,
    Rule,
    RuleField,
    RuleOperator,
    SourceType,
    TrainingExample,
    VatMode,
)


class Database(ABC):
    """Abstract database interface for euer."""

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

    # Event source operations
    @abstractmethod
    def create_transaction(
        self,
        date: date,
        amount: Decimal,
        flow_type: FlowType,
        counterparty: str = "",
        purpose: str = "",
        account_id: Optional[str] = None,
        status: str = "booked",
        linked_invoice_id: Optional[int] = None,
    ) -> int:
        """Create a bank transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def soft_delete_transaction(self, transaction_id: int) -> None:
        """Mark a bank transaction as deleted."""
        pass

    @abstractmethod
    def create_invoice(self, number: str, client: str, issue_date: Optional[date] = None) -> int:
        """Create an invoice. Returns invoice ID."""
        pass

    @abstractmethod
    def add_invoice_payment(self, invoice_id: int, date: date, amount: Decimal) -> int:
        """Record a settled payment for an invoice. Returns payment ID."""
        pass

    @abstractmethod
    def list_raw_events(self, start_date: date, end_date: date) -> list[RawEvent]:
        """List settled invoice payments and booked transactions in a date range.

        Income transactions linked to an invoice are left out because the
        invoice payment already represents them. Results are ordered by date
        descending, then source ID.
        """
        pass

    # Classification operations
    @abstractmethod
    def get_classification(
        self, source_type: SourceType, source_id: str, tax_year: int
    ) -> Optional[Classification]:
        """Get classification by its unique key."""
        pass

    @abstractmethod
    def save_classification(
        self,
        source_type: SourceType,
        source_id: str,
        tax_year: int,
        eur_line_id: Optional[str],
        excluded: bool,
        vat_mode: VatMode,
        note: Optional[str],
    ) -> Classification:
        """Insert or update the classification for a key.

        An existing row keeps its ID. Returns the stored row as read back.
        """
        pass

    @abstractmethod
    def list_classifications(self, tax_year: int) -> list[Classification]:
        """List all classifications of a tax year."""
        pass

    @abstractmethod
    def list_classification_history(self, tax_year: int) -> list[TrainingExample]:
        """List non-excluded classifications with a line, joined with event text."""
        pass

    # Rule operations
    @abstractmethod
    def list_rules(self, tax_year: int, active_only: bool = False) -> list[Rule]:
        """List rules of a tax year by ascending priority, then creation order."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int) -> Optional[Rule]:
        """Get rule by ID."""
        pass

    @abstractmethod
    def save_rule(
        self,
        tax_year: int,
        priority: int,
        field: RuleField,
        operator: RuleOperator,
        value: str,
        target_eur_line_id: str,
        active: bool = True,
        rule_id: Optional[int] = None,
    ) -> Rule:
        """Create a rule, or update the rule with ``rule_id``."""
        pass

    @abstractmethod
    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule."""
        pass
