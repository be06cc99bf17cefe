"""Domain model entities for euer.

These are pure data classes representing the EÜR concepts, independent of
the database schema. The catalog, the classification store, the rule store
and the report aggregator all exchange these types.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class LineKind(str, Enum):
    """Kind of an EÜR schedule line."""

    INCOME = "income"
    EXPENSE = "expense"
    COMPUTED = "computed"


class FlowType(str, Enum):
    """Whether an event is income or expense."""

    INCOME = "income"
    EXPENSE = "expense"


class SourceType(str, Enum):
    """Origin of a classified event."""

    TRANSACTION = "transaction"
    INVOICE = "invoice"


class VatMode(str, Enum):
    """How VAT is extracted from a classified gross amount."""

    NONE = "none"
    DEFAULT = "default"


class RuleField(str, Enum):
    """Event text a rule is matched against."""

    COUNTERPARTY = "counterparty"
    PURPOSE = "purpose"
    ANY = "any"


class RuleOperator(str, Enum):
    """Comparison a rule applies to its normalized value."""

    CONTAINS = "contains"
    EQUALS = "equals"
    STARTS_WITH = "startsWith"


class SuggestionLayer(str, Enum):
    """Pipeline layer that produced a suggestion."""

    RULE = "rule"
    COUNTERPARTY = "counterparty"
    BAYES = "bayes"
    KEYWORD = "keyword"


class ItemStatus(str, Enum):
    """Classification status filter for item listings."""

    ALL = "all"
    UNCLASSIFIED = "unclassified"
    CLASSIFIED = "classified"
    EXCLUDED = "excluded"


@dataclass(frozen=True)
class LineDefinition:
    """One line of a tax-year EÜR schedule."""

    id: str
    tax_year: int
    kennziffer: Optional[str]
    label: str
    kind: LineKind
    exportable: bool
    sort_order: int
    computed_from_ids: tuple[str, ...] = ()
    source_version: str = ""


@dataclass(frozen=True)
class Classification:
    """User decision binding one event to at most one line."""

    id: int
    source_type: SourceType
    source_id: str
    tax_year: int
    eur_line_id: Optional[str]
    excluded: bool
    vat_mode: VatMode
    note: Optional[str]
    updated_at: datetime

    @property
    def key(self) -> str:
        return classification_key(self.source_type, self.source_id)


@dataclass(frozen=True)
class ClassificationSnapshot:
    """Prior state of one classification key, used to undo a change.

    ``classification`` is None when no row existed for the key.
    """

    source_type: SourceType
    source_id: str
    tax_year: int
    classification: Optional[Classification]


@dataclass(frozen=True)
class Rule:
    """User-authored pattern that suggests a target line."""

    id: int
    tax_year: int
    priority: int
    field: RuleField
    operator: RuleOperator
    value: str
    target_eur_line_id: str
    active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class RawEvent:
    """Read-only projection of a settled invoice payment or booked transaction."""

    source_type: SourceType
    source_id: str
    date: date
    amount_gross: Decimal
    flow_type: FlowType
    counterparty: str
    purpose: str
    account_id: Optional[str] = None
    linked_via_invoice: bool = False

    @property
    def key(self) -> str:
        return classification_key(self.source_type, self.source_id)


@dataclass(frozen=True)
class ClassificationCandidate:
    """Text and flow type of an event the pipeline proposes a line for."""

    flow_type: FlowType
    counterparty: str
    purpose: str


@dataclass(frozen=True)
class TrainingExample:
    """Historical classification joined with the text of its event."""

    source_type: SourceType
    source_id: str
    counterparty: str
    purpose: str
    eur_line_id: str
    updated_at: datetime


@dataclass(frozen=True)
class Suggestion:
    """Non-authoritative pipeline output for one event."""

    line_id: Optional[str] = None
    reason: Optional[str] = None
    layer: Optional[SuggestionLayer] = None


@dataclass(frozen=True)
class TaxConfig:
    """Tax settings that influence net amount extraction."""

    small_business_rule: bool = False
    default_vat_rate: Decimal = Decimal("19")


@dataclass(frozen=True)
class ListItem:
    """Raw event enriched with its classification state and a suggestion."""

    event: RawEvent
    amount_net: Decimal
    classification: Optional[Classification] = None
    line: Optional[LineDefinition] = None
    suggested_line_id: Optional[str] = None
    suggestion_reason: Optional[str] = None
    suggestion_layer: Optional[SuggestionLayer] = None


@dataclass(frozen=True)
class ReportRow:
    """Total of one schedule line."""

    line_id: str
    kennziffer: Optional[str]
    label: str
    kind: LineKind
    exportable: bool
    total: Decimal
    sort_order: int


@dataclass(frozen=True)
class ReportSummary:
    """Income, expense and surplus totals of a report."""

    income_total: Decimal
    expense_total: Decimal
    surplus: Decimal


@dataclass(frozen=True)
class EurReport:
    """Aggregated EÜR report for a tax year and date range."""

    tax_year: int
    start_date: date
    end_date: date
    rows: tuple[ReportRow, ...]
    summary: ReportSummary
    unclassified_count: int
    warnings: tuple[str, ...] = ()


def classification_key(source_type: SourceType | str, source_id: str) -> str:
    """Return the ``"{source_type}:{source_id}"`` lookup key."""
    value = source_type.value if isinstance(source_type, SourceType) else source_type
    return f"{value}:{source_id}"
