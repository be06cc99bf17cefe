"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the classification engine never
sees ORM objects.
"""

from euer.domain import entities as domain
from euer.database.models import (
    BankTransaction as ORMBankTransaction,
    EurClassification as ORMEurClassification,
    EurRule as ORMEurRule,
    Invoice as ORMInvoice,
    InvoicePayment as ORMInvoicePayment,
)


def invoice_purpose(number: str) -> str:
    """Return the purpose text used for invoice-derived events."""
    return f"Rechnung {number}"


def classification_to_domain(orm_cls: ORMEurClassification) -> domain.Classification:
    """Convert SQLAlchemy EurClassification model to domain Classification entity."""
    return domain.Classification(
        id=orm_cls.id,
        source_type=domain.SourceType(orm_cls.source_type),
        source_id=orm_cls.source_id,
        tax_year=orm_cls.tax_year,
        eur_line_id=orm_cls.eur_line_id or None,
        excluded=bool(orm_cls.excluded),
        vat_mode=domain.VatMode(orm_cls.vat_mode),
        note=orm_cls.note,
        updated_at=orm_cls.updated_at,
    )


def rule_to_domain(orm_rule: ORMEurRule) -> domain.Rule:
    """Convert SQLAlchemy EurRule model to domain Rule entity."""
    return domain.Rule(
        id=orm_rule.id,
        tax_year=orm_rule.tax_year,
        priority=orm_rule.priority,
        field=domain.RuleField(orm_rule.field),
        operator=domain.RuleOperator(orm_rule.operator),
        value=orm_rule.value,
        target_eur_line_id=orm_rule.target_eur_line_id,
        active=bool(orm_rule.active),
        created_at=orm_rule.created_at,
        updated_at=orm_rule.updated_at,
    )


def transaction_to_raw_event(orm_txn: ORMBankTransaction) -> domain.RawEvent:
    """Project a booked bank transaction onto a raw event."""
    return domain.RawEvent(
        source_type=domain.SourceType.TRANSACTION,
        source_id=str(orm_txn.id),
        date=orm_txn.date,
        amount_gross=abs(orm_txn.amount),
        flow_type=domain.FlowType(orm_txn.flow_type),
        counterparty=orm_txn.counterparty or "",
        purpose=orm_txn.purpose or "",
        account_id=orm_txn.account_id,
        linked_via_invoice=orm_txn.linked_invoice_id is not None,
    )


def invoice_payment_to_raw_event(
    orm_payment: ORMInvoicePayment, orm_invoice: ORMInvoice
) -> domain.RawEvent:
    """Project an invoice payment onto an income raw event."""
    return domain.RawEvent(
        source_type=domain.SourceType.INVOICE,
        source_id=str(orm_invoice.id),
        date=orm_payment.date,
        amount_gross=abs(orm_payment.amount),
        flow_type=domain.FlowType.INCOME,
        counterparty=orm_invoice.client or "",
        purpose=invoice_purpose(orm_invoice.number),
        account_id=None,
        linked_via_invoice=False,
    )
