"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class CatalogError(DomainError):
    """Line catalog failed its structural validation."""


def duplicate_line_id(line_id: str) -> str:
    """Return message for a line id defined twice."""
    return f"Duplicate EÜR line id: {line_id}"


def duplicate_kennziffer(tax_year: int, kennziffer: str) -> str:
    """Return message for a Kennziffer defined twice within one year."""
    return f"Duplicate EÜR Kennziffer in year {tax_year}: {kennziffer}"


def missing_computed_child(line_id: str, child_id: str) -> str:
    """Return message for a computed line pointing at an unknown line."""
    return f"Computed line {line_id} references missing id: {child_id}"


def computed_cycle(line_id: str) -> str:
    """Return message for a cycle among computed lines."""
    return f"Cycle detected in computed EÜR lines at: {line_id}"


def rule_not_found(rule_id: int) -> str:
    """Return message for missing rule."""
    return f"Rule {rule_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing bank transaction."""
    return f"Transaction {transaction_id} not found"


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return f"Invoice {invoice_id} not found"


def invalid_choice(name: str, value: object, choices: list[str]) -> str:
    """Return message for a value outside its allowed set."""
    return f"Invalid {name} '{value}'. Expected one of: {', '.join(choices)}"


def invoice_number_exists(number: str) -> str:
    """Return message for duplicate invoice number."""
    return f"Invoice '{number}' already exists"
