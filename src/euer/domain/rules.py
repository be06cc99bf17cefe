"""Suggestion rule domain service."""

from typing import Optional

from euer.database.base import Database
from euer.domain.entities import Rule, RuleField, RuleOperator
from euer.domain.errors import NotFoundError, ValidationError, invalid_choice, rule_not_found


class RuleService:
    """Service for managing user-authored suggestion rules."""

    def __init__(self, db: Database):
        """Initialize rule service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_active_rules(self, tax_year: int) -> list[Rule]:
        """List active rules in evaluation order (ascending priority)."""
        return self.db.list_rules(tax_year, active_only=True)

    def list_rules(self, tax_year: int) -> list[Rule]:
        """List all rules of a tax year, including inactive ones."""
        return self.db.list_rules(tax_year, active_only=False)

    def get_rule(self, rule_id: int) -> Optional[Rule]:
        """Get rule by ID."""
        return self.db.get_rule(rule_id)

    def upsert_rule(
        self,
        tax_year: int,
        field: RuleField | str,
        operator: RuleOperator | str,
        value: str,
        target_eur_line_id: str,
        priority: int = 100,
        active: bool = True,
        rule_id: Optional[int] = None,
    ) -> Rule:
        """Create a rule, or update an existing one when ``rule_id`` is given.

        Args:
            tax_year: Tax year the rule applies to
            field: "counterparty", "purpose" or "any"
            operator: "contains", "equals" or "startsWith"
            value: Text to match; compared case-insensitively
            target_eur_line_id: Line suggested on match
            priority: Lower values are evaluated first
            active: Inactive rules are kept but never evaluated
            rule_id: ID of the rule to update

        Returns:
            The stored rule

        Raises:
            ValidationError: If field, operator, value or target is invalid
            NotFoundError: If ``rule_id`` does not exist
        """
        try:
            rule_field = RuleField(field)
        except ValueError:
            raise ValidationError(
                invalid_choice("rule field", field, [f.value for f in RuleField])
            ) from None
        try:
            rule_operator = RuleOperator(operator)
        except ValueError:
            raise ValidationError(
                invalid_choice("rule operator", operator, [o.value for o in RuleOperator])
            ) from None

        if not value or not value.strip():
            raise ValidationError("Rule value must not be empty")
        if not target_eur_line_id or not target_eur_line_id.strip():
            raise ValidationError("Rule target line must not be empty")

        return self.db.save_rule(
            tax_year=tax_year,
            priority=priority,
            field=rule_field,
            operator=rule_operator,
            value=value.strip(),
            target_eur_line_id=target_eur_line_id.strip(),
            active=active,
            rule_id=rule_id,
        )

    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule.

        Raises:
            NotFoundError: If the rule does not exist
        """
        if self.db.get_rule(rule_id) is None:
            raise NotFoundError(rule_not_found(rule_id))
        self.db.delete_rule(rule_id)
