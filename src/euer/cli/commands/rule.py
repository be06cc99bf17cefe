"""Classification rule commands."""

import click
from euer.cli.error_handling import handle_domain_error
from euer.domain.entities import RuleField, RuleOperator
from euer.domain.errors import DomainError, NotFoundError, rule_not_found
from euer.domain.rules import RuleService

FIELD_CHOICES = [f.value for f in RuleField]
OPERATOR_CHOICES = [o.value for o in RuleOperator]


@click.group()
def rule_group():
    """Manage suggestion rules."""
    pass


@rule_group.command("add")
@click.option("--year", "tax_year", type=int, required=True, help="Tax year (e.g., 2025)")
@click.option("--field", "rule_field", type=click.Choice(FIELD_CHOICES), default=RuleField.ANY.value, help="Text field to match (default: any)")
@click.option("--operator", type=click.Choice(OPERATOR_CHOICES), default=RuleOperator.CONTAINS.value, help="Match operator (default: contains)")
@click.option("--value", required=True, help="Text to match (case-insensitive)")
@click.option("--line", "line_id", required=True, help="Target EÜR line ID (e.g., E2025_KZ280)")
@click.option("--priority", type=int, default=100, help="Lower priorities are evaluated first (default: 100)")
@click.option("--inactive", is_flag=True, help="Create the rule disabled")
@click.pass_context
def add_rule(ctx, tax_year: int, rule_field: str, operator: str, value: str, line_id: str, priority: int, inactive: bool):
    """Create a rule.

    Examples:
        euer rule add --year 2025 --field counterparty --value "Hetzner" --line E2025_KZ280
        euer rule add --year 2025 --operator startsWith --value "Miete" --line E2025_KZ150 --priority 10
    """
    service = RuleService(ctx.obj["db"])

    try:
        rule = service.upsert_rule(
            tax_year=tax_year,
            field=rule_field,
            operator=operator,
            value=value,
            target_eur_line_id=line_id,
            priority=priority,
            active=not inactive,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created rule {rule.id}")


@rule_group.command("list")
@click.option("--year", "tax_year", type=int, required=True, help="Tax year (e.g., 2025)")
@click.pass_context
def list_rules(ctx, tax_year: int):
    """List rules in evaluation order, including inactive ones."""
    service = RuleService(ctx.obj["db"])
    rules = service.list_rules(tax_year)

    if not rules:
        click.echo(f"No rules for {tax_year}.")
        return

    click.echo(f"\n{'ID':<5} {'Prio':>5} {'Field':<13} {'Operator':<11} {'Value':<25} {'Line':<16} {'Active'}")
    click.echo("-" * 90)
    for rule in rules:
        click.echo(
            f"{rule.id:<5} {rule.priority:>5} {rule.field.value:<13} {rule.operator.value:<11} "
            f"{rule.value:<25} {rule.target_eur_line_id:<16} {'yes' if rule.active else 'no'}"
        )


@rule_group.command("update")
@click.argument("rule_id", type=int)
@click.option("--field", "rule_field", type=click.Choice(FIELD_CHOICES), help="Text field to match")
@click.option("--operator", type=click.Choice(OPERATOR_CHOICES), help="Match operator")
@click.option("--value", help="Text to match")
@click.option("--line", "line_id", help="Target EÜR line ID")
@click.option("--priority", type=int, help="Evaluation priority")
@click.option("--active/--inactive", default=None, help="Enable or disable the rule")
@click.pass_context
def update_rule(
    ctx,
    rule_id: int,
    rule_field: str | None,
    operator: str | None,
    value: str | None,
    line_id: str | None,
    priority: int | None,
    active: bool | None,
):
    """Update a rule.

    Updates only the options that are provided.
    """
    service = RuleService(ctx.obj["db"])

    existing = service.get_rule(rule_id)
    if existing is None:
        handle_domain_error(ctx, NotFoundError(rule_not_found(rule_id)))

    try:
        service.upsert_rule(
            tax_year=existing.tax_year,
            field=rule_field or existing.field,
            operator=operator or existing.operator,
            value=value if value is not None else existing.value,
            target_eur_line_id=line_id or existing.target_eur_line_id,
            priority=priority if priority is not None else existing.priority,
            active=active if active is not None else existing.active,
            rule_id=rule_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated rule {rule_id}")


@rule_group.command("delete")
@click.argument("rule_id", type=int)
@click.pass_context
def delete_rule(ctx, rule_id: int):
    """Delete a rule."""
    service = RuleService(ctx.obj["db"])

    try:
        service.delete_rule(rule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted rule {rule_id}")


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
