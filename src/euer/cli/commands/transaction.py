"""Bank transaction commands."""

import click
from euer.cli.error_handling import handle_domain_error
from euer.domain.entities import FlowType
from euer.domain.errors import DomainError
from euer.utils.amount_parser import parse_amount
from euer.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage bank transactions."""
    pass


@transaction_group.command("add")
@click.option("--date", "txn_date", required=True, help="Booking date (YYYY-MM-DD, DD.MM.YYYY or 'today')")
@click.option("--amount", required=True, help="Amount (e.g., 119.00 or 1.234,56)")
@click.option(
    "--type",
    "flow_type",
    type=click.Choice([f.value for f in FlowType], case_sensitive=False),
    required=True,
    help="Money flow direction",
)
@click.option("--counterparty", default="", help="Counterparty name")
@click.option("--purpose", default="", help="Purpose / booking text")
@click.option("--account", "account_id", help="Bank account identifier")
@click.option(
    "--status",
    type=click.Choice(["booked", "pending"], case_sensitive=False),
    default="booked",
    help="Booking status (default: booked); pending transactions are not reported",
)
@click.option("--linked-invoice", "linked_invoice_id", type=int, help="ID of the invoice this transaction pays")
@click.pass_context
def add_transaction(
    ctx,
    txn_date: str,
    amount: str,
    flow_type: str,
    counterparty: str,
    purpose: str,
    account_id: str | None,
    status: str,
    linked_invoice_id: int | None,
):
    """Add a bank transaction.

    Examples:
        euer transaction add --date 2025-03-01 --amount 119 --type expense --counterparty "Hetzner" --purpose "Hosting"
        euer transaction add --date 15.03.2025 --amount "1.190,00" --type income --counterparty "ACME" --linked-invoice 1
    """
    db = ctx.obj["db"]

    try:
        parsed_date = parse_date(txn_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        parsed_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        transaction_id = db.create_transaction(
            date=parsed_date,
            amount=parsed_amount,
            flow_type=FlowType(flow_type.lower()),
            counterparty=counterparty,
            purpose=purpose,
            account_id=account_id,
            status=status.lower(),
            linked_invoice_id=linked_invoice_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.pass_context
def delete_transaction(ctx, transaction_id: int):
    """Delete a transaction.

    The row is kept but no longer appears in items or reports.
    """
    db = ctx.obj["db"]

    try:
        db.soft_delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
