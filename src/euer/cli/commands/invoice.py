"""Invoice commands."""

import click
from euer.cli.error_handling import handle_domain_error
from euer.domain.errors import DomainError
from euer.utils.amount_parser import parse_amount
from euer.utils.date_parser import parse_date


@click.group()
def invoice_group():
    """Manage invoices and their payments."""
    pass


@invoice_group.command("add")
@click.argument("number")
@click.argument("client")
@click.option("--date", "issue_date", help="Issue date (YYYY-MM-DD, DD.MM.YYYY or 'today')")
@click.pass_context
def add_invoice(ctx, number: str, client: str, issue_date: str | None):
    """Create an invoice."""
    db = ctx.obj["db"]

    parsed_date = None
    if issue_date:
        try:
            parsed_date = parse_date(issue_date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        invoice_id = db.create_invoice(number=number, client=client, issue_date=parsed_date)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created invoice {number} (ID: {invoice_id})")


@invoice_group.command("pay")
@click.argument("invoice_id", type=int)
@click.option("--date", "payment_date", required=True, help="Payment date")
@click.option("--amount", required=True, help="Received amount")
@click.pass_context
def pay_invoice(ctx, invoice_id: int, payment_date: str, amount: str):
    """Record a payment received for an invoice."""
    db = ctx.obj["db"]

    try:
        parsed_date = parse_date(payment_date)
        parsed_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    try:
        payment_id = db.add_invoice_payment(invoice_id=invoice_id, date=parsed_date, amount=parsed_amount)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded payment {payment_id} for invoice {invoice_id}")


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
