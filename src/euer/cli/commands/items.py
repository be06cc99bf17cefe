"""Classification item listing command."""

import click
from euer.cli.error_handling import handle_domain_error
from euer.cli.date_filters import resolve_cli_date_range
from euer.domain.entities import FlowType, ItemStatus, ListItem, SourceType
from euer.domain.errors import DomainError
from euer.domain.report import ReportService


def _item_state(item: ListItem) -> str:
    cls = item.classification
    if cls is not None and cls.excluded:
        return "excluded"
    if item.line is not None:
        return item.line.kennziffer or item.line.id
    if cls is not None and cls.eur_line_id:
        return f"{cls.eur_line_id} (?)"
    return "-"


@click.command("items")
@click.option("--year", "tax_year", type=int, required=True, help="Tax year (e.g., 2025)")
@click.option("--start-date", help="Start date (defaults to January 1st of the tax year)")
@click.option("--end-date", help="End date (defaults to December 31st of the tax year)")
@click.option(
    "--status",
    type=click.Choice([s.value for s in ItemStatus], case_sensitive=False),
    default=ItemStatus.ALL.value,
    help="Classification status filter (default: all)",
)
@click.option(
    "--type",
    "flow_type",
    type=click.Choice([f.value for f in FlowType], case_sensitive=False),
    help="Only income or only expense items",
)
@click.option(
    "--source",
    "source_type",
    type=click.Choice([s.value for s in SourceType], case_sensitive=False),
    help="Only bank transactions or only invoice payments",
)
@click.option("--account", "account_id", help="Only items of this bank account")
@click.option("--search", help="Text to search in counterparty, purpose, date and amount")
@click.option("--limit", type=int, help="Maximum number of items")
@click.option("--offset", type=int, default=0, help="Number of items to skip")
@click.option("--verbose", "-v", is_flag=True, help="Show suggestion reasons")
@click.pass_context
def list_items(
    ctx,
    tax_year: int,
    start_date: str | None,
    end_date: str | None,
    status: str,
    flow_type: str | None,
    source_type: str | None,
    account_id: str | None,
    search: str | None,
    limit: int | None,
    offset: int,
    verbose: bool,
):
    """List events to classify with their current line and a suggestion.

    Examples:
        euer items --year 2025 --status unclassified
        euer items --year 2025 --type expense --search hosting -v
    """
    db = ctx.obj["db"]
    service = ReportService(db)
    start, end = resolve_cli_date_range(ctx, tax_year=tax_year, start_date=start_date, end_date=end_date)

    try:
        items = service.list_items(
            tax_year=tax_year,
            tax_config=ctx.obj["tax_config"],
            start_date=start,
            end_date=end,
            source_type=SourceType(source_type.lower()) if source_type else None,
            flow_type=FlowType(flow_type.lower()) if flow_type else None,
            account_id=account_id,
            status=ItemStatus(status.lower()),
            search=search,
            offset=offset,
            limit=limit,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not items:
        click.echo("No items found.")
        return

    click.echo(
        f"\n{'Key':<16} {'Date':<12} {'Gross':>12} {'Net':>12} {'Counterparty':<24} {'Line':<10} {'Suggestion'}"
    )
    click.echo("-" * 110)
    for item in items:
        event = item.event
        counterparty = event.counterparty if len(event.counterparty) <= 24 else event.counterparty[:21] + "..."
        sign = "-" if event.flow_type == FlowType.EXPENSE else ""
        click.echo(
            f"{event.key:<16} {event.date.isoformat():<12} "
            f"{sign + str(event.amount_gross):>12} {sign + str(item.amount_net):>12} "
            f"{counterparty:<24} {_item_state(item):<10} {item.suggested_line_id or '-'}"
        )
        if verbose and item.suggestion_reason:
            click.echo(f"{'':<16} {event.purpose}")
            click.echo(f"{'':<16} -> {item.suggestion_reason}")
    click.echo("-" * 110)
    click.echo(f"Total: {len(items)} items")


def register_commands(cli):
    """Register items command with main CLI."""
    cli.add_command(list_items)
