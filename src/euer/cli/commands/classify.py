"""Classification commands."""

import click
from euer.cli.error_handling import handle_domain_error
from euer.domain.classification import ClassificationService
from euer.domain.entities import SourceType, VatMode
from euer.domain.errors import DomainError


@click.command("classify")
@click.argument("source_type", type=click.Choice([s.value for s in SourceType], case_sensitive=False))
@click.argument("line_id")
@click.argument("source_ids", nargs=-1, required=True)
@click.option("--year", "tax_year", type=int, required=True, help="Tax year (e.g., 2025)")
@click.option(
    "--vat-mode",
    type=click.Choice([m.value for m in VatMode], case_sensitive=False),
    default=VatMode.NONE.value,
    help="'default' extracts the default VAT rate from the gross amount (default: none)",
)
@click.option("--note", help="Free-text note")
@click.pass_context
def classify(ctx, source_type: str, line_id: str, source_ids: tuple[str, ...], tax_year: int, vat_mode: str, note: str | None):
    """Assign one or more events to an EÜR line.

    Examples:
        euer classify transaction E2025_KZ280 12 13 --year 2025
        euer classify invoice E2025_KZ112 4 --year 2025 --vat-mode default
    """
    db = ctx.obj["db"]
    service = ClassificationService(db)

    try:
        results = service.upsert_many(
            source_type=source_type.lower(),
            source_ids=source_ids,
            tax_year=tax_year,
            eur_line_id=line_id,
            vat_mode=vat_mode.lower(),
            note=note,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Classified {len(results)} {source_type.lower()} item(s) as {line_id}")


@click.command("exclude")
@click.argument("source_type", type=click.Choice([s.value for s in SourceType], case_sensitive=False))
@click.argument("source_ids", nargs=-1, required=True)
@click.option("--year", "tax_year", type=int, required=True, help="Tax year (e.g., 2025)")
@click.option("--note", help="Free-text note")
@click.pass_context
def exclude(ctx, source_type: str, source_ids: tuple[str, ...], tax_year: int, note: str | None):
    """Exclude events from the EÜR (e.g., private transfers)."""
    db = ctx.obj["db"]
    service = ClassificationService(db)

    try:
        results = service.upsert_many(
            source_type=source_type.lower(),
            source_ids=source_ids,
            tax_year=tax_year,
            excluded=True,
            note=note,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Excluded {len(results)} {source_type.lower()} item(s)")


def register_commands(cli):
    """Register classification commands with main CLI."""
    cli.add_command(classify)
    cli.add_command(exclude)
