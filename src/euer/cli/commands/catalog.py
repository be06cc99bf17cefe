"""EÜR line catalog commands."""

import click
from euer.cli.error_handling import handle_domain_error
from euer.domain.catalog import CatalogService
from euer.domain.errors import CatalogError


@click.group()
def catalog_group():
    """Inspect the EÜR line catalog."""
    pass


@catalog_group.command("show")
@click.option("--year", "tax_year", type=int, required=True, help="Tax year (e.g., 2025)")
@click.pass_context
def show_catalog(ctx, tax_year: int):
    """List the lines of a tax year in form order."""
    service = CatalogService()

    try:
        lines = service.load(tax_year)
    except CatalogError as e:
        handle_domain_error(ctx, e)

    if not lines:
        click.echo(f"No EÜR catalog for {tax_year}.")
        return

    click.echo(f"\nEÜR lines {tax_year} ({lines[0].source_version}):")
    click.echo("-" * 80)
    click.echo(f"{'KZ':<6} {'Kind':<9} {'Label':<45} {'ID'}")
    click.echo("-" * 80)
    for line in lines:
        label = line.label if len(line.label) <= 45 else line.label[:42] + "..."
        kennziffer = line.kennziffer or "-"
        marker = "" if line.exportable else " (not exported)"
        click.echo(f"{kennziffer:<6} {line.kind.value:<9} {label:<45} {line.id}{marker}")
        if line.computed_from_ids:
            click.echo(f"{'':<16}= {' + '.join(line.computed_from_ids)}")
    click.echo("-" * 80)
    click.echo(f"Total: {len(lines)} lines")


@catalog_group.command("validate")
@click.option("--year", "tax_year", type=int, required=True, help="Tax year (e.g., 2025)")
@click.pass_context
def validate_catalog(ctx, tax_year: int):
    """Check the catalog of a tax year for integrity errors."""
    service = CatalogService()

    try:
        lines = service.load(tax_year)
    except CatalogError as e:
        handle_domain_error(ctx, e)

    if not lines:
        click.echo(f"No EÜR catalog for {tax_year}.")
        return
    click.echo(f"Catalog {tax_year} is valid ({len(lines)} lines)")


def register_commands(cli):
    """Register catalog commands with main CLI."""
    cli.add_command(catalog_group, name="catalog")
