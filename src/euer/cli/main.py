"""Main CLI entry point."""

import logging

import click
from euer.config import load_tax_config
from euer.database.factories import create_sqlite_database
from euer.domain.errors import ValidationError

# Import and register all commands at module level
from euer.cli.commands import (
    catalog,
    classify,
    invoice,
    items,
    report,
    rule,
    transaction,
)


def setup_logging(verbose: bool = False, debug: bool = False):
    """Configure logging."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides EUER_DB_PATH environment variable)",
    envvar="EUER_DB_PATH",
)
@click.option(
    "--small-business/--no-small-business",
    default=None,
    help="Apply the small-business rule (no VAT extraction). Defaults to EUER_SMALL_BUSINESS_RULE",
)
@click.option("--vat-rate", help="Default VAT rate in percent (defaults to EUER_DEFAULT_VAT_RATE or 19)")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.pass_context
def cli(ctx, db_path: str | None, small_business: bool | None, vat_rate: str | None, verbose: bool, debug: bool):
    """Euer - EÜR classification and reporting.

    Classify bank transactions and invoice payments onto the lines of the
    German EÜR form and aggregate them into a report or an export file.
    """
    ctx.ensure_object(dict)
    setup_logging(verbose=verbose, debug=debug)

    try:
        ctx.obj["tax_config"] = load_tax_config(
            small_business_rule=small_business, default_vat_rate=vat_rate
        )
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
catalog.register_commands(cli)
transaction.register_commands(cli)
invoice.register_commands(cli)
items.register_commands(cli)
classify.register_commands(cli)
rule.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
