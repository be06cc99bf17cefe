"""CLI helpers for date range resolution."""

from datetime import date

import click

from euer.utils.date_parser import parse_date, tax_year_range


def resolve_cli_date_range(
    ctx,
    *,
    tax_year: int,
    start_date: str | None,
    end_date: str | None,
) -> tuple[date, date]:
    """Resolve CLI date options within a tax year.

    Missing bounds default to January 1st and December 31st of the year.
    """
    start = None
    end = None

    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    try:
        return tax_year_range(tax_year, start, end)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
