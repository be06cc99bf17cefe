"""EÜR report and export commands."""

from pathlib import Path

import click
from euer.cli.error_handling import handle_domain_error
from euer.cli.date_filters import resolve_cli_date_range
from euer.domain.entities import EurReport, LineKind
from euer.domain.errors import DomainError
from euer.domain.export import build_csv
from euer.domain.report import ReportService
from euer.utils.money import format_de


def _build_report(ctx, tax_year: int, start_date: str | None, end_date: str | None) -> EurReport:
    start, end = resolve_cli_date_range(ctx, tax_year=tax_year, start_date=start_date, end_date=end_date)
    service = ReportService(ctx.obj["db"])
    try:
        return service.get_report(
            tax_year=tax_year,
            tax_config=ctx.obj["tax_config"],
            start_date=start,
            end_date=end,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)


@click.command("report")
@click.option("--year", "tax_year", type=int, required=True, help="Tax year (e.g., 2025)")
@click.option("--start-date", help="Start date (defaults to January 1st of the tax year)")
@click.option("--end-date", help="End date (defaults to December 31st of the tax year)")
@click.option("--all-lines", is_flag=True, help="Also show lines with a zero total")
@click.pass_context
def show_report(ctx, tax_year: int, start_date: str | None, end_date: str | None, all_lines: bool):
    """Show EÜR totals per line.

    Examples:
        euer report --year 2025
        euer --small-business report --year 2025 --end-date 2025-06-30
    """
    report = _build_report(ctx, tax_year, start_date, end_date)

    click.echo(
        f"\nEÜR {report.tax_year} ({report.start_date.isoformat()} to {report.end_date.isoformat()})"
    )
    click.echo("=" * 80)
    for row in report.rows:
        if not all_lines and row.total == 0:
            continue
        label = row.label if len(row.label) <= 55 else row.label[:52] + "..."
        kennziffer = row.kennziffer or ""
        if row.kind == LineKind.COMPUTED:
            click.echo("-" * 80)
        click.echo(f"{kennziffer:<6} {label:<55} {format_de(row.total):>15}")
    click.echo("=" * 80)
    click.echo(f"{'Income':<62} {format_de(report.summary.income_total):>15}")
    click.echo(f"{'Expense':<62} {format_de(report.summary.expense_total):>15}")
    click.echo(f"{'Surplus':<62} {format_de(report.summary.surplus):>15}")

    if report.unclassified_count:
        click.echo(f"\n{report.unclassified_count} item(s) not classified.")
    for warning in report.warnings:
        click.echo(f"Warning: {warning}", err=True)


@click.command("export")
@click.option("--year", "tax_year", type=int, required=True, help="Tax year (e.g., 2025)")
@click.option("--start-date", help="Start date (defaults to January 1st of the tax year)")
@click.option("--end-date", help="End date (defaults to December 31st of the tax year)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file (default: stdout)")
@click.pass_context
def export_report(ctx, tax_year: int, start_date: str | None, end_date: str | None, output: str | None):
    """Export exportable EÜR lines as semicolon-separated text."""
    report = _build_report(ctx, tax_year, start_date, end_date)
    content = build_csv(report)

    if output is None:
        click.echo(content)
        return

    Path(output).write_text(content, encoding="utf-8")
    click.echo(f"Exported {tax_year} to {output}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(show_report)
    cli.add_command(export_report)
