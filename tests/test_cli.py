"""Tests for CLI commands."""

import click
import pytest
from datetime import date

from euer.cli.date_filters import resolve_cli_date_range
from euer.cli.main import cli


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def _add_hosting(cli_runner, temp_db):
    return _invoke(
        cli_runner,
        temp_db,
        "transaction",
        "add",
        "--date",
        "01.03.2025",
        "--amount",
        "119,00",
        "--type",
        "expense",
        "--counterparty",
        "Hetzner Online",
        "--purpose",
        "Hosting Maerz",
    )


def test_catalog_show(cli_runner, temp_db):
    """Test listing the shipped catalog."""
    result = _invoke(cli_runner, temp_db, "catalog", "show", "--year", "2025")

    assert result.exit_code == 0
    assert "E2025_KZ112" in result.output
    assert "BMF-2025-2025-08-29" in result.output
    assert "(not exported)" in result.output


def test_catalog_validate(cli_runner, temp_db):
    """Test validating catalogs."""
    result = _invoke(cli_runner, temp_db, "catalog", "validate", "--year", "2025")
    assert result.exit_code == 0
    assert "is valid" in result.output

    result = _invoke(cli_runner, temp_db, "catalog", "validate", "--year", "1999")
    assert result.exit_code == 0
    assert "No EÜR catalog for 1999" in result.output


def test_transaction_add_and_delete(cli_runner, temp_db):
    """Test adding and deleting a transaction."""
    result = _add_hosting(cli_runner, temp_db)
    assert result.exit_code == 0
    assert "Created transaction 1" in result.output

    result = _invoke(cli_runner, temp_db, "transaction", "delete", "1")
    assert result.exit_code == 0
    assert "Deleted transaction 1" in result.output

    result = _invoke(cli_runner, temp_db, "items", "--year", "2025")
    assert "No items found." in result.output


def test_transaction_add_invalid_amount(cli_runner, temp_db):
    """Test amount validation."""
    result = _invoke(
        cli_runner, temp_db, "transaction", "add",
        "--date", "2025-03-01", "--amount", "abc", "--type", "expense",
    )

    assert result.exit_code == 1
    assert "Invalid amount format" in result.output


def test_transaction_delete_missing(cli_runner, temp_db):
    """Test that deleting an unknown transaction fails."""
    result = _invoke(cli_runner, temp_db, "transaction", "delete", "99")

    assert result.exit_code == 1
    assert "Error: Transaction 99 not found" in result.output


def test_invoice_add_and_pay(cli_runner, temp_db):
    """Test invoices and payments show up as items."""
    result = _invoke(cli_runner, temp_db, "invoice", "add", "2025-001", "ACME GmbH", "--date", "2025-02-01")
    assert result.exit_code == 0
    assert "Created invoice 2025-001 (ID: 1)" in result.output

    result = _invoke(cli_runner, temp_db, "invoice", "pay", "1", "--date", "2025-02-20", "--amount", "1190")
    assert result.exit_code == 0
    assert "Recorded payment" in result.output

    result = _invoke(cli_runner, temp_db, "items", "--year", "2025", "--source", "invoice")
    assert result.exit_code == 0
    assert "invoice:1" in result.output
    assert "ACME GmbH" in result.output

    result = _invoke(cli_runner, temp_db, "invoice", "add", "2025-001", "Other")
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_classify_report_and_export(cli_runner, temp_db, tmp_path):
    """Test the end-to-end workflow from transaction to export."""
    assert _add_hosting(cli_runner, temp_db).exit_code == 0

    result = _invoke(cli_runner, temp_db, "items", "--year", "2025", "--status", "unclassified", "-v")
    assert result.exit_code == 0
    assert "transaction:1" in result.output
    assert "E2025_KZ280" in result.output
    assert "Telekommunikation erkannt" in result.output

    result = _invoke(
        cli_runner, temp_db, "classify", "transaction", "E2025_KZ280", "1",
        "--year", "2025", "--vat-mode", "default",
    )
    assert result.exit_code == 0
    assert "Classified 1 transaction item(s) as E2025_KZ280" in result.output

    result = _invoke(cli_runner, temp_db, "items", "--year", "2025", "--status", "unclassified")
    assert "No items found." in result.output

    result = _invoke(cli_runner, temp_db, "report", "--year", "2025")
    assert result.exit_code == 0
    assert "100,00" in result.output
    assert "-100,00" in result.output

    result = _invoke(cli_runner, temp_db, "--small-business", "report", "--year", "2025")
    assert result.exit_code == 0
    assert "119,00" in result.output

    output_file = tmp_path / "euer.csv"
    result = _invoke(cli_runner, temp_db, "export", "--year", "2025", "--output", str(output_file))
    assert result.exit_code == 0

    content = output_file.read_text(encoding="utf-8")
    lines = content.split("\n")
    assert lines[0] == "\ufeffKennziffer;Bezeichnung;Betrag"
    assert any(line.startswith("280;") and line.endswith(";100,00") for line in lines)
    assert any(line.startswith("199;") and line.endswith(";100,00") for line in lines)
    assert not any("E2025_SUB" in line for line in lines)


def test_exclude(cli_runner, temp_db):
    """Test excluding items."""
    assert _add_hosting(cli_runner, temp_db).exit_code == 0

    result = _invoke(cli_runner, temp_db, "exclude", "transaction", "1", "--year", "2025", "--note", "privat")
    assert result.exit_code == 0
    assert "Excluded 1 transaction item(s)" in result.output

    result = _invoke(cli_runner, temp_db, "items", "--year", "2025", "--status", "excluded")
    assert "transaction:1" in result.output
    assert "excluded" in result.output


def test_classify_invalid_source_type(cli_runner, temp_db):
    """Test that the source type is validated."""
    result = _invoke(cli_runner, temp_db, "classify", "receipt", "E2025_KZ280", "1", "--year", "2025")

    assert result.exit_code == 2


def test_rule_commands(cli_runner, temp_db):
    """Test creating, listing, updating and deleting rules."""
    result = _invoke(
        cli_runner, temp_db, "rule", "add", "--year", "2025", "--field", "counterparty",
        "--value", "Hetzner", "--line", "E2025_KZ228", "--priority", "5",
    )
    assert result.exit_code == 0
    assert "Created rule 1" in result.output

    result = _invoke(cli_runner, temp_db, "rule", "list", "--year", "2025")
    assert "Hetzner" in result.output
    assert "E2025_KZ228" in result.output

    assert _add_hosting(cli_runner, temp_db).exit_code == 0
    result = _invoke(cli_runner, temp_db, "items", "--year", "2025", "-v")
    assert "Regel:" in result.output

    result = _invoke(cli_runner, temp_db, "rule", "update", "1", "--inactive")
    assert result.exit_code == 0
    assert "Updated rule 1" in result.output

    result = _invoke(cli_runner, temp_db, "rule", "list", "--year", "2025")
    assert " no" in result.output

    result = _invoke(cli_runner, temp_db, "rule", "delete", "1")
    assert result.exit_code == 0

    result = _invoke(cli_runner, temp_db, "rule", "delete", "1")
    assert result.exit_code == 1
    assert "Rule 1 not found" in result.output


def test_rule_update_missing(cli_runner, temp_db):
    """Test updating an unknown rule."""
    result = _invoke(cli_runner, temp_db, "rule", "update", "7", "--priority", "1")

    assert result.exit_code == 1
    assert "Rule 7 not found" in result.output


def test_invalid_vat_rate(cli_runner, temp_db):
    """Test that the global VAT rate option is validated."""
    result = _invoke(cli_runner, temp_db, "--vat-rate=-1", "report", "--year", "2025")

    assert result.exit_code == 1
    assert "Invalid VAT rate" in result.output


def test_report_invalid_date(cli_runner, temp_db):
    """Test date option validation."""
    result = _invoke(cli_runner, temp_db, "report", "--year", "2025", "--start-date", "garbage")

    assert result.exit_code == 1
    assert "Invalid start date" in result.output


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_date_range_defaults_to_tax_year():
    """Test default bounds."""
    assert resolve_cli_date_range(_ctx(), tax_year=2025, start_date=None, end_date=None) == (
        date(2025, 1, 1),
        date(2025, 12, 31),
    )


def test_resolve_cli_date_range_parses_dates():
    """Test explicit bounds."""
    start, end = resolve_cli_date_range(_ctx(), tax_year=2025, start_date="01.04.2025", end_date="2025-06-30")

    assert start == date(2025, 4, 1)
    assert end == date(2025, 6, 30)


def test_resolve_cli_date_range_rejects_inverted_range(capsys):
    """Test start after end."""
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(_ctx(), tax_year=2025, start_date="2025-07-01", end_date="2025-06-01")

    assert excinfo.value.exit_code == 1
    assert "after end date" in capsys.readouterr().err
