"""Semicolon-delimited export of an EÜR report."""

from euer.domain.entities import EurReport
from euer.utils.money import format_de

BOM = "\ufeff"
DELIMITER = ";"
HEADER = ("Kennziffer", "Bezeichnung", "Betrag")


def escape_field(value: str) -> str:
    """Quote a field containing the delimiter, a quote or a newline."""
    if DELIMITER in value or '"' in value or "\n" in value:
        return '"' + value.replace('"', '""') + '"'
    return value


def build_csv(report: EurReport) -> str:
    """Build the export text for the exportable lines of a report.

    Amounts use a German decimal comma and the payload starts with a
    byte-order mark so spreadsheet tools detect UTF-8.
    """
    rows = [DELIMITER.join(HEADER)]
    for row in report.rows:
        if not row.exportable:
            continue
        rows.append(
            DELIMITER.join(
                [
                    escape_field(row.kennziffer or ""),
                    escape_field(row.label),
                    format_de(row.total),
                ]
            )
        )
    return BOM + "\n".join(rows)
