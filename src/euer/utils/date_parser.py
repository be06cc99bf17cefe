"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports ISO dates ("2025-01-15"), German dates ("15.01.2025"), other
    formats dateutil understands, and the relative words "today",
    "yesterday" and "tomorrow".

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "heute": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    # Dotted dates are day-first in German bank exports
    dayfirst = "." in date_str
    try:
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def tax_year_range(
    tax_year: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> tuple[date, date]:
    """Resolve a reporting range, defaulting to the full calendar year.

    Args:
        tax_year: Tax year the range belongs to
        start_date: Optional explicit start
        end_date: Optional explicit end

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If the resolved start lies after the resolved end
    """
    start = start_date if start_date is not None else date(tax_year, 1, 1)
    end = end_date if end_date is not None else date(tax_year, 12, 31)
    if start > end:
        raise ValueError(f"Start date {start.isoformat()} is after end date {end.isoformat()}")
    return start, end
