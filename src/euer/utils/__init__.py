"""Utility functions for euer."""

from euer.utils.date_parser import parse_date, tax_year_range
from euer.utils.amount_parser import parse_amount
from euer.utils.money import round2, format_de

__all__ = ["parse_date", "tax_year_range", "parse_amount", "round2", "format_de"]
