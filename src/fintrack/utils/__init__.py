"""Utility functions for fintrack."""

from fintrack.utils.date_parser import parse_date, parse_date_with_formats
from fintrack.utils.amount_parser import normalize_amount
from fintrack.utils.establishment import extract_establishment, register_establishment_rules

__all__ = [
    "parse_date",
    "parse_date_with_formats",
    "normalize_amount",
    "extract_establishment",
    "register_establishment_rules",
]
