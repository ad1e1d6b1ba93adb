"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Iterable

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from fintrack.domain.errors import InvalidDateError

# Stored mappings use PHP/Carbon style patterns ("Y-m-d", "d/m/Y").
_PATTERN_TOKENS = {
    "d": "%d",
    "j": "%d",
    "m": "%m",
    "n": "%m",
    "Y": "%Y",
    "y": "%y",
    "H": "%H",
    "G": "%H",
    "i": "%M",
    "s": "%S",
    "M": "%b",
    "F": "%B",
    "D": "%a",
    "l": "%A",
}


def to_strptime_pattern(pattern: str) -> str:
    """Translate a mapping date pattern into a ``strptime`` pattern.

    Patterns that already contain ``%`` are returned unchanged. A backslash
    escapes the following character.
    """
    if "%" in pattern:
        return pattern

    result = []
    escaped = False
    for char in pattern:
        if escaped:
            result.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        else:
            result.append(_PATTERN_TOKENS.get(char, char))
    return "".join(result)


def parse_date_with_formats(date_str: str, patterns: Iterable[str]) -> date:
    """Parse a statement date trying each pattern in order.

    Args:
        date_str: Date string as read from the CSV
        patterns: Accepted patterns, first match wins

    Returns:
        Calendar date

    Raises:
        InvalidDateError: If no pattern matches
    """
    value = date_str.strip()
    for pattern in patterns:
        try:
            return datetime.strptime(value, to_strptime_pattern(pattern)).date()
        except ValueError:
            continue
    raise InvalidDateError(f"Invalid date format: '{value}'")


def parse_date(date_str: str) -> date:
    """Parse a free-form date string used in CLI filters.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and relative
    ones: "today", "yesterday", "last month", "this year", "last week", ...

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this week": today - timedelta(days=today.weekday()),
        "last week": today - timedelta(days=today.weekday() + 7),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
