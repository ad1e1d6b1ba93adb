"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from fintrack.domain.entities import AmountFormat
from fintrack.domain.errors import InvalidAmountError

_CENTS = Decimal("0.01")

# Longest symbols first so "R$" is not left behind as "R".
_DEFAULT_CURRENCY_RE = re.compile(r"R\$|US\$|\$|€|£")
_NON_NUMERIC_RE = re.compile(r"[^\d.\-]")


def _normalize_separators(amount_str: str, amount_format: AmountFormat) -> str:
    """Rewrite separators so that '.' is the only decimal point left."""
    decimal_sep = amount_format.decimal_separator
    thousands_sep = amount_format.thousands_separator

    if decimal_sep is None and thousands_sep is None:
        # Brazilian convention: "1.234,56" and "1234,56" both mean 1234.56
        if "," in amount_str:
            if "." in amount_str:
                amount_str = amount_str.replace(".", "")
            amount_str = amount_str.replace(",", ".")
        return amount_str

    if thousands_sep is None:
        thousands_sep = "." if decimal_sep == "," else ","
    amount_str = amount_str.replace(thousands_sep, "")
    if decimal_sep and decimal_sep != ".":
        amount_str = amount_str.replace(decimal_sep, ".")
    return amount_str


def normalize_amount(amount_str: str, amount_format: Optional[AmountFormat] = None) -> Decimal:
    """Parse a statement amount into a Decimal with two decimal places.

    Handles various formats:
    - "25.50", "-25.50"
    - "R$ 45,90", "US$ 10.00"
    - "1.234,56" (Brazilian) and "1,234.56" when the format says so
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string as read from the CSV
        amount_format: Separators, currency symbol and sign convention of the
            export. Defaults to the Brazilian convention with absolute values.

    Returns:
        Decimal amount. Negative only when the format treats negative values
        as income.

    Raises:
        InvalidAmountError: If the string is empty, cannot be parsed or is zero
    """
    amount_format = amount_format or AmountFormat()

    if not amount_str or not amount_str.strip():
        raise InvalidAmountError("Empty amount string")

    raw = amount_str.strip()

    is_negative = False
    if raw.startswith("(") and raw.endswith(")"):
        is_negative = True
        raw = raw[1:-1]

    if amount_format.currency_symbol:
        raw = raw.replace(amount_format.currency_symbol, "")
    else:
        raw = _DEFAULT_CURRENCY_RE.sub("", raw)

    raw = _normalize_separators(raw, amount_format)
    raw = _NON_NUMERIC_RE.sub("", raw)

    try:
        amount = Decimal(raw)
    except InvalidOperation:
        raise InvalidAmountError(f"Invalid amount: '{amount_str}'")

    if not amount.is_finite():
        raise InvalidAmountError(f"Invalid amount: '{amount_str}'")

    if is_negative:
        amount = -amount
    if not amount_format.negative_values_are_income:
        amount = abs(amount)

    amount = amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
    if amount == 0:
        raise InvalidAmountError(f"Invalid amount: '{amount_str}' is zero")
    return amount
