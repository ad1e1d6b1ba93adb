"""Merchant name extraction from raw statement descriptions.

Each institution registers an ordered list of strip rules that remove its
boilerplate (payment-method prefixes, installment or date suffixes). After the
institution cleanup, the merchant is the text before the first hyphen
separator or the first whitespace-digit run.
"""

import re
from typing import Iterable

_GENERIC_SPLIT_RE = re.compile(r"\s*-\s*|\s+\d")

ESTABLISHMENT_RULES: dict[str, list[re.Pattern[str]]] = {}


def register_establishment_rules(institution: str, patterns: Iterable[str]) -> None:
    """Register the strip rules applied to descriptions of ``institution``.

    Rules are case-insensitive regular expressions applied in order; every
    match is removed. Registering an institution again replaces its rules.
    """
    ESTABLISHMENT_RULES[institution.strip().lower()] = [
        re.compile(pattern, re.IGNORECASE) for pattern in patterns
    ]


register_establishment_rules(
    "nubank",
    [
        r"^(Compra no débito|Compra no crédito|PIX|TED)\s*-?\s*",
        r"\s*-\s*\d{2}/\d{2}$",
    ],
)
register_establishment_rules(
    "inter",
    [
        r"\s*-\s*\d+/\d+.*$",
    ],
)


def extract_establishment(description: str, institution: str | None) -> str:
    """Derive a clean merchant name from a statement description.

    Never raises. Unknown institutions skip the cleanup step; when nothing is
    left after the split, the cleaned description is returned whole.

    Args:
        description: Raw statement description
        institution: Institution name of the mapping in use

    Returns:
        Merchant name
    """
    cleaned = description or ""
    for rule in ESTABLISHMENT_RULES.get((institution or "").strip().lower(), []):
        cleaned = rule.sub("", cleaned)

    merchant = _GENERIC_SPLIT_RE.split(cleaned, maxsplit=1)[0].strip()
    return merchant or cleaned.strip()
