"""Turn one raw CSV record into a transaction draft."""

from datetime import UTC, datetime
from typing import Callable, Optional, Sequence

from fintrack.domain.entities import (
    CSVMapping,
    ParseError,
    ParseErrorKind,
    TransactionDraft,
    TransactionMetadata,
)
from fintrack.domain.errors import InvalidAmountError, InvalidDateError
from fintrack.utils.amount_parser import normalize_amount
from fintrack.utils.date_parser import parse_date_with_formats
from fintrack.utils.establishment import extract_establishment


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _optional_field(row: Sequence[str], index: Optional[int]) -> Optional[str]:
    if index is None or index >= len(row):
        return None
    value = row[index].strip()
    return value or None


class CSVRowParser:
    """Parse rows according to a mapping.

    Bad data never raises: it comes back as a ``ParseError`` value so the
    caller can report it and carry on with the next row.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        """Initialize the parser.

        Args:
            clock: Source of the ``imported_at`` timestamp
        """
        self.clock = clock

    def parse(
        self,
        row: Sequence[str],
        mapping: CSVMapping,
        user_id: int,
        credit_card_id: Optional[int],
        row_number: Optional[int] = None,
    ) -> TransactionDraft | ParseError:
        """Parse one row.

        Args:
            row: Fields of one CSV line
            mapping: Mapping describing the file layout
            user_id: Owner of the resulting transaction
            credit_card_id: Card the file belongs to
            row_number: Line number used in error messages

        Returns:
            A draft, or a ParseError describing why the row was rejected
        """
        expected = mapping.required_column_count
        if len(row) < expected:
            return ParseError(
                ParseErrorKind.INSUFFICIENT_COLUMNS,
                f"Insufficient columns (expected {expected}, got {len(row)})",
                row_number,
            )

        columns = mapping.column_map
        raw_date = row[columns["date"]]
        raw_description = row[columns["description"]]
        raw_amount = row[columns["amount"]]

        try:
            transaction_date = parse_date_with_formats(raw_date, mapping.date_formats)
        except InvalidDateError as e:
            return ParseError(ParseErrorKind.INVALID_DATE, str(e), row_number)

        try:
            amount = normalize_amount(raw_amount, mapping.amount_format)
        except InvalidAmountError as e:
            return ParseError(ParseErrorKind.INVALID_AMOUNT, str(e), row_number)

        description = raw_description.strip()
        metadata = TransactionMetadata(
            original_row=tuple(row),
            original_date=raw_date,
            original_amount=raw_amount,
            csv_mapping_id=mapping.id,
            institution=mapping.institution,
            imported_at=self.clock(),
            category_from_csv=_optional_field(row, columns.get("category")),
            type_from_csv=_optional_field(row, columns.get("type")),
        )

        return TransactionDraft(
            user_id=user_id,
            credit_card_id=credit_card_id,
            date=transaction_date,
            description=description,
            establishment=extract_establishment(description, mapping.institution),
            amount=amount,
            raw_description=raw_description,
            metadata=metadata,
        )
