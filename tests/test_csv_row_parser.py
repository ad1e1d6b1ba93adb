"""Tests for the CSV row parser."""

from datetime import date
from decimal import Decimal

from fintrack.domain.entities import ParseError, ParseErrorKind, TransactionDraft


def test_parse_valid_row(row_parser, generic_mapping):
    """Test a well-formed row becomes a draft."""
    draft = row_parser.parse(["2025-01-10", "Uber Trip", "25.50"], generic_mapping, 1, None)

    assert isinstance(draft, TransactionDraft)
    assert draft.user_id == 1
    assert draft.credit_card_id is None
    assert draft.date == date(2025, 1, 10)
    assert draft.description == "Uber Trip"
    assert draft.establishment == "Uber Trip"
    assert draft.amount == Decimal("25.50")
    assert draft.raw_description == "Uber Trip"


def test_parse_records_metadata(row_parser, generic_mapping):
    """Test provenance metadata is filled from the row and mapping."""
    row = ["2025-01-10", "  Uber Trip ", "25.50"]
    draft = row_parser.parse(row, generic_mapping, 1, 7)

    assert draft.description == "Uber Trip"
    assert draft.raw_description == "  Uber Trip "
    assert draft.credit_card_id == 7
    assert draft.metadata.original_row == tuple(row)
    assert draft.metadata.original_date == "2025-01-10"
    assert draft.metadata.original_amount == "25.50"
    assert draft.metadata.csv_mapping_id == generic_mapping.id
    assert draft.metadata.institution == "Nubank"
    assert draft.metadata.imported_at == row_parser.clock()
    assert draft.metadata.category_from_csv is None
    assert draft.metadata.type_from_csv is None


def test_parse_is_deterministic(row_parser, generic_mapping):
    """Test parsing the same row twice gives equal drafts."""
    row = ["2025-01-10", "Uber Trip", "25.50"]
    assert row_parser.parse(row, generic_mapping, 1, None) == row_parser.parse(
        row, generic_mapping, 1, None
    )


def test_parse_optional_columns(row_parser, inter_mapping):
    """Test category and type hints are recorded when configured."""
    row = ["15/01/2025", "SUPERMERCADO EXTRA - 1/3", "SUPERMERCADO", "Compra à vista", "R$ 1.234,56"]
    draft = row_parser.parse(row, inter_mapping, 1, None)

    assert draft.amount == Decimal("1234.56")
    assert draft.date == date(2025, 1, 15)
    assert draft.establishment == "SUPERMERCADO EXTRA"
    assert draft.metadata.category_from_csv == "SUPERMERCADO"
    assert draft.metadata.type_from_csv == "Compra à vista"


def test_parse_blank_optional_column_is_none(row_parser, inter_mapping):
    """Test empty category/type cells are not recorded."""
    row = ["15/01/2025", "DROGASIL", "", " ", "R$ 45,90"]
    draft = row_parser.parse(row, inter_mapping, 1, None)

    assert draft.metadata.category_from_csv is None
    assert draft.metadata.type_from_csv is None


def test_parse_insufficient_columns(row_parser, generic_mapping):
    """Test short rows are rejected with expected vs actual counts."""
    error = row_parser.parse(["2025-01-10", "Uber Trip"], generic_mapping, 1, None, row_number=3)

    assert isinstance(error, ParseError)
    assert error.kind == ParseErrorKind.INSUFFICIENT_COLUMNS
    assert "expected 3" in error.message
    assert "got 2" in error.message
    assert str(error).startswith("Row 3: ")


def test_parse_invalid_date(row_parser, generic_mapping):
    """Test dates matching no pattern are rejected."""
    error = row_parser.parse(["10/01/2025", "Uber Trip", "25.50"], generic_mapping, 1, None)

    assert isinstance(error, ParseError)
    assert error.kind == ParseErrorKind.INVALID_DATE
    assert error.row_number is None
    assert str(error) == error.message


def test_parse_invalid_amount(row_parser, generic_mapping):
    """Test unparsable amounts are rejected."""
    error = row_parser.parse(["2025-01-10", "Uber Trip", "abc"], generic_mapping, 1, None)

    assert isinstance(error, ParseError)
    assert error.kind == ParseErrorKind.INVALID_AMOUNT


def test_parse_zero_amount(row_parser, generic_mapping):
    """Test zero amounts are rejected."""
    error = row_parser.parse(["2025-01-10", "Estorno", "0.00"], generic_mapping, 1, None)

    assert isinstance(error, ParseError)
    assert error.kind == ParseErrorKind.INVALID_AMOUNT
