"""Domain model entities for fintrack.

These are pure data classes representing business concepts, independent of
database schema. Storage adapters convert their own records into these
entities through the mapper functions in ``fintrack.database.mappers``.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

REQUIRED_COLUMN_ROLES = ("date", "description", "amount")
OPTIONAL_COLUMN_ROLES = ("category", "type")


@dataclass(frozen=True)
class CreditCard:
    """Credit card domain entity."""

    id: int
    user_id: int
    name: str
    institution: str
    brand: Optional[str]
    last_digits: Optional[str]
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    name: str
    description: Optional[str]
    color: Optional[str]
    icon: Optional[str]
    is_default: bool


@dataclass(frozen=True)
class AmountFormat:
    """How amounts are written in one institution's export."""

    currency_symbol: Optional[str] = None
    decimal_separator: Optional[str] = None
    thousands_separator: Optional[str] = None
    negative_values_are_income: bool = False

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "AmountFormat":
        data = data or {}
        return cls(
            currency_symbol=data.get("currency_symbol") or None,
            decimal_separator=data.get("decimal_separator") or None,
            thousands_separator=data.get("thousands_separator") or None,
            negative_values_are_income=bool(data.get("negative_values_are_income", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "currency_symbol": self.currency_symbol,
            "decimal_separator": self.decimal_separator,
            "thousands_separator": self.thousands_separator,
            "negative_values_are_income": self.negative_values_are_income,
        }


@dataclass(frozen=True)
class CSVMapping:
    """CSV mapping domain entity: the parsing recipe for one card or institution."""

    id: int
    name: str
    institution: str
    credit_card_id: Optional[int]
    column_map: dict[str, int]
    date_formats: tuple[str, ...]
    amount_format: AmountFormat
    delimiter: str
    has_header: bool
    is_active: bool
    created_at: datetime

    @property
    def required_column_count(self) -> int:
        """Minimum number of fields a row must have for this mapping."""
        return max(self.column_map.values()) + 1


@dataclass(frozen=True)
class TransactionMetadata:
    """Provenance recorded for every imported transaction."""

    original_row: tuple[str, ...]
    original_date: str
    original_amount: str
    csv_mapping_id: int
    institution: str
    imported_at: datetime
    category_from_csv: Optional[str] = None
    type_from_csv: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.extra)
        data.update(
            {
                "original_row": list(self.original_row),
                "original_date": self.original_date,
                "original_amount": self.original_amount,
                "csv_mapping_id": self.csv_mapping_id,
                "institution": self.institution,
                "imported_at": self.imported_at.isoformat(),
                "category_from_csv": self.category_from_csv,
                "type_from_csv": self.type_from_csv,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TransactionMetadata":
        known = {
            "original_row",
            "original_date",
            "original_amount",
            "csv_mapping_id",
            "institution",
            "imported_at",
            "category_from_csv",
            "type_from_csv",
        }
        return cls(
            original_row=tuple(data.get("original_row") or ()),
            original_date=data.get("original_date", ""),
            original_amount=data.get("original_amount", ""),
            csv_mapping_id=data.get("csv_mapping_id", 0),
            institution=data.get("institution", ""),
            imported_at=datetime.fromisoformat(data["imported_at"]),
            category_from_csv=data.get("category_from_csv"),
            type_from_csv=data.get("type_from_csv"),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass(frozen=True)
class TransactionDraft:
    """A parsed, not yet persisted transaction."""

    user_id: int
    credit_card_id: Optional[int]
    date: date
    description: str
    establishment: str
    amount: Decimal
    raw_description: str
    metadata: TransactionMetadata


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    user_id: int
    credit_card_id: Optional[int]
    date: date
    description: str
    establishment: Optional[str]
    amount: Decimal
    raw_description: Optional[str]
    category_id: Optional[int]
    is_categorized_by_ai: bool
    ai_confidence: Optional[float]
    metadata: Optional[TransactionMetadata]
    created_at: datetime


class CategorizationTier(str, Enum):
    """Which stage of the categorization chain produced a result."""

    CACHE = "cache"
    EXTERNAL = "external"
    KEYWORD = "keyword"
    DEFAULT = "default"


@dataclass(frozen=True)
class CategorizationResult:
    """Outcome of categorizing one transaction."""

    category_id: Optional[int]
    category_name: Optional[str]
    confidence: float
    reasoning: str
    tier: CategorizationTier


class ParseErrorKind(str, Enum):
    """Row-level failures reported during ingestion."""

    INSUFFICIENT_COLUMNS = "insufficient_columns"
    INVALID_DATE = "invalid_date"
    INVALID_AMOUNT = "invalid_amount"


@dataclass(frozen=True)
class ParseError:
    """A row that could not be turned into a draft."""

    kind: ParseErrorKind
    message: str
    row_number: Optional[int] = None

    def __str__(self) -> str:
        if self.row_number is None:
            return self.message
        return f"Row {self.row_number}: {self.message}"


@dataclass
class IngestionReport:
    """Totals of one ingestion run, returned to the caller and never persisted."""

    mapping_used: str
    processed: int = 0
    duplicates: int = 0
    categorized: int = 0
    errors: list[str] = field(default_factory=list)
    success: bool = True
