"""CSV mapping domain service."""

from typing import Any, Optional, Sequence

from fintrack.database.base import Database
from fintrack.domain.csv_row_parser import CSVRowParser
from fintrack.domain.entities import (
    REQUIRED_COLUMN_ROLES,
    OPTIONAL_COLUMN_ROLES,
    AmountFormat,
    CSVMapping as CSVMappingEntity,
    ParseError,
    TransactionDraft,
)
from fintrack.domain.errors import (
    NotFoundError,
    ValidationError,
    credit_card_not_found,
    mapping_not_found,
)

# Seed data for the institutions supported out of the box. The Nubank mapping
# is also the global fallback used when a card has no mapping of its own.
DEFAULT_MAPPINGS: list[dict[str, Any]] = [
    {
        "name": "Nubank Padrão",
        "institution": "Nubank",
        "column_map": {"date": 0, "description": 1, "amount": 2},
        "date_formats": ["Y-m-d"],
        "amount_format": AmountFormat(
            decimal_separator=".",
            negative_values_are_income=True,
        ),
        "delimiter": ",",
        "has_header": True,
    },
    {
        "name": "Inter Padrão",
        "institution": "Inter",
        "column_map": {"date": 0, "description": 1, "category": 2, "type": 3, "amount": 4},
        "date_formats": ["d/m/Y"],
        "amount_format": AmountFormat(
            currency_symbol="R$",
            decimal_separator=",",
            thousands_separator=".",
        ),
        "delimiter": ",",
        "has_header": True,
    },
]


def validate_column_map(column_map: dict[str, Any]) -> dict[str, int]:
    """Validate a role → column index map and return it with int indices.

    Raises:
        ValidationError: If a required role is missing, a role is unknown, an
            index is negative or not an integer, or required roles share a column
    """
    known_roles = set(REQUIRED_COLUMN_ROLES) | set(OPTIONAL_COLUMN_ROLES)
    unknown = set(column_map) - known_roles
    if unknown:
        raise ValidationError(
            f"Invalid column roles: {', '.join(sorted(unknown))}. "
            f"Must be one of: {', '.join(sorted(known_roles))}"
        )

    missing = [role for role in REQUIRED_COLUMN_ROLES if role not in column_map]
    if missing:
        raise ValidationError(f"Column mapping is missing required roles: {', '.join(missing)}")

    validated: dict[str, int] = {}
    for role, index in column_map.items():
        if isinstance(index, bool) or not isinstance(index, int):
            raise ValidationError(f"Column index for '{role}' must be an integer, got {index!r}")
        if index < 0:
            raise ValidationError(f"Column index for '{role}' must be non-negative, got {index}")
        validated[role] = index

    required_indices = [validated[role] for role in REQUIRED_COLUMN_ROLES]
    if len(set(required_indices)) != len(required_indices):
        raise ValidationError("Columns for date, description and amount must be distinct")

    return validated


def _validate_date_formats(date_formats: Sequence[str]) -> list[str]:
    patterns = [p for p in date_formats if p and p.strip()]
    if not patterns:
        raise ValidationError("At least one date format is required")
    return list(patterns)


def _validate_delimiter(delimiter: str) -> str:
    if len(delimiter) != 1:
        raise ValidationError(f"Delimiter must be a single character, got '{delimiter}'")
    return delimiter


class CSVMappingService:
    """Service for managing CSV mappings."""

    def __init__(self, db: Database):
        """Initialize CSV mapping service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_mapping(
        self,
        name: str,
        institution: str,
        column_map: dict[str, Any],
        date_formats: Sequence[str],
        amount_format: Optional[AmountFormat] = None,
        delimiter: str = ",",
        has_header: bool = True,
        credit_card_id: Optional[int] = None,
    ) -> int:
        """Create a new CSV mapping.

        Args:
            name: Mapping name (e.g., "Nubank Padrão")
            institution: Institution whose exports this mapping reads
            column_map: Role → zero-based column index
            date_formats: Accepted date patterns, tried in order
            amount_format: Currency/separator/sign conventions
            delimiter: Single-character field delimiter
            has_header: Whether the first line is a header
            credit_card_id: Optional card this mapping is bound to

        Returns:
            Mapping ID

        Raises:
            ValidationError: If any of the parsing options is invalid
            NotFoundError: If the credit card doesn't exist
        """
        if not name.strip():
            raise ValidationError("Mapping name must not be empty")
        if not institution.strip():
            raise ValidationError("Mapping institution must not be empty")

        validated_map = validate_column_map(column_map)
        patterns = _validate_date_formats(date_formats)
        _validate_delimiter(delimiter)

        if credit_card_id is not None and self.db.get_credit_card(credit_card_id) is None:
            raise NotFoundError(credit_card_not_found(credit_card_id))

        return self.db.create_csv_mapping(
            name=name.strip(),
            institution=institution.strip(),
            column_mapping=validated_map,
            date_formats=patterns,
            amount_format=(amount_format or AmountFormat()).to_dict(),
            delimiter=delimiter,
            has_header=has_header,
            credit_card_id=credit_card_id,
        )

    def get_mapping(self, mapping_id: int) -> Optional[CSVMappingEntity]:
        """Get CSV mapping by ID.

        Returns:
            Mapping entity or None if not found
        """
        return self.db.get_csv_mapping(mapping_id)

    def list_mappings(
        self,
        institution: Optional[str] = None,
        credit_card_id: Optional[int] = None,
        include_inactive: bool = False,
    ) -> list[CSVMappingEntity]:
        """List CSV mappings, active ones only unless asked otherwise."""
        return self.db.list_csv_mappings(
            institution=institution,
            credit_card_id=credit_card_id,
            active_only=not include_inactive,
        )

    def update_mapping(
        self,
        mapping_id: int,
        name: Optional[str] = None,
        column_map: Optional[dict[str, Any]] = None,
        date_formats: Optional[Sequence[str]] = None,
        amount_format: Optional[AmountFormat] = None,
        delimiter: Optional[str] = None,
        has_header: Optional[bool] = None,
    ) -> None:
        """Update the fields that are provided.

        Raises:
            NotFoundError: If the mapping doesn't exist
            ValidationError: If a new value is invalid
        """
        if self.db.get_csv_mapping(mapping_id) is None:
            raise NotFoundError(mapping_not_found(mapping_id))

        fields: dict[str, Any] = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Mapping name must not be empty")
            fields["name"] = name.strip()
        if column_map is not None:
            fields["column_mapping"] = validate_column_map(column_map)
        if date_formats is not None:
            fields["date_format"] = _validate_date_formats(date_formats)
        if amount_format is not None:
            fields["amount_format"] = amount_format.to_dict()
        if delimiter is not None:
            fields["delimiter"] = _validate_delimiter(delimiter)
        if has_header is not None:
            fields["has_header"] = has_header

        if fields:
            self.db.update_csv_mapping(mapping_id, **fields)

    def set_active(self, mapping_id: int, is_active: bool) -> None:
        """Activate or deactivate a mapping.

        Mappings are deactivated rather than deleted because imported
        transactions reference them through their metadata.

        Raises:
            NotFoundError: If the mapping doesn't exist
        """
        if self.db.get_csv_mapping(mapping_id) is None:
            raise NotFoundError(mapping_not_found(mapping_id))
        self.db.update_csv_mapping(mapping_id, is_active=is_active)

    def preview_row(self, mapping_id: int, sample_row: list[str]) -> TransactionDraft | ParseError:
        """Parse a sample row with a stored mapping without persisting anything.

        Raises:
            NotFoundError: If the mapping doesn't exist
        """
        mapping = self.db.get_csv_mapping(mapping_id)
        if mapping is None:
            raise NotFoundError(mapping_not_found(mapping_id))
        return CSVRowParser().parse(sample_row, mapping, user_id=0, credit_card_id=mapping.credit_card_id)

    def seed_default_mappings(self) -> list[str]:
        """Create the built-in institution mappings that don't exist yet.

        Returns:
            Names of the mappings that were created
        """
        created = []
        for defaults in DEFAULT_MAPPINGS:
            existing = self.db.list_csv_mappings(institution=defaults["institution"], active_only=False)
            if any(m.name == defaults["name"] for m in existing):
                continue
            self.create_mapping(**defaults)
            created.append(defaults["name"])
        return created
