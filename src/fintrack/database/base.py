"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from fintrack.domain.entities import (
    Category,
    CreditCard,
    CSVMapping,
    Transaction,
    TransactionDraft,
)


class Database(ABC):
    """Abstract database interface for fintrack."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Credit card operations
    @abstractmethod
    def create_credit_card(
        self,
        user_id: int,
        name: str,
        institution: str,
        brand: Optional[str] = None,
        last_digits: Optional[str] = None,
    ) -> int:
        """Create a credit card. Returns credit card ID."""
        pass

    @abstractmethod
    def get_credit_card(self, credit_card_id: int) -> Optional[CreditCard]:
        """Get credit card by ID."""
        pass

    @abstractmethod
    def list_credit_cards(
        self, user_id: Optional[int] = None, active_only: bool = False
    ) -> list[CreditCard]:
        """List credit cards, optionally filtered by user."""
        pass

    @abstractmethod
    def set_credit_card_active(self, credit_card_id: int, is_active: bool) -> None:
        """Activate or deactivate a credit card."""
        pass

    # CSV mapping operations
    @abstractmethod
    def create_csv_mapping(
        self,
        name: str,
        institution: str,
        column_mapping: dict[str, int],
        date_formats: list[str],
        amount_format: dict[str, Any],
        delimiter: str = ",",
        has_header: bool = True,
        credit_card_id: Optional[int] = None,
    ) -> int:
        """Create a CSV mapping. Returns mapping ID."""
        pass

    @abstractmethod
    def get_csv_mapping(self, mapping_id: int) -> Optional[CSVMapping]:
        """Get CSV mapping by ID."""
        pass

    @abstractmethod
    def list_csv_mappings(
        self,
        institution: Optional[str] = None,
        credit_card_id: Optional[int] = None,
        active_only: bool = True,
    ) -> list[CSVMapping]:
        """List CSV mappings with optional filters."""
        pass

    @abstractmethod
    def get_active_mapping_for_card(self, credit_card_id: int) -> Optional[CSVMapping]:
        """Get the active mapping bound to a credit card (lowest ID first)."""
        pass

    @abstractmethod
    def get_active_mapping_for_institution(self, institution: str) -> Optional[CSVMapping]:
        """Get the active mapping for an institution (lowest ID first)."""
        pass

    @abstractmethod
    def update_csv_mapping(self, mapping_id: int, **fields: Any) -> None:
        """Update CSV mapping columns given as keyword arguments."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        name: str,
        description: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        is_default: bool = False,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by exact name."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List all categories ordered by name."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(self, draft: TransactionDraft) -> Transaction:
        """Persist a parsed draft and return the stored transaction."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def transaction_exists(
        self, user_id: int, transaction_date: date, description: str, amount: Decimal
    ) -> bool:
        """Check for a transaction with exactly these four field values."""
        pass

    @abstractmethod
    def count_matching_transactions(
        self, user_id: int, transaction_date: date, description: str, amount: Decimal
    ) -> int:
        """Count transactions with exactly these four field values."""
        pass

    @abstractmethod
    def update_transaction_category(
        self,
        transaction_id: int,
        category_id: Optional[int],
        is_categorized_by_ai: bool,
        ai_confidence: Optional[float],
    ) -> None:
        """Update transaction category, AI flag and confidence together."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        uncategorized: bool = False,
    ) -> list[Transaction]:
        """List transactions with optional filters.

        Args:
            user_id: Optional owner filter
            start_date: Optional start date filter
            end_date: Optional end date filter
            category_id: Optional category ID filter
            uncategorized: If True, only return transactions without a category
        """
        pass

    # Categorization cache operations
    @abstractmethod
    def get_cache_entry(self, key: str) -> Optional[tuple[dict[str, Any], datetime]]:
        """Get a cached value and its expiry (timezone-aware UTC)."""
        pass

    @abstractmethod
    def put_cache_entry(self, key: str, value: dict[str, Any], expires_at: datetime) -> None:
        """Insert or replace a cached value."""
        pass

    @abstractmethod
    def delete_cache_entry(self, key: str) -> None:
        """Remove a cached value if present."""
        pass
