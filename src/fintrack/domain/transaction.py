"""Transaction domain service."""

from typing import Optional
from datetime import date

from fintrack.database.base import Database
from fintrack.domain.entities import (
    CategorizationResult,
    Transaction as TransactionEntity,
)
from fintrack.domain.errors import (
    NotFoundError,
    category_not_found,
    transaction_not_found,
)


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def update_category(self, transaction_id: int, category_name: Optional[str]) -> None:
        """Set a transaction's category by hand.

        A manual choice replaces any automatic categorization: the AI flag is
        cleared and the confidence removed.

        Args:
            transaction_id: Transaction ID
            category_name: Category name, or None to uncategorize

        Raises:
            NotFoundError: If transaction or category doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        category_id = None
        if category_name is not None:
            category = self.db.get_category_by_name(category_name)
            if category is None:
                raise NotFoundError(category_not_found(category_name))
            category_id = category.id

        self.db.update_transaction_category(
            transaction_id, category_id, is_categorized_by_ai=False, ai_confidence=None
        )

    def apply_categorization(
        self, transaction_id: int, result: CategorizationResult, threshold: float
    ) -> bool:
        """Persist an automatic categorization if it is good enough.

        Args:
            transaction_id: Transaction ID
            result: Engine result
            threshold: Minimum confidence to accept

        Returns:
            True if the category was stored
        """
        if result.category_id is None or result.confidence < threshold:
            return False

        self.db.update_transaction_category(
            transaction_id,
            result.category_id,
            is_categorized_by_ai=True,
            ai_confidence=result.confidence,
        )
        return True

    def list_transactions(
        self,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_name: Optional[str] = None,
        uncategorized: bool = False,
    ) -> list[TransactionEntity]:
        """List transactions with filters.

        Args:
            user_id: Optional owner filter
            start_date: Optional start date filter
            end_date: Optional end date filter
            category_name: Optional category name filter
            uncategorized: Only transactions without a category

        Returns:
            List of transaction entities
        """
        category_id = None
        if category_name is not None:
            category = self.db.get_category_by_name(category_name)
            if category is None:
                # Category doesn't exist, return empty list
                return []
            category_id = category.id

        return self.db.list_transactions(
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
            uncategorized=uncategorized,
        )
