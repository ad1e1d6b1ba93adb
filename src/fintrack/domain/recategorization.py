"""Bulk re-categorization of stored transactions."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional

from fintrack.config import DEFAULT_ACCEPTANCE_THRESHOLD, DEFAULT_RECATEGORIZE_WORKERS
from fintrack.database.base import Database
from fintrack.domain.categorization import CategorizationEngine, CategoryCatalog
from fintrack.domain.entities import CategorizationResult, Transaction
from fintrack.domain.transaction import TransactionService
from fintrack.logging_setup import get_logger

logger = get_logger("fintrack.recategorization")


@dataclass
class RecategorizationReport:
    """Totals of one bulk re-categorization."""

    examined: int = 0
    categorized: int = 0
    errors: list[str] = field(default_factory=list)


def _is_manual(transaction: Transaction) -> bool:
    return transaction.category_id is not None and not transaction.is_categorized_by_ai


class RecategorizationService:
    """Run the categorization engine over many stored transactions.

    Engine calls run on a bounded thread pool since most of their time is
    spent waiting on the external classifier. Results are written back from
    the calling thread once the pool is done.
    """

    def __init__(self, db: Database, engine: CategorizationEngine):
        self.db = db
        self.engine = engine
        self.transaction_service = TransactionService(db)

    def recategorize(
        self,
        user_id: int,
        include_categorized: bool = False,
        max_workers: int = DEFAULT_RECATEGORIZE_WORKERS,
        acceptance_threshold: float = DEFAULT_ACCEPTANCE_THRESHOLD,
    ) -> RecategorizationReport:
        """Categorize a user's transactions again.

        Args:
            user_id: Owner whose transactions are processed
            include_categorized: Also redo automatically categorized
                transactions. Manual choices are never overwritten.
            max_workers: Maximum number of concurrent engine calls
            acceptance_threshold: Minimum confidence for storing a category

        Returns:
            Run report

        Raises:
            ValueError: If max_workers is not a positive integer
        """
        if max_workers < 1:
            raise ValueError("max_workers must be a positive integer")

        if include_categorized:
            transactions = [
                t for t in self.db.list_transactions(user_id=user_id) if not _is_manual(t)
            ]
        else:
            transactions = self.db.list_transactions(user_id=user_id, uncategorized=True)

        report = RecategorizationReport(examined=len(transactions))
        if not transactions:
            return report

        catalog = CategoryCatalog.load(self.db)

        def _categorize(transaction: Transaction) -> tuple[Optional[CategorizationResult], Optional[str]]:
            try:
                return self.engine.categorize(transaction, catalog), None
            except Exception as e:
                return None, str(e)

        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(_categorize, transactions))

        for transaction, (result, error) in zip(transactions, outcomes):
            if error is not None:
                logger.warning("Could not categorize transaction %s: %s", transaction.id, error)
                report.errors.append(f"Transaction {transaction.id}: {error}")
                continue
            if self.transaction_service.apply_categorization(transaction.id, result, acceptance_threshold):
                report.categorized += 1

        logger.info(
            "Re-categorized %d of %d transactions for user %s",
            report.categorized,
            report.examined,
            user_id,
        )
        return report
