"""Duplicate detection for imported transactions."""

from collections import Counter
from datetime import date
from decimal import Decimal

from fintrack.database.base import Database
from fintrack.domain.entities import TransactionDraft

_Key = tuple[int, date, str, Decimal]


class DuplicateDetector:
    """Decide whether a draft is already stored.

    A transaction is identified by (user, date, description, amount). One
    detector is used per ingestion run: identical rows inside the same file
    are all admitted, while anything that was stored before the run counts
    as a duplicate. Importing the same file twice therefore stores nothing
    the second time.

    The count and the later insert are separate statements, so two runs for
    the same user must not overlap; concurrent imports for one user are not
    supported.
    """

    def __init__(self, db: Database):
        self.db = db
        self._seen_in_run: Counter[_Key] = Counter()
        self._inserted_in_run: Counter[_Key] = Counter()

    def exists(self, user_id: int, transaction_date: date, description: str, amount: Decimal) -> bool:
        """Check for a stored transaction with exactly these values."""
        return self.db.transaction_exists(user_id, transaction_date, description, amount)

    def is_duplicate(self, draft: TransactionDraft) -> bool:
        """Check a draft against what was stored before this run.

        The k-th occurrence of a key within the run (0-based) is a duplicate
        when at least k+1 matching transactions existed before the run.
        """
        key = (draft.user_id, draft.date, draft.description, draft.amount)
        occurrence = self._seen_in_run[key]
        self._seen_in_run[key] += 1

        stored = self.db.count_matching_transactions(*key)
        stored_before_run = stored - self._inserted_in_run[key]
        return stored_before_run > occurrence

    def record_inserted(self, draft: TransactionDraft) -> None:
        """Note that a draft was stored during this run."""
        key = (draft.user_id, draft.date, draft.description, draft.amount)
        self._inserted_in_run[key] += 1
