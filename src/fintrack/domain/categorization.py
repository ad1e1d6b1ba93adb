"""Transaction categorization engine.

Tiers are tried in order until one gives an answer:

1. cached result of an earlier classifier call
2. external classifier
3. keyword table
4. the catch-all category

Classifier and cache failures never escape: they are logged and the next
tier is used.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Sequence

from fintrack.database.base import Database
from fintrack.domain.category import DEFAULT_CATEGORY_NAME
from fintrack.domain.classifier import Classifier
from fintrack.domain.entities import (
    CategorizationResult,
    CategorizationTier,
    Category,
    Transaction,
)
from fintrack.domain.errors import ClassifierError
from fintrack.domain.keyword_rules import match_keyword
from fintrack.domain.prompting import build_prompt
from fintrack.domain.result_cache import DEFAULT_TTL, DatabaseResultCache, ResultCache, cache_key
from fintrack.logging_setup import get_logger

logger = get_logger("fintrack.categorization")

KEYWORD_CONFIDENCE = 0.6
DEFAULT_CONFIDENCE = 0.3
DEFAULT_REASONING = "Classificação padrão - não identificado"


@dataclass(frozen=True)
class CategoryCatalog:
    """Snapshot of the categories available during one run."""

    categories: tuple[Category, ...]

    @classmethod
    def load(cls, db: Database) -> "CategoryCatalog":
        return cls(tuple(db.list_categories()))

    @classmethod
    def of(cls, categories: Sequence[Category]) -> "CategoryCatalog":
        return cls(tuple(categories))

    @property
    def names(self) -> frozenset[str]:
        return frozenset(c.name for c in self.categories)

    def by_name(self, name: str) -> Optional[Category]:
        for category in self.categories:
            if category.name == name:
                return category
        return None


class CategorizationEngine:
    """Assign a category and a confidence to transactions."""

    def __init__(
        self,
        db: Database,
        classifier: Optional[Classifier] = None,
        cache: Optional[ResultCache] = None,
        cache_ttl: timedelta = DEFAULT_TTL,
    ):
        """Initialize the engine.

        Args:
            db: Database instance, used to load the catalog when none is given
            classifier: External classifier. None skips the classifier tier.
            cache: Result cache, defaults to the database-backed cache
            cache_ttl: How long classifier results stay cached
        """
        self.db = db
        self.classifier = classifier
        self.cache = cache if cache is not None else DatabaseResultCache(db)
        self.cache_ttl = cache_ttl

    def categorize(
        self, transaction: Transaction, catalog: Optional[CategoryCatalog] = None
    ) -> CategorizationResult:
        """Categorize one transaction.

        Args:
            transaction: Stored transaction to categorize
            catalog: Categories to choose from. Loaded from the database when
                omitted; callers categorizing many transactions should load it
                once and pass it in.

        Returns:
            The result of the first tier that produced one
        """
        if catalog is None:
            catalog = CategoryCatalog.load(self.db)

        key = cache_key(transaction.description, transaction.establishment)

        result = self._from_cache(key, catalog)
        if result is not None:
            return result

        result = self._from_classifier(transaction, key, catalog)
        if result is not None:
            return result

        result = self._from_keywords(transaction, catalog)
        if result is not None:
            return result

        default = catalog.by_name(DEFAULT_CATEGORY_NAME)
        return CategorizationResult(
            category_id=default.id if default else None,
            category_name=default.name if default else None,
            confidence=DEFAULT_CONFIDENCE,
            reasoning=DEFAULT_REASONING,
            tier=CategorizationTier.DEFAULT,
        )

    def _from_cache(self, key: str, catalog: CategoryCatalog) -> Optional[CategorizationResult]:
        try:
            cached = self.cache.get(key)
        except Exception as e:
            logger.warning("Cache lookup failed for %s: %s", key, e)
            return None
        if cached is None:
            return None

        category = catalog.by_name(cached.get("category_name") or "")
        if category is None:
            logger.warning("Ignoring cached result %s: category no longer exists", key)
            return None

        return CategorizationResult(
            category_id=category.id,
            category_name=category.name,
            confidence=float(cached.get("confidence", 0.0)),
            reasoning=cached.get("reasoning") or "",
            tier=CategorizationTier.CACHE,
        )

    def _from_classifier(
        self, transaction: Transaction, key: str, catalog: CategoryCatalog
    ) -> Optional[CategorizationResult]:
        if self.classifier is None:
            return None

        try:
            reply = self.classifier.classify(build_prompt(transaction, catalog.categories))
        except ClassifierError as e:
            logger.warning("Classifier failed for transaction %s: %s", transaction.id, e)
            return None

        if reply is None:
            return None

        category = catalog.by_name(reply.category_name)
        if category is None:
            logger.warning(
                "Classifier suggested unknown category '%s' for transaction %s",
                reply.category_name,
                transaction.id,
            )
            return None

        result = CategorizationResult(
            category_id=category.id,
            category_name=category.name,
            confidence=reply.confidence,
            reasoning=reply.reasoning,
            tier=CategorizationTier.EXTERNAL,
        )
        try:
            self.cache.put(
                key,
                {
                    "category_id": result.category_id,
                    "category_name": result.category_name,
                    "confidence": result.confidence,
                    "reasoning": result.reasoning,
                },
                self.cache_ttl,
            )
        except Exception as e:
            logger.warning("Could not cache result for transaction %s: %s", transaction.id, e)
        return result

    def _from_keywords(
        self, transaction: Transaction, catalog: CategoryCatalog
    ) -> Optional[CategorizationResult]:
        text = f"{transaction.description} {transaction.establishment or ''}"
        match = match_keyword(text, catalog.names)
        if match is None:
            return None

        category_name, keyword = match
        category = catalog.by_name(category_name)
        return CategorizationResult(
            category_id=category.id,
            category_name=category.name,
            confidence=KEYWORD_CONFIDENCE,
            reasoning=f"Palavra-chave detectada: {keyword}",
            tier=CategorizationTier.KEYWORD,
        )
