"""CLI helper building the categorization engine from the environment."""

import os

from fintrack.config import OPENAI_API_KEY_ENV, classifier_timeout, openai_model
from fintrack.database.base import Database
from fintrack.domain.categorization import CategorizationEngine
from fintrack.domain.classifier import OpenAIClassifier


def build_categorization_engine(db: Database) -> CategorizationEngine:
    """Create an engine whose classifier is configured from the environment.

    Without OPENAI_API_KEY the classifier is unavailable and categorization
    relies on the cache, the keyword table and the default category.
    """
    classifier = OpenAIClassifier(
        api_key=os.environ.get(OPENAI_API_KEY_ENV),
        model=openai_model(),
        timeout=classifier_timeout(),
    )
    return CategorizationEngine(db, classifier=classifier)
