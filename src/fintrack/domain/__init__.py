"""Domain layer for fintrack.

Services are imported from their own modules (``fintrack.domain.ingestion``,
``fintrack.domain.categorization``, ...) so that the utilities and the
database layer can depend on ``fintrack.domain.entities`` and
``fintrack.domain.errors`` without import cycles.
"""
