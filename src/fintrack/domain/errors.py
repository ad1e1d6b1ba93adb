"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class NoMappingFoundError(NotFoundError):
    """No active CSV mapping applies to an ingestion run.

    This is the only fatal ingestion error: the run stops before any row is read.
    """


class InvalidAmountError(ValidationError):
    """Amount string is empty, unparsable or zero."""


class InvalidDateError(ValidationError):
    """Date string matches none of the accepted patterns."""


class ClassifierError(Exception):
    """Base class for external classifier failures.

    These never leave the categorization engine; it falls through to the
    keyword tier instead.
    """


class ClassifierUnavailableError(ClassifierError):
    """Classifier could not be reached or refused the request."""


class ClassifierTimeoutError(ClassifierError):
    """Classifier did not answer within the request timeout."""


class ClassifierMalformedReplyError(ClassifierError):
    """Classifier answered with something that is not the expected JSON reply."""


def credit_card_not_found(credit_card_id: int) -> str:
    """Return message for missing credit card."""
    return f"Credit card {credit_card_id} not found"


def mapping_not_found(mapping_id: int) -> str:
    """Return message for missing CSV mapping."""
    return f"CSV mapping {mapping_id} not found"


def category_not_found(category: int | str) -> str:
    """Return message for missing category by ID or name."""
    if isinstance(category, int):
        return f"Category {category} not found"
    return f"Category '{category}' not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def no_mapping_found(credit_card_id: int | None) -> str:
    """Return message when no mapping applies to an ingestion run."""
    if credit_card_id is None:
        return "No CSV mapping found: no default mapping is configured"
    return f"No CSV mapping found for credit card {credit_card_id}"
