"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the JSON columns of CSV
mappings and transaction metadata.
"""

from decimal import Decimal

from fintrack.domain import entities as domain
from fintrack.database.models import (
    CreditCard as ORMCreditCard,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    CSVMapping as ORMCSVMapping,
)


def credit_card_to_domain(orm_card: ORMCreditCard) -> domain.CreditCard:
    """Convert SQLAlchemy CreditCard model to domain CreditCard entity."""
    return domain.CreditCard(
        id=orm_card.id,
        user_id=orm_card.user_id,
        name=orm_card.name,
        institution=orm_card.institution,
        brand=orm_card.brand,
        last_digits=orm_card.last_digits,
        is_active=bool(orm_card.is_active),
        created_at=orm_card.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        description=orm_category.description,
        color=orm_category.color,
        icon=orm_category.icon,
        is_default=bool(orm_category.is_default),
    )


def csv_mapping_to_domain(orm_mapping: ORMCSVMapping) -> domain.CSVMapping:
    """Convert SQLAlchemy CSVMapping model to domain CSVMapping entity."""
    return domain.CSVMapping(
        id=orm_mapping.id,
        name=orm_mapping.name,
        institution=orm_mapping.institution,
        credit_card_id=orm_mapping.credit_card_id,
        column_map={role: int(index) for role, index in (orm_mapping.column_mapping or {}).items()},
        date_formats=tuple(orm_mapping.date_format or ()),
        amount_format=domain.AmountFormat.from_dict(orm_mapping.amount_format),
        delimiter=orm_mapping.delimiter,
        has_header=bool(orm_mapping.has_header),
        is_active=bool(orm_mapping.is_active),
        created_at=orm_mapping.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    metadata = None
    if orm_transaction.metadata_json:
        metadata = domain.TransactionMetadata.from_dict(orm_transaction.metadata_json)

    return domain.Transaction(
        id=orm_transaction.id,
        user_id=orm_transaction.user_id,
        credit_card_id=orm_transaction.credit_card_id,
        date=orm_transaction.transaction_date,
        description=orm_transaction.description,
        establishment=orm_transaction.establishment,
        amount=Decimal(orm_transaction.amount),
        raw_description=orm_transaction.raw_description,
        category_id=orm_transaction.category_id,
        is_categorized_by_ai=bool(orm_transaction.is_categorized_by_ai),
        ai_confidence=orm_transaction.ai_confidence,
        metadata=metadata,
        created_at=orm_transaction.created_at,
    )


def draft_to_orm(draft: domain.TransactionDraft) -> ORMTransaction:
    """Build a SQLAlchemy Transaction model from a parsed draft."""
    return ORMTransaction(
        user_id=draft.user_id,
        credit_card_id=draft.credit_card_id,
        transaction_date=draft.date,
        description=draft.description,
        establishment=draft.establishment,
        amount=draft.amount,
        raw_description=draft.raw_description,
        is_categorized_by_ai=False,
        metadata_json=draft.metadata.to_dict(),
    )
