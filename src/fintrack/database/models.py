"""SQLAlchemy models for fintrack database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Float,
    Boolean,
    JSON,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CreditCard(Base):
    """Credit card model."""

    __tablename__ = "credit_cards"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    institution = Column(String, nullable=False)
    brand = Column(String, nullable=True)
    last_digits = Column(String(4), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_credit_cards_user_active", "user_id", "is_active"),
        Index("ix_credit_cards_institution", "institution"),
    )

    # Relationships
    csv_mappings = relationship("CSVMapping", back_populates="credit_card")
    transactions = relationship("Transaction", back_populates="credit_card")


class CSVMapping(Base):
    """CSV mapping model: column roles and formats for one card or institution."""

    __tablename__ = "csv_mappings"

    id = Column(Integer, primary_key=True)
    credit_card_id = Column(Integer, ForeignKey("credit_cards.id"), nullable=True)
    name = Column(String, nullable=False)
    institution = Column(String, nullable=False)
    column_mapping = Column(JSON, nullable=False)
    date_format = Column(JSON, nullable=False)
    amount_format = Column(JSON, nullable=False)
    delimiter = Column(String(1), default=",", nullable=False)
    has_header = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_csv_mappings_card_active", "credit_card_id", "is_active"),
        Index("ix_csv_mappings_institution", "institution"),
    )

    # Relationships
    credit_card = relationship("CreditCard", back_populates="csv_mappings")


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    color = Column(String(7), nullable=True)
    icon = Column(String, nullable=True)
    is_default = Column(Boolean, default=False, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="category")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False)
    credit_card_id = Column(Integer, ForeignKey("credit_cards.id"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    transaction_date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    establishment = Column(String, nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    raw_description = Column(Text, nullable=True)
    is_categorized_by_ai = Column(Boolean, default=False, nullable=False)
    ai_confidence = Column(Float, nullable=True)
    # "metadata" is reserved on declarative classes
    metadata_json = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_transactions_user_date", "user_id", "transaction_date"),
        Index("ix_transactions_category", "category_id"),
        Index("ix_transactions_establishment", "establishment"),
    )

    # Relationships
    credit_card = relationship("CreditCard", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")


class CategorizationCacheEntry(Base):
    """Cached categorization result keyed by description/establishment hash."""

    __tablename__ = "categorization_cache"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=False)
    expires_at = Column(DateTime, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
