"""Shared pytest fixtures for fintrack tests."""

import logging
import tempfile
import os
from datetime import UTC, datetime
from pathlib import Path
import pytest

from fintrack.database.factories import create_sqlite_database
from fintrack.domain.categorization import CategorizationEngine
from fintrack.domain.category import CategoryService
from fintrack.domain.credit_card import CreditCardService
from fintrack.domain.csv_mapping import CSVMappingService
from fintrack.domain.csv_row_parser import CSVRowParser
from fintrack.domain.entities import AmountFormat
from fintrack.domain.ingestion import IngestionService
from fintrack.domain.result_cache import InMemoryResultCache
from fintrack.domain.transaction import TransactionService

FIXED_NOW = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep tests independent from the developer's environment."""
    for name in (
        "OPENAI_API_KEY",
        "FINTRACK_DB_PATH",
        "FINTRACK_LOG_LEVEL",
        "FINTRACK_ACCEPTANCE_THRESHOLD",
        "FINTRACK_CLASSIFIER_TIMEOUT",
        "FINTRACK_OPENAI_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Drop handlers that CLI invocations attach to the package logger."""
    logger = logging.getLogger("fintrack")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def card_service(temp_db):
    """Create a CreditCardService with a temporary database."""
    return CreditCardService(temp_db)


@pytest.fixture
def mapping_service(temp_db):
    """Create a CSVMappingService with a temporary database."""
    return CSVMappingService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def sample_categories(category_service):
    """Seed the default categories and return their IDs by name."""
    category_service.seed_default_categories()
    return {c.name: c.id for c in category_service.list_categories()}


@pytest.fixture
def sample_card(card_service):
    """Create a sample Nubank card for user 1."""
    card_id = card_service.create_card(user_id=1, name="Roxinho", institution="Nubank")
    return card_service.get_card(card_id)


@pytest.fixture
def generic_mapping(mapping_service):
    """Global Nubank mapping: date, description, amount with ISO dates."""
    mapping_id = mapping_service.create_mapping(
        name="Nubank Padrão",
        institution="Nubank",
        column_map={"date": 0, "description": 1, "amount": 2},
        date_formats=["Y-m-d"],
        amount_format=AmountFormat(decimal_separator="."),
    )
    return mapping_service.get_mapping(mapping_id)


@pytest.fixture
def inter_mapping(mapping_service):
    """Global Inter mapping with Brazilian number and date formats."""
    mapping_id = mapping_service.create_mapping(
        name="Inter Padrão",
        institution="Inter",
        column_map={"date": 0, "description": 1, "category": 2, "type": 3, "amount": 4},
        date_formats=["d/m/Y"],
        amount_format=AmountFormat(
            currency_symbol="R$", decimal_separator=",", thousands_separator="."
        ),
        delimiter=";",
    )
    return mapping_service.get_mapping(mapping_id)


@pytest.fixture
def row_parser():
    """Row parser with a fixed import timestamp."""
    return CSVRowParser(clock=lambda: FIXED_NOW)


@pytest.fixture
def engine(temp_db):
    """Categorization engine without external classifier and an in-memory cache."""
    return CategorizationEngine(temp_db, classifier=None, cache=InMemoryResultCache())


@pytest.fixture
def ingestion_service(temp_db, engine, row_parser):
    """Create an IngestionService with a temporary database."""
    return IngestionService(temp_db, engine=engine, parser=row_parser)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
