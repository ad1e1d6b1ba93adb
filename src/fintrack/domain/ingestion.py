"""CSV ingestion domain service."""

import csv
import io
from pathlib import Path
from typing import Optional

from fintrack.config import DEFAULT_ACCEPTANCE_THRESHOLD
from fintrack.database.base import Database
from fintrack.domain.categorization import CategorizationEngine, CategoryCatalog
from fintrack.domain.csv_row_parser import CSVRowParser
from fintrack.domain.duplicates import DuplicateDetector
from fintrack.domain.entities import IngestionReport, ParseError
from fintrack.domain.mapping_resolver import MappingResolver
from fintrack.domain.transaction import TransactionService
from fintrack.logging_setup import get_logger

logger = get_logger("fintrack.ingestion")


def _read_statement(csv_path: Path) -> str:
    """Return the file contents, falling back to cp1252 for non UTF-8 exports."""
    data = csv_path.read_bytes()
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning("%s is not valid UTF-8, reading it as cp1252", csv_path.name)
        return data.decode("cp1252", errors="replace")


class IngestionService:
    """Service for importing statement CSV files."""

    def __init__(
        self,
        db: Database,
        engine: Optional[CategorizationEngine] = None,
        parser: Optional[CSVRowParser] = None,
        resolver: Optional[MappingResolver] = None,
    ):
        """Initialize ingestion service.

        Args:
            db: Database instance
            engine: Categorization engine. Defaults to one without an
                external classifier.
            parser: Row parser, injectable for a fixed clock
            resolver: Mapping resolver
        """
        self.db = db
        self.engine = engine if engine is not None else CategorizationEngine(db)
        self.parser = parser if parser is not None else CSVRowParser()
        self.resolver = resolver if resolver is not None else MappingResolver(db)
        self.transaction_service = TransactionService(db)

    def ingest(
        self,
        file_path: str,
        user_id: int,
        credit_card_id: Optional[int] = None,
        *,
        acceptance_threshold: float = DEFAULT_ACCEPTANCE_THRESHOLD,
        delete_after: bool = False,
    ) -> IngestionReport:
        """Import transactions from a CSV file.

        Rows are handled one by one: a bad row is reported and skipped,
        duplicates are counted and skipped, everything else is stored and
        categorized. Stored rows are not rolled back when later rows fail.

        Args:
            file_path: Path to CSV file
            user_id: Owner of the imported transactions
            credit_card_id: Card the statement belongs to
            acceptance_threshold: Minimum confidence for storing a category
            delete_after: Remove the file when done, whatever the outcome

        Returns:
            Run report

        Raises:
            NoMappingFoundError: If no mapping applies (nothing is read)
            FileNotFoundError: If the CSV file doesn't exist
        """
        csv_path = Path(file_path)
        try:
            mapping = self.resolver.resolve(credit_card_id)

            if not csv_path.exists():
                raise FileNotFoundError(f"CSV file not found: {file_path}")

            report = IngestionReport(mapping_used=mapping.name)
            catalog = CategoryCatalog.load(self.db)
            detector = DuplicateDetector(self.db)

            reader = csv.reader(
                io.StringIO(_read_statement(csv_path), newline=""), delimiter=mapping.delimiter
            )
            header_pending = mapping.has_header

            while True:
                try:
                    row = next(reader)
                except StopIteration:
                    break
                except csv.Error as e:
                    logger.warning("Skipping malformed line %s: %s", reader.line_num, e)
                    report.errors.append(f"Row {reader.line_num}: {e}")
                    header_pending = False
                    continue

                if header_pending:
                    header_pending = False
                    continue
                if not any(field.strip() for field in row):
                    continue

                row_num = reader.line_num
                draft = self.parser.parse(row, mapping, user_id, credit_card_id, row_number=row_num)
                if isinstance(draft, ParseError):
                    logger.warning("Skipping row %s (mapping %s): %s", row_num, mapping.id, draft.message)
                    report.errors.append(str(draft))
                    continue

                if detector.is_duplicate(draft):
                    report.duplicates += 1
                    continue

                try:
                    transaction = self.db.create_transaction(draft)
                except Exception as e:
                    logger.warning("Could not store row %s: %s", row_num, e)
                    report.errors.append(f"Row {row_num}: {e}")
                    continue
                detector.record_inserted(draft)
                report.processed += 1

                try:
                    result = self.engine.categorize(transaction, catalog)
                    if self.transaction_service.apply_categorization(
                        transaction.id, result, acceptance_threshold
                    ):
                        report.categorized += 1
                except Exception as e:
                    logger.warning("Could not categorize transaction %s: %s", transaction.id, e)
                    report.errors.append(f"Row {row_num}: categorization failed: {e}")

            logger.info(
                "Imported %s: %d processed, %d duplicates, %d categorized, %d errors (mapping '%s')",
                csv_path.name,
                report.processed,
                report.duplicates,
                report.categorized,
                len(report.errors),
                report.mapping_used,
            )
            return report
        finally:
            if delete_after:
                csv_path.unlink(missing_ok=True)
