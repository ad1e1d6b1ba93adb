"""Selection of the CSV mapping used by an ingestion run."""

from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.entities import CSVMapping
from fintrack.domain.errors import NoMappingFoundError, no_mapping_found
from fintrack.logging_setup import get_logger

logger = get_logger("fintrack.mapping_resolver")

# Institution whose mapping is used when nothing more specific applies.
DEFAULT_INSTITUTION = "Nubank"


class MappingResolver:
    """Resolve which mapping applies to a credit card."""

    def __init__(self, db: Database, default_institution: str = DEFAULT_INSTITUTION):
        self.db = db
        self.default_institution = default_institution

    def resolve(self, credit_card_id: Optional[int]) -> CSVMapping:
        """Return the active mapping for a card.

        Lookup order:
        1. active mapping bound to the card
        2. active mapping for the card's institution
        3. active mapping for the default institution

        Args:
            credit_card_id: Card the file belongs to, or None

        Returns:
            The mapping to parse the file with

        Raises:
            NoMappingFoundError: If no step yields an active mapping
        """
        if credit_card_id is not None:
            mapping = self.db.get_active_mapping_for_card(credit_card_id)
            if mapping is not None:
                logger.info("Using mapping %s bound to credit card %s", mapping.id, credit_card_id)
                return mapping

            card = self.db.get_credit_card(credit_card_id)
            if card is not None:
                mapping = self.db.get_active_mapping_for_institution(card.institution)
                if mapping is not None:
                    logger.info(
                        "Using mapping %s for institution %s (credit card %s)",
                        mapping.id,
                        card.institution,
                        credit_card_id,
                    )
                    return mapping

        mapping = self.db.get_active_mapping_for_institution(self.default_institution)
        if mapping is not None:
            logger.info("Using default mapping %s (%s)", mapping.id, self.default_institution)
            return mapping

        raise NoMappingFoundError(no_mapping_found(credit_card_id))
