"""Credit card domain service."""

from typing import Optional
from fintrack.database.base import Database
from fintrack.domain.entities import CreditCard as CreditCardEntity
from fintrack.domain.errors import NotFoundError, ValidationError, credit_card_not_found


class CreditCardService:
    """Service for managing credit cards."""

    def __init__(self, db: Database):
        """Initialize credit card service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_card(
        self,
        user_id: int,
        name: str,
        institution: str,
        brand: Optional[str] = None,
        last_digits: Optional[str] = None,
    ) -> int:
        """Create a new credit card.

        Args:
            user_id: Owner user ID
            name: Card display name
            institution: Issuing institution (e.g., "Nubank", "Inter")
            brand: Optional card brand (Visa, Mastercard, ...)
            last_digits: Optional last four digits

        Returns:
            Credit card ID

        Raises:
            ValidationError: If name/institution are blank or last digits malformed
        """
        if not name.strip():
            raise ValidationError("Credit card name must not be empty")
        if not institution.strip():
            raise ValidationError("Credit card institution must not be empty")
        if last_digits is not None and (len(last_digits) != 4 or not last_digits.isdigit()):
            raise ValidationError("Last digits must be exactly 4 digits")

        return self.db.create_credit_card(
            user_id=user_id,
            name=name.strip(),
            institution=institution.strip(),
            brand=brand,
            last_digits=last_digits,
        )

    def get_card(self, credit_card_id: int) -> Optional[CreditCardEntity]:
        """Get credit card by ID.

        Returns:
            Credit card entity or None if not found
        """
        return self.db.get_credit_card(credit_card_id)

    def list_cards(self, user_id: Optional[int] = None, active_only: bool = False) -> list[CreditCardEntity]:
        """List credit cards, optionally for a single user."""
        return self.db.list_credit_cards(user_id=user_id, active_only=active_only)

    def deactivate_card(self, credit_card_id: int) -> None:
        """Deactivate a credit card.

        Cards are never hard-deleted because imported transactions keep
        referencing them.

        Raises:
            NotFoundError: If the card doesn't exist
        """
        if self.db.get_credit_card(credit_card_id) is None:
            raise NotFoundError(credit_card_not_found(credit_card_id))
        self.db.set_credit_card_active(credit_card_id, False)
