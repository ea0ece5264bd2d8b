from abc import ABC, abstractmethod
from decimal import Decimal

from .models import Offer

ZERO = Decimal("0.00")


class OfferStrategy(ABC):
    """The interface for an offer pricing strategy."""

    @abstractmethod
    def candidate_price(self, price: Decimal, offer: Offer) -> Decimal:
        """Price of a single unit after this offer alone is applied."""


class PercentageOfferStrategy(OfferStrategy):
    """Takes a percentage off the catalog price."""

    def candidate_price(self, price: Decimal, offer: Offer) -> Decimal:
        percentage = Decimal(offer.discount_value) / Decimal("100")
        return max(ZERO, price * (Decimal("1") - percentage))


class FlatOfferStrategy(OfferStrategy):
    """Subtracts a fixed amount, never going below zero."""

    def candidate_price(self, price: Decimal, offer: Offer) -> Decimal:
        return max(ZERO, price - Decimal(offer.discount_value))
