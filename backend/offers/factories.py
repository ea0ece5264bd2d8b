from .models import Offer
from .strategies import FlatOfferStrategy, OfferStrategy, PercentageOfferStrategy


class OfferStrategyFactory:
    """
    Factory for creating a pricing strategy based on the offer's discount type.
    """

    _strategies = {
        Offer.DiscountType.PERCENTAGE: PercentageOfferStrategy,
        Offer.DiscountType.FLAT: FlatOfferStrategy,
    }

    @staticmethod
    def get_strategy(offer: Offer) -> OfferStrategy:
        strategy_class = OfferStrategyFactory._strategies.get(offer.discount_type)

        if strategy_class:
            return strategy_class()

        raise NotImplementedError(
            f"No strategy implemented for discount type '{offer.discount_type}'"
        )
