"""
Display-price resolution for a single dish against the live offers.

Pure computation: callers supply the offers, nothing here touches the
database. The result is what the menu shows and what an order line
snapshots at creation time.
"""
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from typing import Iterable, Optional

from django.utils import timezone

from .factories import OfferStrategyFactory
from .models import Offer

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PriceResolution:
    final_price: Decimal
    discounted: bool
    applied_offer_title: Optional[str] = None
    applied_offer_id: Optional[int] = None


def resolve_price(dish, active_offers: Iterable[Offer], now=None) -> PriceResolution:
    """
    Pick the single offer giving the lowest price for ``dish``.

    Offers never stack. Inactive or expired offers are skipped even when
    passed in. On a tie the first offer in iteration order wins, so callers
    pass offers in a stable order (OfferService.get_active_offers sorts by
    creation time). A winning price is floored to a whole currency unit;
    without a winner the catalog price is returned untouched.
    """
    now = now or timezone.now()
    catalog_price = Decimal(dish.price)

    best_price = catalog_price
    best_offer = None

    for offer in active_offers:
        if not offer.is_currently_active(now) or not offer.applies_to(dish):
            continue

        candidate = OfferStrategyFactory.get_strategy(offer).candidate_price(catalog_price, offer)
        if candidate < best_price:
            best_price = candidate
            best_offer = offer

    if best_offer is None:
        return PriceResolution(final_price=catalog_price.quantize(CENTS), discounted=False)

    final_price = best_price.to_integral_value(rounding=ROUND_FLOOR).quantize(CENTS)
    return PriceResolution(
        final_price=final_price,
        discounted=True,
        applied_offer_title=best_offer.title,
        applied_offer_id=best_offer.pk,
    )
