from decimal import Decimal
import logging

from django.conf import settings

from offers.pricing import resolve_price

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class OrderCalculationService:
    """Price snapshots and totals for a new order."""

    @staticmethod
    def get_convenience_fee(delivery_type: str) -> Decimal:
        """Room delivery carries the configured fee; takeaway is free."""
        from orders.models import Order

        if delivery_type == Order.DeliveryType.ROOM:
            return Decimal(settings.ORDER_CONVENIENCE_FEE).quantize(CENTS)
        return Decimal("0.00")

    @staticmethod
    def build_line_snapshots(requested_items, dishes, offers):
        """
        Freeze name, resolved unit price and emoji for every requested line.

        Args:
            requested_items: list of {"dish_id": int, "quantity": int}
            dishes: dict of dish id -> Dish, already checked for availability
            offers: active offers in stable order

        Returns:
            list of dicts ready to become OrderItem rows
        """
        lines = []
        for position, requested in enumerate(requested_items):
            dish = dishes[requested["dish_id"]]
            resolution = resolve_price(dish, offers)
            lines.append(
                {
                    "dish": dish,
                    "name": dish.name,
                    "unit_price": resolution.final_price,
                    "quantity": requested["quantity"],
                    "emoji": dish.emoji,
                    "position": position,
                }
            )
            if resolution.discounted:
                logger.debug(
                    f"Offer '{resolution.applied_offer_title}' priced {dish.name} "
                    f"at {resolution.final_price} (catalog {dish.price})"
                )
        return lines

    @staticmethod
    def calculate_total(lines, convenience_fee: Decimal) -> Decimal:
        subtotal = sum(
            (Decimal(line["unit_price"]) * line["quantity"] for line in lines),
            Decimal("0.00"),
        )
        return (subtotal + convenience_fee).quantize(CENTS)
