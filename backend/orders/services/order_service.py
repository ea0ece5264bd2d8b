import logging
from collections.abc import Mapping

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from activity.models import Activity
from activity.services import ActivityService
from core_backend.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from menu.services import DishService
from offers.services import OfferService
from orders.models import Order, OrderItem
from orders.signals import order_status_changed

from .calculation_service import OrderCalculationService

logger = logging.getLogger(__name__)


class OrderService:
    """
    Order lifecycle: creation, payment proof, verification and fulfilment.

    Every state-changing method runs in one transaction, locks the order
    row, and persists through a version compare-and-swap. Notifications
    and activity entries are scheduled for after commit.
    """

    # Forward-only pipeline; cancellation allowed from any live status.
    VALID_STATUS_TRANSITIONS = {
        Order.OrderStatus.PAYMENT_PENDING: [
            Order.OrderStatus.PENDING,
            Order.OrderStatus.CONFIRMED,
            Order.OrderStatus.PREPARING,
            Order.OrderStatus.OUT_FOR_DELIVERY,
            Order.OrderStatus.DELIVERED,
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.PENDING: [
            Order.OrderStatus.CONFIRMED,
            Order.OrderStatus.PREPARING,
            Order.OrderStatus.OUT_FOR_DELIVERY,
            Order.OrderStatus.DELIVERED,
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.CONFIRMED: [
            Order.OrderStatus.PREPARING,
            Order.OrderStatus.OUT_FOR_DELIVERY,
            Order.OrderStatus.DELIVERED,
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.PREPARING: [
            Order.OrderStatus.OUT_FOR_DELIVERY,
            Order.OrderStatus.DELIVERED,
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.OUT_FOR_DELIVERY: [
            Order.OrderStatus.DELIVERED,
            Order.OrderStatus.CANCELLED,
        ],
        Order.OrderStatus.DELIVERED: [],
        Order.OrderStatus.CANCELLED: [],
    }

    # Targets an admin may request through update_status
    ADMIN_SETTABLE_STATUSES = [
        Order.OrderStatus.PENDING,
        Order.OrderStatus.CONFIRMED,
        Order.OrderStatus.PREPARING,
        Order.OrderStatus.OUT_FOR_DELIVERY,
        Order.OrderStatus.DELIVERED,
        Order.OrderStatus.CANCELLED,
    ]

    # Statuses in which payment proof may be (re)submitted, verified, or
    # the customer may still cancel
    AWAITING_PAYMENT_STATUSES = [
        Order.OrderStatus.PAYMENT_PENDING,
        Order.OrderStatus.PENDING,
    ]

    ADMIN_CANCEL_REASON = "Cancelled by admin"
    CUSTOMER_CANCEL_REASON = "Cancelled by user"

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def create_order(
        customer,
        items,
        delivery_type: str = Order.DeliveryType.ROOM,
        delivery_details: dict = None,
        custom_delivery_time: int = None,
        ip: str = None,
    ) -> Order:
        """
        Validate the requested items against the live catalog, snapshot
        them, and create an order awaiting payment.

        Args:
            customer: The ordering user.
            items: list of {"dish_id": ..., "quantity": ...}; quantity defaults to 1.
            delivery_type: "room" or "takeaway".
            delivery_details: optional overrides for floor, room, mobile,
                special_instructions. Missing values come from the profile.
            custom_delivery_time: optional requested minutes.

        Raises:
            ValidationError: empty order, bad quantity, unavailable dish,
                missing room details.
            NotFoundError: unknown dish.
        """
        requested = OrderService._normalize_items(items)

        if delivery_type not in Order.DeliveryType.values:
            raise ValidationError(
                f"'{delivery_type}' is not a valid delivery type.", code="invalid_delivery_type"
            )

        if custom_delivery_time is not None:
            OrderService._validate_minutes(custom_delivery_time)

        dishes = DishService.get_dishes_by_ids([item["dish_id"] for item in requested])
        for item in requested:
            dish = dishes[item["dish_id"]]
            if not dish.is_orderable:
                raise ValidationError(
                    f"{dish.name} is currently unavailable.",
                    code="dish_unavailable",
                    dish_id=dish.pk,
                )

        delivery = OrderService._resolve_delivery_details(customer, delivery_type, delivery_details or {})

        lines = OrderCalculationService.build_line_snapshots(
            requested, dishes, OfferService.get_active_offers()
        )
        convenience_fee = OrderCalculationService.get_convenience_fee(delivery_type)
        total_amount = OrderCalculationService.calculate_total(lines, convenience_fee)

        order = Order.objects.create(
            customer=customer,
            status=Order.OrderStatus.PAYMENT_PENDING,
            delivery_type=delivery_type,
            convenience_fee=convenience_fee,
            total_amount=total_amount,
            estimated_delivery_time=settings.ORDER_DEFAULT_DELIVERY_MINUTES,
            custom_delivery_time=custom_delivery_time,
            order_placed_at=timezone.now(),
            **delivery,
        )
        OrderItem.objects.bulk_create([OrderItem(order=order, **line) for line in lines])

        logger.info(f"Order {order.id} placed by {customer.email}: total={total_amount}")
        ActivityService.record_on_commit(
            customer,
            Activity.Action.ORDER_PLACED,
            f"Order {order.short_id} placed - ₹{total_amount}",
            {
                "order_id": str(order.id),
                "total_amount": total_amount,
                "item_count": sum(line["quantity"] for line in lines),
                "delivery_type": delivery_type,
            },
            ip,
        )
        return order

    # ------------------------------------------------------------------
    # Payment
    # ------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def submit_payment(order_id, actor, utr_number: str, transaction_id: str = "", ip: str = None) -> Order:
        """
        Record the customer's payment proof and move the order to pending
        verification. Re-submission before verification overwrites the
        previous reference.
        """
        order = OrderService._lock_order(order_id)
        OrderService._require_owner(order, actor)

        utr_number = (utr_number or "").strip()
        if not utr_number:
            raise ValidationError("UTR number is required.", code="missing_payment_reference")

        if order.payment_verified:
            raise ValidationError(
                "Payment for this order is already verified.", code="payment_already_verified"
            )
        if order.status not in OrderService.AWAITING_PAYMENT_STATUSES:
            raise ValidationError(
                f"Cannot submit payment for an order that is {order.status}.",
                code="invalid_transition",
            )

        old_status = order.status
        order.utr_number = utr_number
        order.transaction_id = (transaction_id or "").strip()
        order.payment_submitted_at = timezone.now()
        order.status = Order.OrderStatus.PENDING

        OrderService._persist(
            order, ["utr_number", "transaction_id", "payment_submitted_at", "status"]
        )

        ActivityService.record_on_commit(
            actor,
            Activity.Action.PAYMENT_SUBMITTED,
            f"Payment submitted for order {order.short_id} (UTR: {utr_number})",
            {
                "order_id": str(order.id),
                "utr_number": utr_number,
                "transaction_id": order.transaction_id,
                "resubmission": old_status == Order.OrderStatus.PENDING,
            },
            ip,
        )
        if old_status != order.status:
            OrderService._emit_status_changed(order, old_status, actor)
        return order

    @staticmethod
    @transaction.atomic
    def verify_payment(order_id, actor, ip: str = None) -> Order:
        """
        Admin confirmation that the payment reference is genuine. This is the
        only code path that sets payment_verified.
        """
        OrderService._require_admin(actor)
        order = OrderService._lock_order(order_id)

        if order.payment_verified:
            raise ValidationError(
                "Payment for this order is already verified.", code="payment_already_verified"
            )
        if order.status not in OrderService.AWAITING_PAYMENT_STATUSES:
            raise ValidationError(
                f"Cannot verify payment for an order that is {order.status}.",
                code="invalid_transition",
            )

        now = timezone.now()
        old_status = order.status
        order.payment_verified = True
        order.verified_by = actor
        order.verified_at = now
        fields = ["payment_verified", "verified_by", "verified_at"]
        fields += OrderService._apply_status(order, Order.OrderStatus.CONFIRMED, now)

        OrderService._persist(order, fields)

        logger.info(f"Payment verified for order {order.id} by {actor.email}")
        ActivityService.record_on_commit(
            actor,
            Activity.Action.PAYMENT_VERIFIED,
            f"Payment verified for order {order.short_id}",
            {
                "order_id": str(order.id),
                "utr_number": order.utr_number,
                "total_amount": order.total_amount,
            },
            ip,
        )
        OrderService._emit_status_changed(order, old_status, actor)
        return order

    # ------------------------------------------------------------------
    # Fulfilment
    # ------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def update_status(order_id, new_status: str, actor, reason: str = None, ip: str = None) -> Order:
        """
        Admin status change along the transition table. Requesting the
        current status is a no-op.
        """
        OrderService._require_admin(actor)

        if new_status not in OrderService.ADMIN_SETTABLE_STATUSES:
            raise ValidationError(f"'{new_status}' is not a valid order status.", code="invalid_status")

        order = OrderService._lock_order(order_id)

        if order.status == new_status:
            return order

        if new_status not in OrderService.VALID_STATUS_TRANSITIONS.get(order.status, []):
            raise ValidationError(
                f"Cannot transition order from {order.status} to {new_status}.",
                code="invalid_transition",
            )

        old_status = order.status
        was_verified = order.payment_verified
        fields = OrderService._apply_status(order, new_status, timezone.now())

        if new_status == Order.OrderStatus.CANCELLED:
            order.cancellation_reason = (reason or "").strip() or OrderService.ADMIN_CANCEL_REASON
            # A cancelled order cannot carry a live verification; the
            # verifier and time stay for the audit trail.
            order.payment_verified = False
            fields += ["cancellation_reason", "payment_verified"]

        OrderService._persist(order, fields)

        if new_status == Order.OrderStatus.CANCELLED:
            action = Activity.Action.ORDER_CANCELLED
            details = f"Order {order.short_id} cancelled by admin: {order.cancellation_reason}"
        else:
            action = Activity.Action.ORDER_STATUS_UPDATED
            details = f"Order {order.short_id} status: {old_status} -> {new_status}"

        ActivityService.record_on_commit(
            actor,
            action,
            details,
            {
                "order_id": str(order.id),
                "old_status": old_status,
                "new_status": new_status,
                "payment_was_verified": was_verified,
            },
            ip,
        )
        OrderService._emit_status_changed(order, old_status, actor)
        return order

    @staticmethod
    @transaction.atomic
    def cancel_by_customer(order_id, actor, reason: str = None, ip: str = None) -> Order:
        """
        Customer self-cancel, allowed only before the order is confirmed.
        """
        order = OrderService._lock_order(order_id)
        OrderService._require_owner(order, actor)

        if order.status not in OrderService.AWAITING_PAYMENT_STATUSES:
            raise ValidationError(
                "Order cannot be cancelled at this stage.", code="cannot_cancel_at_stage"
            )

        old_status = order.status
        fields = OrderService._apply_status(order, Order.OrderStatus.CANCELLED, timezone.now())
        order.cancellation_reason = (reason or "").strip() or OrderService.CUSTOMER_CANCEL_REASON
        fields.append("cancellation_reason")

        OrderService._persist(order, fields)

        ActivityService.record_on_commit(
            actor,
            Activity.Action.ORDER_CANCELLED,
            f"Order {order.short_id} cancelled by customer",
            {"order_id": str(order.id), "old_status": old_status, "reason": order.cancellation_reason},
            ip,
        )
        OrderService._emit_status_changed(order, old_status, actor)
        return order

    @staticmethod
    @transaction.atomic
    def update_estimated_time(order_id, minutes, actor, ip: str = None) -> Order:
        """Set the delivery estimate in minutes. Status is unchanged."""
        OrderService._require_admin(actor)
        OrderService._validate_minutes(minutes)

        order = OrderService._lock_order(order_id)
        old_minutes = order.estimated_delivery_time
        order.estimated_delivery_time = minutes
        OrderService._persist(order, ["estimated_delivery_time"])

        ActivityService.record_on_commit(
            actor,
            Activity.Action.ORDER_TIME_UPDATED,
            f"Order {order.short_id} estimated time: {old_minutes} -> {minutes} min",
            {"order_id": str(order.id), "old_minutes": old_minutes, "new_minutes": minutes},
            ip,
        )
        return order

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @staticmethod
    def get_order(order_id, actor) -> Order:
        """Owner or admin only."""
        try:
            order = (
                Order.objects.select_related("customer", "verified_by")
                .prefetch_related("items")
                .get(pk=order_id)
            )
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFoundError(f"Order {order_id} not found", code="order_not_found")

        if not getattr(actor, "is_admin", False) and order.customer_id != actor.pk:
            raise ForbiddenError("You do not have access to this order.")
        return order

    @staticmethod
    def list_orders_for_customer(customer):
        return (
            Order.objects.filter(customer=customer)
            .prefetch_related("items")
            .order_by("-created_at")
        )

    @staticmethod
    def list_orders(status: str = None):
        """All orders, newest first, optionally filtered by status (admin view)."""
        queryset = (
            Order.objects.select_related("customer", "verified_by")
            .prefetch_related("items")
            .order_by("-created_at")
        )
        if status:
            if status not in Order.OrderStatus.values:
                raise ValidationError(f"'{status}' is not a valid order status.", code="invalid_status")
            queryset = queryset.filter(status=status)
        return queryset

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _normalize_items(items):
        if not items:
            raise ValidationError("Order must contain at least one item.", code="empty_order")

        normalized = []
        for item in items:
            if not isinstance(item, Mapping):
                raise ValidationError("Each item must be an object with a dish_id.", code="invalid_item")
            dish_id = DishService.normalize_dish_id(item.get("dish_id"))
            quantity = item.get("quantity", 1)
            if dish_id is None:
                raise ValidationError("Each item needs a valid dish_id.", code="invalid_item")
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
                raise ValidationError(
                    "Quantity must be a positive whole number.",
                    code="invalid_quantity",
                    dish_id=dish_id,
                )
            normalized.append({"dish_id": dish_id, "quantity": quantity})
        return normalized

    @staticmethod
    def _resolve_delivery_details(customer, delivery_type, overrides):
        details = {
            "delivery_floor": (overrides.get("floor") or customer.floor or "").strip(),
            "delivery_room": (overrides.get("room") or customer.room or "").strip(),
            "delivery_mobile": (overrides.get("mobile") or customer.mobile or "").strip(),
            "special_instructions": (overrides.get("special_instructions") or "").strip(),
        }
        if delivery_type == Order.DeliveryType.ROOM and not (
            details["delivery_floor"] and details["delivery_room"]
        ):
            raise ValidationError(
                "Floor and room are required for room delivery.", code="missing_delivery_details"
            )
        return details

    @staticmethod
    def _validate_minutes(minutes):
        max_minutes = settings.ORDER_MAX_DELIVERY_MINUTES
        if isinstance(minutes, bool) or not isinstance(minutes, int) or not 1 <= minutes <= max_minutes:
            raise ValidationError(
                f"Delivery time must be a whole number of minutes between 1 and {max_minutes}.",
                code="invalid_delivery_time",
            )

    @staticmethod
    def _require_admin(actor):
        if not getattr(actor, "is_admin", False):
            raise ForbiddenError("Admin access required.", code="admin_required")

    @staticmethod
    def _require_owner(order, actor):
        if order.customer_id != getattr(actor, "pk", None):
            raise ForbiddenError("You can only act on your own orders.", code="not_order_owner")

    @staticmethod
    def _lock_order(order_id) -> Order:
        try:
            return Order.objects.select_for_update().get(pk=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFoundError(f"Order {order_id} not found", code="order_not_found")

    @staticmethod
    def _apply_status(order: Order, new_status: str, now) -> list:
        """
        Set the status and, on first entry, its timestamp. Returns the
        fields that changed.
        """
        order.status = new_status
        fields = ["status"]

        timestamp_field = Order.STATUS_TIMESTAMP_FIELDS.get(new_status)
        if timestamp_field and getattr(order, timestamp_field) is None:
            setattr(order, timestamp_field, now)
            fields.append(timestamp_field)
        return fields

    @staticmethod
    def _persist(order: Order, fields: list):
        """
        Write ``fields`` only if nobody else bumped the version since the
        order was loaded.
        """
        expected_version = order.version
        values = {field: getattr(order, field) for field in fields}
        values["version"] = expected_version + 1
        values["updated_at"] = timezone.now()

        updated = Order.objects.filter(pk=order.pk, version=expected_version).update(**values)
        if updated != 1:
            logger.warning(f"Version conflict on order {order.pk} (expected v{expected_version})")
            raise ConflictError(
                "The order was modified by someone else. Reload and try again.",
                code="version_conflict",
            )

        order.version = values["version"]
        order.updated_at = values["updated_at"]

    @staticmethod
    def _emit_status_changed(order: Order, old_status: str, actor):
        """Send order_status_changed once the transaction has committed."""
        new_status = order.status

        def emit():
            results = order_status_changed.send_robust(
                sender=Order,
                order=order,
                old_status=old_status,
                new_status=new_status,
                actor=actor,
            )
            for receiver, response in results:
                if isinstance(response, Exception):
                    logger.error(
                        f"order_status_changed receiver {getattr(receiver, '__name__', receiver)} "
                        f"failed for order {order.id}: {response}"
                    )

        transaction.on_commit(emit)
