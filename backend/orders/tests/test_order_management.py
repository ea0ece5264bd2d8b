"""
Order lifecycle tests at the service layer.

Covers creation with price snapshots, payment submission and verification,
the status transition table, cancellation rules and version conflicts.
"""
import uuid
import pytest
from decimal import Decimal
from django.db.models import F

from core_backend.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from orders.models import Order, OrderItem
from orders.services import OrderService
from users.models import User


@pytest.mark.django_db
class TestOrderCreation:
    """Test order creation, snapshots and totals"""

    def test_room_delivery_adds_convenience_fee(self, customer, cold_coffee):
        """Two dishes at 50 with room delivery: 2*50 + 10 = 110"""
        order = OrderService.create_order(customer, [{"dish_id": cold_coffee.pk, "quantity": 2}])

        assert order.status == Order.OrderStatus.PAYMENT_PENDING
        assert order.convenience_fee == Decimal("10.00")
        assert order.total_amount == Decimal("110.00")
        assert order.payment_verified is False
        assert order.version == 1
        assert order.order_placed_at is not None

    def test_takeaway_has_no_fee_and_needs_no_room(self, db, cold_coffee):
        walk_in = User.objects.create_user(email="walkin@hostel.test", password="password123")

        order = OrderService.create_order(
            walk_in,
            [{"dish_id": cold_coffee.pk, "quantity": 1}],
            delivery_type=Order.DeliveryType.TAKEAWAY,
        )

        assert order.convenience_fee == Decimal("0.00")
        assert order.total_amount == Decimal("50.00")
        assert order.delivery_room == ""

    def test_delivery_details_default_to_profile(self, customer, masala_maggi):
        order = OrderService.create_order(customer, [{"dish_id": masala_maggi.pk}])

        assert order.delivery_floor == "3"
        assert order.delivery_room == "304"
        assert order.delivery_mobile == "9876543210"

    def test_delivery_details_override_profile(self, customer, masala_maggi):
        order = OrderService.create_order(
            customer,
            [{"dish_id": masala_maggi.pk}],
            delivery_details={"floor": "1", "room": "101", "special_instructions": "  Extra spicy "},
        )

        assert order.delivery_floor == "1"
        assert order.delivery_room == "101"
        assert order.special_instructions == "Extra spicy"

    def test_room_delivery_without_room_is_rejected(self, db, masala_maggi):
        no_room = User.objects.create_user(email="noroom@hostel.test", password="password123")

        with pytest.raises(ValidationError) as exc_info:
            OrderService.create_order(no_room, [{"dish_id": masala_maggi.pk}])

        assert exc_info.value.code == "missing_delivery_details"
        assert Order.objects.count() == 0

    def test_quantity_defaults_to_one(self, customer, masala_maggi):
        order = OrderService.create_order(customer, [{"dish_id": masala_maggi.pk}])

        item = order.items.get()
        assert item.quantity == 1
        assert order.total_amount == Decimal("50.00")

    def test_items_keep_request_order(self, customer, masala_maggi, cold_coffee, cheese_maggi):
        order = OrderService.create_order(
            customer,
            [
                {"dish_id": cold_coffee.pk, "quantity": 1},
                {"dish_id": masala_maggi.pk, "quantity": 3},
                {"dish_id": cheese_maggi.pk, "quantity": 1},
            ],
        )

        assert [item.name for item in order.items.all()] == ["Cold Coffee", "Masala Maggi", "Cheese Maggi"]
        # 50 + 3*40 + 60 + 10
        assert order.total_amount == Decimal("240.00")

    def test_snapshot_uses_offer_price(self, customer, masala_maggi, maggi_percentage_offer):
        order = OrderService.create_order(customer, [{"dish_id": masala_maggi.pk, "quantity": 2}])

        item = order.items.get()
        assert item.unit_price == Decimal("36.00")
        assert order.total_amount == Decimal("82.00")

    def test_catalog_edits_do_not_touch_existing_orders(self, customer, masala_maggi):
        order = OrderService.create_order(customer, [{"dish_id": masala_maggi.pk, "quantity": 1}])

        masala_maggi.name = "Masala Maggi XL"
        masala_maggi.price = Decimal("99.00")
        masala_maggi.save()

        item = OrderItem.objects.get(order=order)
        assert item.name == "Masala Maggi"
        assert item.unit_price == Decimal("40.00")
        order.refresh_from_db()
        assert order.total_amount == Decimal("50.00")

    def test_deleted_dish_keeps_snapshot(self, customer, masala_maggi):
        order = OrderService.create_order(customer, [{"dish_id": masala_maggi.pk}])
        masala_maggi.delete()

        item = order.items.get()
        assert item.dish is None
        assert item.name == "Masala Maggi"

    def test_unavailable_dish_rejects_whole_order(self, customer, masala_maggi, unavailable_dish):
        with pytest.raises(ValidationError) as exc_info:
            OrderService.create_order(
                customer,
                [{"dish_id": masala_maggi.pk, "quantity": 1}, {"dish_id": unavailable_dish.pk, "quantity": 1}],
            )

        assert exc_info.value.code == "dish_unavailable"
        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_unknown_dish_is_not_found(self, customer):
        with pytest.raises(NotFoundError) as exc_info:
            OrderService.create_order(customer, [{"dish_id": 999999, "quantity": 1}])

        assert exc_info.value.code == "dish_not_found"

    def test_empty_order_is_rejected(self, customer):
        with pytest.raises(ValidationError) as exc_info:
            OrderService.create_order(customer, [])

        assert exc_info.value.code == "empty_order"

    @pytest.mark.parametrize("line", ["masala", 7, None, [1, 2], {"quantity": 1}, {"dish_id": "abc"}, {"dish_id": True}])
    def test_malformed_line_is_invalid_item(self, customer, line):
        with pytest.raises(ValidationError) as exc_info:
            OrderService.create_order(customer, [line])

        assert exc_info.value.code == "invalid_item"
        assert Order.objects.count() == 0

    def test_string_dish_id_is_accepted(self, customer, masala_maggi):
        order = OrderService.create_order(customer, [{"dish_id": str(masala_maggi.pk), "quantity": 2}])

        item = order.items.get()
        assert item.dish == masala_maggi
        assert item.quantity == 2

    @pytest.mark.parametrize("quantity", [0, -1, "2", 1.5, True])
    def test_invalid_quantity_is_rejected(self, customer, masala_maggi, quantity):
        with pytest.raises(ValidationError) as exc_info:
            OrderService.create_order(customer, [{"dish_id": masala_maggi.pk, "quantity": quantity}])

        assert exc_info.value.code == "invalid_quantity"

    def test_invalid_delivery_type_is_rejected(self, customer, masala_maggi):
        with pytest.raises(ValidationError) as exc_info:
            OrderService.create_order(customer, [{"dish_id": masala_maggi.pk}], delivery_type="drone")

        assert exc_info.value.code == "invalid_delivery_type"

    @pytest.mark.parametrize("minutes", [0, 241])
    def test_custom_delivery_time_out_of_range(self, customer, masala_maggi, minutes):
        with pytest.raises(ValidationError) as exc_info:
            OrderService.create_order(customer, [{"dish_id": masala_maggi.pk}], custom_delivery_time=minutes)

        assert exc_info.value.code == "invalid_delivery_time"

    def test_custom_delivery_time_is_stored(self, customer, masala_maggi):
        order = OrderService.create_order(customer, [{"dish_id": masala_maggi.pk}], custom_delivery_time=30)

        assert order.custom_delivery_time == 30
        assert order.estimated_delivery_time == 10


@pytest.mark.django_db
class TestPaymentFlow:
    """Test UTR submission and admin verification"""

    def test_submit_then_verify(self, placed_order, customer, admin_user):
        order = OrderService.submit_payment(placed_order.pk, customer, utr_number="UTR123")
        assert order.status == Order.OrderStatus.PENDING
        assert order.utr_number == "UTR123"
        assert order.payment_submitted_at is not None
        assert order.payment_verified is False

        order = OrderService.verify_payment(order.pk, admin_user)
        order.refresh_from_db()
        assert order.payment_verified is True
        assert order.status == Order.OrderStatus.CONFIRMED
        assert order.confirmed_at is not None
        assert order.verified_by == admin_user
        assert order.verified_at is not None

    def test_blank_utr_is_rejected(self, placed_order, customer):
        with pytest.raises(ValidationError) as exc_info:
            OrderService.submit_payment(placed_order.pk, customer, utr_number="   ")

        assert exc_info.value.code == "missing_payment_reference"

    def test_only_owner_can_submit_payment(self, placed_order, other_customer):
        with pytest.raises(ForbiddenError):
            OrderService.submit_payment(placed_order.pk, other_customer, utr_number="UTR999")

        placed_order.refresh_from_db()
        assert placed_order.utr_number == ""

    def test_resubmission_overwrites_reference(self, paid_order, customer):
        order = OrderService.submit_payment(
            paid_order.pk, customer, utr_number="UTR-CORRECTED", transaction_id="TXN42"
        )

        order.refresh_from_db()
        assert order.status == Order.OrderStatus.PENDING
        assert order.utr_number == "UTR-CORRECTED"
        assert order.transaction_id == "TXN42"

    def test_no_submission_after_verification(self, confirmed_order, customer):
        with pytest.raises(ValidationError) as exc_info:
            OrderService.submit_payment(confirmed_order.pk, customer, utr_number="UTR-LATE")

        assert exc_info.value.code == "payment_already_verified"

    def test_customer_cannot_verify(self, paid_order, customer):
        with pytest.raises(ForbiddenError) as exc_info:
            OrderService.verify_payment(paid_order.pk, customer)

        assert exc_info.value.code == "admin_required"

    def test_verify_twice_is_rejected(self, confirmed_order, admin_user):
        with pytest.raises(ValidationError) as exc_info:
            OrderService.verify_payment(confirmed_order.pk, admin_user)

        assert exc_info.value.code == "payment_already_verified"

    def test_cannot_verify_cancelled_order(self, placed_order, customer, admin_user):
        OrderService.cancel_by_customer(placed_order.pk, customer)

        with pytest.raises(ValidationError) as exc_info:
            OrderService.verify_payment(placed_order.pk, admin_user)

        assert exc_info.value.code == "invalid_transition"

    def test_unknown_order_is_not_found(self, customer):
        with pytest.raises(NotFoundError) as exc_info:
            OrderService.submit_payment(uuid.uuid4(), customer, utr_number="UTR1")

        assert exc_info.value.code == "order_not_found"


@pytest.mark.django_db
class TestStatusTransitions:
    """Test the admin transition table"""

    def test_forward_progression_sets_timestamps(self, confirmed_order, admin_user):
        order = OrderService.update_status(confirmed_order.pk, Order.OrderStatus.PREPARING, admin_user)
        assert order.preparing_at is not None

        order = OrderService.update_status(order.pk, Order.OrderStatus.OUT_FOR_DELIVERY, admin_user)
        assert order.out_for_delivery_at is not None

        order = OrderService.update_status(order.pk, Order.OrderStatus.DELIVERED, admin_user)
        order.refresh_from_db()
        assert order.status == Order.OrderStatus.DELIVERED
        assert order.delivered_at is not None
        assert order.is_terminal

    def test_skipping_ahead_only_stamps_target(self, paid_order, admin_user):
        order = OrderService.update_status(paid_order.pk, Order.OrderStatus.DELIVERED, admin_user)

        order.refresh_from_db()
        assert order.delivered_at is not None
        assert order.confirmed_at is None
        assert order.preparing_at is None

    def test_backward_transition_is_rejected(self, confirmed_order, admin_user):
        OrderService.update_status(confirmed_order.pk, Order.OrderStatus.PREPARING, admin_user)

        with pytest.raises(ValidationError) as exc_info:
            OrderService.update_status(confirmed_order.pk, Order.OrderStatus.CONFIRMED, admin_user)

        assert exc_info.value.code == "invalid_transition"

    def test_terminal_orders_are_frozen(self, confirmed_order, admin_user):
        OrderService.update_status(confirmed_order.pk, Order.OrderStatus.DELIVERED, admin_user)

        with pytest.raises(ValidationError) as exc_info:
            OrderService.update_status(confirmed_order.pk, Order.OrderStatus.CANCELLED, admin_user)

        assert exc_info.value.code == "invalid_transition"

    def test_same_status_is_a_noop(self, confirmed_order, admin_user):
        version = confirmed_order.version

        order = OrderService.update_status(confirmed_order.pk, Order.OrderStatus.CONFIRMED, admin_user)

        order.refresh_from_db()
        assert order.version == version

    @pytest.mark.parametrize("target", ["bogus", Order.OrderStatus.PAYMENT_PENDING])
    def test_unknown_or_unsettable_status(self, placed_order, admin_user, target):
        with pytest.raises(ValidationError) as exc_info:
            OrderService.update_status(placed_order.pk, target, admin_user)

        assert exc_info.value.code == "invalid_status"

    def test_customer_cannot_change_status(self, confirmed_order, customer):
        with pytest.raises(ForbiddenError):
            OrderService.update_status(confirmed_order.pk, Order.OrderStatus.PREPARING, customer)

    def test_inactive_admin_is_not_admin(self, confirmed_order, admin_user):
        admin_user.is_active = False
        admin_user.save()

        with pytest.raises(ForbiddenError):
            OrderService.update_status(confirmed_order.pk, Order.OrderStatus.PREPARING, admin_user)

    def test_version_increments_on_every_change(self, placed_order, customer, admin_user):
        assert placed_order.version == 1

        order = OrderService.submit_payment(placed_order.pk, customer, utr_number="UTR1")
        assert order.version == 2

        order = OrderService.verify_payment(order.pk, admin_user)
        assert order.version == 3

        order = OrderService.update_estimated_time(order.pk, 25, admin_user)
        order.refresh_from_db()
        assert order.version == 4


@pytest.mark.django_db
class TestCancellation:
    """Test customer and admin cancellation rules"""

    def test_customer_cancels_before_payment(self, placed_order, customer):
        order = OrderService.cancel_by_customer(placed_order.pk, customer)

        order.refresh_from_db()
        assert order.status == Order.OrderStatus.CANCELLED
        assert order.cancelled_at is not None
        assert order.cancellation_reason == "Cancelled by user"

    def test_customer_cancels_while_pending_verification(self, paid_order, customer):
        order = OrderService.cancel_by_customer(paid_order.pk, customer, reason="Ordered twice")

        assert order.status == Order.OrderStatus.CANCELLED
        assert order.cancellation_reason == "Ordered twice"

    def test_customer_cannot_cancel_confirmed_order(self, confirmed_order, customer, admin_user):
        with pytest.raises(ValidationError) as exc_info:
            OrderService.cancel_by_customer(confirmed_order.pk, customer)
        assert exc_info.value.code == "cannot_cancel_at_stage"

        order = OrderService.update_status(confirmed_order.pk, Order.OrderStatus.CANCELLED, admin_user)
        order.refresh_from_db()
        assert order.status == Order.OrderStatus.CANCELLED
        assert order.cancelled_at is not None
        assert order.cancellation_reason == "Cancelled by admin"

    def test_admin_cancel_clears_verification(self, confirmed_order, admin_user):
        order = OrderService.update_status(
            confirmed_order.pk, Order.OrderStatus.CANCELLED, admin_user, reason="Out of noodles"
        )

        order.refresh_from_db()
        assert order.payment_verified is False
        assert order.verified_by == admin_user
        assert order.cancellation_reason == "Out of noodles"

    def test_other_customer_cannot_cancel(self, placed_order, other_customer):
        with pytest.raises(ForbiddenError) as exc_info:
            OrderService.cancel_by_customer(placed_order.pk, other_customer)

        assert exc_info.value.code == "not_order_owner"


@pytest.mark.django_db
class TestEstimatedTime:
    def test_admin_updates_estimate(self, confirmed_order, admin_user):
        order = OrderService.update_estimated_time(confirmed_order.pk, 25, admin_user)

        order.refresh_from_db()
        assert order.estimated_delivery_time == 25
        assert order.status == Order.OrderStatus.CONFIRMED

    @pytest.mark.parametrize("minutes", [0, -5, 241, "15", True])
    def test_invalid_minutes(self, confirmed_order, admin_user, minutes):
        with pytest.raises(ValidationError) as exc_info:
            OrderService.update_estimated_time(confirmed_order.pk, minutes, admin_user)

        assert exc_info.value.code == "invalid_delivery_time"

    def test_customer_cannot_update_estimate(self, confirmed_order, customer):
        with pytest.raises(ForbiddenError):
            OrderService.update_estimated_time(confirmed_order.pk, 25, customer)


@pytest.mark.django_db
class TestConcurrentModification:
    """Test the version compare-and-swap"""

    def test_stale_write_raises_conflict(self, placed_order):
        stale = Order.objects.get(pk=placed_order.pk)
        Order.objects.filter(pk=placed_order.pk).update(version=F("version") + 1)

        stale.estimated_delivery_time = 45
        with pytest.raises(ConflictError) as exc_info:
            OrderService._persist(stale, ["estimated_delivery_time"])

        assert exc_info.value.code == "version_conflict"
        placed_order.refresh_from_db()
        assert placed_order.estimated_delivery_time == 10

    def test_conflict_surfaces_from_service(self, paid_order, admin_user, monkeypatch):
        stale = Order.objects.get(pk=paid_order.pk)
        Order.objects.filter(pk=paid_order.pk).update(version=F("version") + 1)
        monkeypatch.setattr(OrderService, "_lock_order", staticmethod(lambda order_id: stale))

        with pytest.raises(ConflictError):
            OrderService.verify_payment(paid_order.pk, admin_user)

        paid_order.refresh_from_db()
        assert paid_order.payment_verified is False


@pytest.mark.django_db
class TestOrderReads:
    def test_owner_and_admin_can_read(self, placed_order, customer, admin_user):
        assert OrderService.get_order(placed_order.pk, customer) == placed_order
        assert OrderService.get_order(placed_order.pk, admin_user) == placed_order

    def test_other_customer_is_forbidden(self, placed_order, other_customer):
        with pytest.raises(ForbiddenError):
            OrderService.get_order(placed_order.pk, other_customer)

    @pytest.mark.parametrize("order_id", ["not-a-uuid", str(uuid.uuid4())])
    def test_missing_order(self, customer, order_id):
        with pytest.raises(NotFoundError):
            OrderService.get_order(order_id, customer)

    def test_customer_list_is_scoped(self, placed_order, other_customer, cold_coffee):
        OrderService.create_order(other_customer, [{"dish_id": cold_coffee.pk}])

        orders = list(OrderService.list_orders_for_customer(other_customer))
        assert len(orders) == 1
        assert placed_order not in orders

    def test_admin_list_filters_by_status(self, placed_order, paid_order, other_customer, cold_coffee):
        OrderService.create_order(other_customer, [{"dish_id": cold_coffee.pk}])

        assert OrderService.list_orders().count() == 2
        assert OrderService.list_orders(status=Order.OrderStatus.PENDING).count() == 1
        assert OrderService.list_orders(status=Order.OrderStatus.PAYMENT_PENDING).count() == 1

    def test_admin_list_rejects_unknown_status(self, db):
        with pytest.raises(ValidationError):
            OrderService.list_orders(status="lost")
