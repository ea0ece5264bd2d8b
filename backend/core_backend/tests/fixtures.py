"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like users, dishes, offers and orders.
"""
import pytest
from decimal import Decimal

from inventory.models import InventoryItem
from menu.models import Dish
from offers.models import Offer
from users.models import User


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def customer(db):
    """Resident on floor 3, room 304"""
    return User.objects.create_user(
        email="riya@hostel.test",
        password="password123",
        first_name="Riya",
        last_name="Sharma",
        mobile="9876543210",
        floor="3",
        room="304",
    )


@pytest.fixture
def other_customer(db):
    """A second resident, used for ownership checks"""
    return User.objects.create_user(
        email="arjun@hostel.test",
        password="password123",
        first_name="Arjun",
        floor="5",
        room="512",
    )


@pytest.fixture
def admin_user(db):
    """Kitchen admin who verifies payments and moves orders along"""
    return User.objects.create_user(
        email="admin@maggiepoint.test",
        password="password123",
        first_name="Kitchen",
        role=User.Role.ADMIN,
    )


# ============================================================================
# MENU FIXTURES
# ============================================================================

@pytest.fixture
def masala_maggi(admin_user):
    return Dish.objects.create(
        name="Masala Maggi",
        description="Classic masala noodles",
        price=Decimal("40.00"),
        category="Maggi",
        emoji="🍜",
        created_by=admin_user,
    )


@pytest.fixture
def cheese_maggi(admin_user):
    return Dish.objects.create(
        name="Cheese Maggi",
        price=Decimal("60.00"),
        category="Maggi",
        created_by=admin_user,
    )


@pytest.fixture
def cold_coffee(admin_user):
    return Dish.objects.create(
        name="Cold Coffee",
        price=Decimal("50.00"),
        category="Beverages",
        emoji="☕",
        created_by=admin_user,
    )


@pytest.fixture
def unavailable_dish(admin_user):
    return Dish.objects.create(
        name="Paneer Maggi",
        price=Decimal("70.00"),
        category="Maggi",
        is_available=False,
        created_by=admin_user,
    )


# ============================================================================
# OFFER FIXTURES
# ============================================================================

@pytest.fixture
def maggi_percentage_offer(admin_user):
    """10% off the Maggi category"""
    return Offer.objects.create(
        title="Maggi Monday",
        discount_type=Offer.DiscountType.PERCENTAGE,
        discount_value=Decimal("10"),
        applicable_to=Offer.ApplicableTo.CATEGORY,
        target_id="Maggi",
        created_by=admin_user,
    )


@pytest.fixture
def flat_offer_all(admin_user):
    """Rs 5 off everything"""
    return Offer.objects.create(
        title="Flat Five",
        discount_type=Offer.DiscountType.FLAT,
        discount_value=Decimal("5"),
        applicable_to=Offer.ApplicableTo.ALL,
        target_id="all",
        created_by=admin_user,
    )


# ============================================================================
# INVENTORY FIXTURES
# ============================================================================

@pytest.fixture
def noodle_stock(admin_user):
    return InventoryItem.objects.create(
        name="Maggi Packets",
        quantity=Decimal("40"),
        unit=InventoryItem.Unit.PACKETS,
        min_threshold=Decimal("10"),
        category=InventoryItem.Category.RAW_MATERIAL,
        last_updated_by=admin_user,
    )


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def placed_order(customer, masala_maggi):
    """Room-delivery order for two Masala Maggi, awaiting payment"""
    from orders.services import OrderService

    return OrderService.create_order(
        customer, [{"dish_id": masala_maggi.pk, "quantity": 2}]
    )


@pytest.fixture
def paid_order(placed_order, customer):
    """Order with payment proof submitted, awaiting verification"""
    from orders.services import OrderService

    return OrderService.submit_payment(placed_order.pk, customer, utr_number="UTR123456789")


@pytest.fixture
def confirmed_order(paid_order, admin_user):
    from orders.services import OrderService

    return OrderService.verify_payment(paid_order.pk, admin_user)
