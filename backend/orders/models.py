import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Order(models.Model):
    class OrderStatus(models.TextChoices):
        PAYMENT_PENDING = "payment_pending", _("Payment Pending")
        PENDING = "pending", _("Pending Verification")
        CONFIRMED = "confirmed", _("Confirmed")
        PREPARING = "preparing", _("Preparing")
        OUT_FOR_DELIVERY = "out_for_delivery", _("Out for Delivery")
        DELIVERED = "delivered", _("Delivered")
        CANCELLED = "cancelled", _("Cancelled")

    class DeliveryType(models.TextChoices):
        ROOM = "room", _("Room Delivery")
        TAKEAWAY = "takeaway", _("Takeaway")

    # Status -> timestamp field recorded the first time the order enters it
    STATUS_TIMESTAMP_FIELDS = {
        OrderStatus.CONFIRMED: "confirmed_at",
        OrderStatus.PREPARING: "preparing_at",
        OrderStatus.OUT_FOR_DELIVERY: "out_for_delivery_at",
        OrderStatus.DELIVERED: "delivered_at",
        OrderStatus.CANCELLED: "cancelled_at",
    }

    TERMINAL_STATUSES = (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
        help_text=_("The customer who placed the order. Never changes."),
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PAYMENT_PENDING,
        db_index=True,
    )
    delivery_type = models.CharField(
        max_length=20, choices=DeliveryType.choices, default=DeliveryType.ROOM
    )

    # Financial fields, fixed at creation
    convenience_fee = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Sum of item snapshots plus the convenience fee."),
    )

    # Payment proof and verification
    utr_number = models.CharField(
        _("UTR number"), max_length=64, blank=True, db_index=True,
        help_text=_("Bank transfer reference submitted by the customer."),
    )
    transaction_id = models.CharField(max_length=64, blank=True, db_index=True)
    payment_submitted_at = models.DateTimeField(null=True, blank=True)
    payment_verified = models.BooleanField(default=False)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="verified_orders",
    )
    verified_at = models.DateTimeField(null=True, blank=True)

    # Delivery details, defaulted from the customer profile
    delivery_floor = models.CharField(max_length=20, blank=True)
    delivery_room = models.CharField(max_length=20, blank=True)
    delivery_mobile = models.CharField(max_length=20, blank=True)
    special_instructions = models.TextField(blank=True)

    estimated_delivery_time = models.PositiveIntegerField(
        default=10, help_text=_("Estimated minutes until delivery.")
    )
    custom_delivery_time = models.PositiveIntegerField(
        null=True, blank=True, help_text=_("Delivery time in minutes requested by the customer.")
    )

    # Lifecycle timestamps
    order_placed_at = models.DateTimeField(null=True, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    preparing_at = models.DateTimeField(null=True, blank=True)
    out_for_delivery_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)

    version = models.PositiveIntegerField(
        default=1, help_text=_("Incremented on every state change; used for compare-and-swap.")
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["customer", "-created_at"], name="orders_customer_created_idx"),
            models.Index(fields=["status", "-created_at"], name="orders_status_created_idx"),
        ]

    def __str__(self):
        return f"Order {self.short_id} ({self.get_status_display()})"

    @property
    def short_id(self):
        return str(self.id).split("-")[0].upper()

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    @property
    def items_subtotal(self):
        return sum((item.line_total for item in self.items.all()), Decimal("0.00"))


class OrderItem(models.Model):
    """
    Frozen copy of a dish as it was when the order was placed.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    dish = models.ForeignKey(
        "menu.Dish",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
        help_text=_("Reference only; name and price come from the snapshot below."),
    )
    name = models.CharField(max_length=120)
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Offer-resolved unit price at the moment the order was placed."),
    )
    quantity = models.PositiveIntegerField(default=1)
    emoji = models.CharField(max_length=16, blank=True)
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    @property
    def line_total(self):
        return self.unit_price * self.quantity
