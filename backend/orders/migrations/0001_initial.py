import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("menu", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("status", models.CharField(choices=[("payment_pending", "Payment Pending"), ("pending", "Pending Verification"), ("confirmed", "Confirmed"), ("preparing", "Preparing"), ("out_for_delivery", "Out for Delivery"), ("delivered", "Delivered"), ("cancelled", "Cancelled")], db_index=True, default="payment_pending", max_length=20)),
                ("delivery_type", models.CharField(choices=[("room", "Room Delivery"), ("takeaway", "Takeaway")], default="room", max_length=20)),
                ("convenience_fee", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("total_amount", models.DecimalField(decimal_places=2, help_text="Sum of item snapshots plus the convenience fee.", max_digits=10)),
                ("utr_number", models.CharField(blank=True, db_index=True, help_text="Bank transfer reference submitted by the customer.", max_length=64, verbose_name="UTR number")),
                ("transaction_id", models.CharField(blank=True, db_index=True, max_length=64)),
                ("payment_submitted_at", models.DateTimeField(blank=True, null=True)),
                ("payment_verified", models.BooleanField(default=False)),
                ("verified_at", models.DateTimeField(blank=True, null=True)),
                ("delivery_floor", models.CharField(blank=True, max_length=20)),
                ("delivery_room", models.CharField(blank=True, max_length=20)),
                ("delivery_mobile", models.CharField(blank=True, max_length=20)),
                ("special_instructions", models.TextField(blank=True)),
                ("estimated_delivery_time", models.PositiveIntegerField(default=10, help_text="Estimated minutes until delivery.")),
                ("custom_delivery_time", models.PositiveIntegerField(blank=True, help_text="Delivery time in minutes requested by the customer.", null=True)),
                ("order_placed_at", models.DateTimeField(blank=True, null=True)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("preparing_at", models.DateTimeField(blank=True, null=True)),
                ("out_for_delivery_at", models.DateTimeField(blank=True, null=True)),
                ("delivered_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("cancellation_reason", models.CharField(blank=True, max_length=255)),
                ("version", models.PositiveIntegerField(default=1, help_text="Incremented on every state change; used for compare-and-swap.")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("customer", models.ForeignKey(help_text="The customer who placed the order. Never changes.", on_delete=django.db.models.deletion.PROTECT, related_name="orders", to=settings.AUTH_USER_MODEL)),
                ("verified_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="verified_orders", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["customer", "-created_at"], name="orders_customer_created_idx"),
                    models.Index(fields=["status", "-created_at"], name="orders_status_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("unit_price", models.DecimalField(decimal_places=2, help_text="Offer-resolved unit price at the moment the order was placed.", max_digits=10)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("emoji", models.CharField(blank=True, max_length=16)),
                ("position", models.PositiveSmallIntegerField(default=0)),
                ("dish", models.ForeignKey(blank=True, help_text="Reference only; name and price come from the snapshot below.", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="order_items", to="menu.dish")),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.order")),
            ],
            options={
                "ordering": ["position", "id"],
            },
        ),
    ]
