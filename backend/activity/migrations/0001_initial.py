import django.core.serializers.json
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Activity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(choices=[("LOGIN", "Login"), ("LOGOUT", "Logout"), ("SIGNUP", "Signup"), ("ORDER_PLACED", "Order Placed"), ("ORDER_STATUS_UPDATED", "Order Status Updated"), ("ORDER_CANCELLED", "Order Cancelled"), ("ORDER_TIME_UPDATED", "Order Time Updated"), ("PAYMENT_SUBMITTED", "Payment Submitted"), ("PAYMENT_VERIFIED", "Payment Verified"), ("DISH_CREATED", "Dish Created"), ("DISH_UPDATED", "Dish Updated"), ("DISH_DELETED", "Dish Deleted"), ("OFFER_CREATED", "Offer Created"), ("OFFER_UPDATED", "Offer Updated"), ("OFFER_DELETED", "Offer Deleted"), ("INVENTORY_ADDED", "Inventory Added"), ("INVENTORY_UPDATED", "Inventory Updated"), ("INVENTORY_DELETED", "Inventory Deleted")], db_index=True, max_length=40)),
                ("details", models.TextField(blank=True)),
                ("metadata", models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ("ip", models.CharField(default="System", max_length=64)),
                ("timestamp", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("actor", models.ForeignKey(blank=True, help_text="User who performed the action. Empty for system actions.", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="activities", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Activity",
                "verbose_name_plural": "Activities",
                "ordering": ["-timestamp", "-id"],
                "indexes": [
                    models.Index(fields=["action", "-timestamp"], name="activity_action_ts_idx"),
                    models.Index(fields=["actor", "-timestamp"], name="activity_actor_ts_idx"),
                ],
            },
        ),
    ]
