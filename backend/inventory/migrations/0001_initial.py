import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="InventoryItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Name of the stock item.", max_length=120)),
                ("quantity", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal("0.00"))])),
                ("unit", models.CharField(choices=[("kg", "kg"), ("gm", "gm"), ("pcs", "pcs"), ("liters", "liters"), ("packets", "packets")], max_length=10)),
                ("min_threshold", models.DecimalField(decimal_places=2, default=Decimal("5.00"), help_text="Admins are alerted when quantity drops to this level.", max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal("0.00"))])),
                ("category", models.CharField(choices=[("Raw Material", "Raw Material"), ("Packaging", "Packaging"), ("Spices", "Spices"), ("Other", "Other")], max_length=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("last_updated_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="inventory_updates", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Inventory Item",
                "verbose_name_plural": "Inventory Items",
                "ordering": ["name"],
            },
        ),
    ]
