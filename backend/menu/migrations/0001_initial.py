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
            name="Dish",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(help_text="Name of the dish.", max_length=120)),
                ("description", models.TextField(blank=True, help_text="Short description shown on the menu.")),
                ("price", models.DecimalField(decimal_places=2, help_text="Catalog price before offers.", max_digits=8, validators=[django.core.validators.MinValueValidator(Decimal("0.00"))])),
                ("category", models.CharField(db_index=True, help_text="Free-text category, matched case-insensitively by category offers.", max_length=60)),
                ("is_available", models.BooleanField(default=True, help_text="Unavailable dishes stay on the catalog but cannot be ordered.")),
                ("emoji", models.CharField(blank=True, default="🍜", max_length=16)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="dishes_created", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Dish",
                "verbose_name_plural": "Dishes",
                "ordering": ["category", "name"],
                "indexes": [models.Index(fields=["is_available", "category"], name="menu_dish_avail_cat_idx")],
            },
        ),
    ]
