import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Offer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=120)),
                ("description", models.TextField(blank=True)),
                ("discount_type", models.CharField(choices=[("percentage", "Percentage"), ("flat", "Flat Amount")], default="percentage", max_length=20)),
                ("discount_value", models.DecimalField(decimal_places=2, help_text="Percentage (0-100) or flat currency amount, depending on type.", max_digits=8)),
                ("applicable_to", models.CharField(choices=[("all", "All Dishes"), ("category", "Category"), ("dish", "Single Dish")], default="all", max_length=20)),
                ("target_id", models.CharField(default="all", help_text="Category name or dish id, depending on applicable_to.", max_length=120)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                ("valid_until", models.DateTimeField(blank=True, help_text="Offer stops applying after this moment.", null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="offers_created", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [models.Index(fields=["is_active", "valid_until"], name="offers_active_valid_idx")],
            },
        ),
    ]
