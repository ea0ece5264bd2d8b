from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Dish(models.Model):
    """
    A live catalog entry. Orders never read price or name from here after
    creation; they keep their own snapshot on OrderItem.
    """

    name = models.CharField(max_length=120, help_text=_("Name of the dish."))
    description = models.TextField(blank=True, help_text=_("Short description shown on the menu."))
    price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Catalog price before offers."),
    )
    category = models.CharField(
        max_length=60,
        db_index=True,
        help_text=_("Free-text category, matched case-insensitively by category offers."),
    )
    is_available = models.BooleanField(
        default=True,
        help_text=_("Unavailable dishes stay on the catalog but cannot be ordered."),
    )
    emoji = models.CharField(max_length=16, default="🍜", blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="dishes_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Dish")
        verbose_name_plural = _("Dishes")
        ordering = ["category", "name"]
        indexes = [
            models.Index(fields=["is_available", "category"], name="menu_dish_avail_cat_idx"),
        ]

    def __str__(self):
        return f"{self.emoji} {self.name}".strip()

    @property
    def is_orderable(self):
        return self.is_available
