from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class InventoryItem(models.Model):
    """
    Raw stock kept in the kitchen: noodles, masala sachets, cups and so on.
    Not tied to dishes; stock is adjusted by hand.
    """

    class Unit(models.TextChoices):
        KG = "kg", _("kg")
        GM = "gm", _("gm")
        PCS = "pcs", _("pcs")
        LITERS = "liters", _("liters")
        PACKETS = "packets", _("packets")

    class Category(models.TextChoices):
        RAW_MATERIAL = "Raw Material", _("Raw Material")
        PACKAGING = "Packaging", _("Packaging")
        SPICES = "Spices", _("Spices")
        OTHER = "Other", _("Other")

    name = models.CharField(max_length=120, help_text=_("Name of the stock item."))
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    unit = models.CharField(max_length=10, choices=Unit.choices)
    min_threshold = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("5.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Admins are alerted when quantity drops to this level."),
    )
    category = models.CharField(max_length=20, choices=Category.choices)
    last_updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="inventory_updates",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Inventory Item")
        verbose_name_plural = _("Inventory Items")
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.quantity} {self.unit})"

    @property
    def is_low_stock(self):
        return self.quantity <= self.min_threshold
