from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Offer(models.Model):
    class DiscountType(models.TextChoices):
        PERCENTAGE = "percentage", _("Percentage")
        FLAT = "flat", _("Flat Amount")

    class ApplicableTo(models.TextChoices):
        ALL = "all", _("All Dishes")
        CATEGORY = "category", _("Category")
        DISH = "dish", _("Single Dish")

    title = models.CharField(max_length=120)
    description = models.TextField(blank=True)
    discount_type = models.CharField(
        max_length=20, choices=DiscountType.choices, default=DiscountType.PERCENTAGE
    )
    discount_value = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        help_text=_("Percentage (0-100) or flat currency amount, depending on type."),
    )
    applicable_to = models.CharField(
        max_length=20, choices=ApplicableTo.choices, default=ApplicableTo.ALL
    )
    target_id = models.CharField(
        max_length=120,
        default="all",
        help_text=_("Category name or dish id, depending on applicable_to."),
    )
    is_active = models.BooleanField(default=True, db_index=True)
    valid_until = models.DateTimeField(
        null=True, blank=True, help_text=_("Offer stops applying after this moment.")
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="offers_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["is_active", "valid_until"], name="offers_active_valid_idx"),
        ]

    def __str__(self):
        return f"{self.title} ({self.get_discount_type_display()} on {self.get_applicable_to_display()})"

    def is_currently_active(self, now=None):
        """Active flag set and not past valid_until."""
        if not self.is_active:
            return False
        now = now or timezone.now()
        if self.valid_until and now > self.valid_until:
            return False
        return True

    def applies_to(self, dish) -> bool:
        if self.applicable_to == self.ApplicableTo.ALL:
            return True
        if self.applicable_to == self.ApplicableTo.CATEGORY:
            return (dish.category or "").strip().lower() == (self.target_id or "").strip().lower()
        if self.applicable_to == self.ApplicableTo.DISH:
            return str(dish.pk) == str(self.target_id).strip()
        return False

    def clean(self):
        """Validate discount value based on type."""
        super().clean()

        if self.discount_value is None or self.discount_value <= 0:
            raise ValidationError({"discount_value": "Discount value must be greater than zero."})

        if self.discount_type == self.DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValidationError({"discount_value": "Percentage discount cannot exceed 100%."})

        if self.applicable_to != self.ApplicableTo.ALL and not (self.target_id or "").strip():
            raise ValidationError({"target_id": "A target is required for category or dish offers."})
