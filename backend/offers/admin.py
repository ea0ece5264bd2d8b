from django.contrib import admin

from .models import Offer


@admin.register(Offer)
class OfferAdmin(admin.ModelAdmin):
    list_display = ("title", "discount_type", "discount_value", "applicable_to", "target_id", "is_active", "valid_until")
    list_filter = ("discount_type", "applicable_to", "is_active")
    search_fields = ("title", "target_id")
    readonly_fields = ("created_by", "created_at", "updated_at")
