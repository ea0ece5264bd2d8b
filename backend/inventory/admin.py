from django.contrib import admin

from .models import InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "quantity", "unit", "min_threshold", "is_low_stock", "updated_at")
    list_filter = ("category", "unit")
    search_fields = ("name",)
    readonly_fields = ("last_updated_by", "created_at", "updated_at")

    @admin.display(boolean=True, description="Low stock")
    def is_low_stock(self, obj):
        return obj.is_low_stock
