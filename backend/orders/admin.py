from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("dish", "name", "unit_price", "quantity", "emoji", "get_line_item_total")
    fields = ("dish", "name", "emoji", "quantity", "unit_price", "get_line_item_total")
    can_delete = False

    def get_line_item_total(self, obj):
        return f"₹{obj.line_total:,.2f}"

    get_line_item_total.short_description = "Line Item Total"

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Read-mostly admin view. Status and payment changes go through the API
    so that transitions, notifications and the activity log stay consistent.
    """

    list_display = (
        "short_id",
        "customer",
        "status",
        "delivery_type",
        "total_amount",
        "payment_verified",
        "utr_number",
        "created_at",
    )
    list_filter = ("status", "delivery_type", "payment_verified")
    search_fields = ("id", "customer__email", "utr_number", "transaction_id")
    ordering = ("-created_at",)
    inlines = [OrderItemInline]
    readonly_fields = [field.name for field in Order._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
