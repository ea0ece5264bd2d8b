from django.contrib import admin

from .models import Dish


@admin.register(Dish)
class DishAdmin(admin.ModelAdmin):
    list_display = ("name", "emoji", "category", "price", "is_available", "updated_at")
    list_filter = ("is_available", "category")
    search_fields = ("name", "category")
    list_editable = ("is_available",)
    readonly_fields = ("created_by", "created_at", "updated_at")
