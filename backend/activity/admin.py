from django.contrib import admin

from .models import Activity


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "action", "actor", "details", "ip")
    list_filter = ("action",)
    search_fields = ("details", "actor__email")
    readonly_fields = ("actor", "action", "details", "metadata", "ip", "timestamp")
    ordering = ("-timestamp",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
