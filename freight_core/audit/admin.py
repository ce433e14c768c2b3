# freight_core/audit/admin.py
from django.contrib import admin

from freight_core.audit.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = (
        "created_at",
        "action",
        "entity_type",
        "entity_id",
        "actor",
        "role",
        "ip_address",
    )
    list_filter = ("action", "entity_type", "role")
    search_fields = ("description", "entity_type", "entity_id", "actor__email")
    readonly_fields = [f.name for f in AuditLog._meta.fields]
    ordering = ("-created_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
