from django.contrib import admin

from freight_core.leads.models import Lead


@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):
    list_display = ("company", "contact", "email", "status", "value", "added_date", "deleted_at")
    list_filter = ("status",)
    search_fields = ("company", "contact", "email", "phone")
    ordering = ("-created_at",)
