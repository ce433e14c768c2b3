from django.contrib import admin

from freight_core.clearances.models import Clearance, ClearanceDocument


class ClearanceDocumentInline(admin.TabularInline):
    model = ClearanceDocument
    extra = 0
    readonly_fields = ("doc_type", "original_name", "mime_type", "file_size", "uploaded_by", "uploaded_at")


@admin.register(Clearance)
class ClearanceAdmin(admin.ModelAdmin):
    list_display = ("clearance_no", "shipment", "cha", "status", "arrival_port", "clearance_date", "released_date")
    list_filter = ("status",)
    search_fields = ("clearance_no", "shipment__shipment_no", "arrival_port")
    readonly_fields = ("clearance_no", "status_timeline")
    inlines = [ClearanceDocumentInline]
