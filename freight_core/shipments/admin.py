from django.contrib import admin

from freight_core.shipments.models import Shipment, ShipmentDocument


class ShipmentDocumentInline(admin.TabularInline):
    model = ShipmentDocument
    extra = 0
    readonly_fields = ("file_name", "mime_type", "file_size", "uploaded_by", "created_at")


@admin.register(Shipment)
class ShipmentAdmin(admin.ModelAdmin):
    list_display = ("shipment_no", "order", "customer", "status", "carrier_name", "tracking_no", "eta", "deleted_at")
    list_filter = ("status",)
    search_fields = ("shipment_no", "tracking_no", "carrier_name", "order__order_no")
    readonly_fields = ("shipment_no", "status_timeline")
    inlines = [ShipmentDocumentInline]
