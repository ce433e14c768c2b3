from django.contrib import admin

from freight_core.orders.models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_no", "customer", "supplier", "status", "invoice_value", "currency", "deleted_at")
    list_filter = ("status", "currency")
    search_fields = ("order_no", "customer__name", "customer__email", "supplier__name")
    readonly_fields = ("order_no", "status_timeline")
