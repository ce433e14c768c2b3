from django.contrib import admin

from freight_core.quotations.models import Quotation, QuotationItem


class QuotationItemInline(admin.TabularInline):
    model = QuotationItem
    extra = 0
    readonly_fields = ("total",)


@admin.register(Quotation)
class QuotationAdmin(admin.ModelAdmin):
    list_display = ("quote_id", "user", "date", "valid_until", "status", "total_amount", "deleted_at")
    list_filter = ("status",)
    search_fields = ("quote_id", "user__name", "user__email")
    readonly_fields = ("quote_id", "total_amount")
    inlines = [QuotationItemInline]
