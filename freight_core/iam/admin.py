# freight_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from freight_core.iam.models import CompanyDetail, Role, User


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "created_at")
    search_fields = ("name", "slug")
    readonly_fields = ("slug",)
    ordering = ("name",)


class CompanyDetailInline(admin.StackedInline):
    model = CompanyDetail
    extra = 0
    can_delete = False


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    # Accounts are created through the API / createsuperuser so passwords get hashed
    list_display = ("email", "name", "role", "status", "is_staff", "deleted_at")
    list_filter = ("role", "status", "is_staff")
    search_fields = ("email", "name", "company__company_name")
    ordering = ("-created_at",)
    inlines = [CompanyDetailInline]

    fields = ("email", "name", "role", "status", "is_staff", "is_superuser", "is_active", "last_login", "created_at", "deleted_at")
    readonly_fields = ("is_active", "last_login", "created_at", "deleted_at")

    def get_queryset(self, request):
        return User.all_objects.select_related("role")

    def has_add_permission(self, request):
        return False
