# freight_core/iam/selectors.py
from __future__ import annotations

from typing import Mapping

import django_filters
from django.db.models import QuerySet
from rest_framework.exceptions import ValidationError

from freight_core.common.listing import ListingFilterSet, count_by, is_blank_or_all
from freight_core.common.roles import RoleName, normalize_role
from freight_core.iam.models import Role, User, UserStatus


def resolve_role(value, *, field: str = "role") -> Role:
    """
    Accepts a role id ("3", 3) or a role name in any case/separator style
    ("Back Office", "back-office", "back_office").
    """
    if isinstance(value, Role):
        return value

    raw = "" if value is None else str(value).strip()
    if not raw:
        raise ValidationError({field: ["This field is required."]})

    role = None
    if raw.isdigit():
        role = Role.objects.filter(pk=int(raw)).first()
    if role is None:
        role = Role.objects.filter(slug=normalize_role(raw)).first()

    if role is None:
        raise ValidationError({field: [f'Role "{raw}" does not exist.']})
    return role


def roles_qs() -> QuerySet[Role]:
    return Role.objects.all().order_by("name")


def users_qs() -> QuerySet[User]:
    return User.objects.select_related("role", "company")


class UserFilter(ListingFilterSet):
    search_fields = ("name", "email", "company__company_name")

    role = django_filters.CharFilter(method="filter_role")
    status = django_filters.ChoiceFilter(choices=UserStatus.choices)

    class Meta:
        model = User
        fields = ["role", "status"]

    def filter_role(self, queryset, name, value):
        if is_blank_or_all(value):
            return queryset
        token = normalize_role(value)
        if not Role.objects.filter(slug=token).exists():
            return queryset
        return queryset.filter(role__slug=token)


def list_users(*, params: Mapping | None = None) -> QuerySet[User]:
    return UserFilter(params or {}, queryset=users_qs()).qs.order_by("-created_at", "-id")


def user_role_stats() -> dict[str, int]:
    qs = User.objects.all()
    stats = count_by(qs, "role__slug", RoleName.values)
    return {"total": qs.count(), **{k: stats.get(k, 0) for k in RoleName.values}}
