# freight_core/audit/selectors.py
from __future__ import annotations

from typing import Mapping

import django_filters
from django.db.models import Q, QuerySet

from freight_core.audit.models import AuditAction, AuditLog
from freight_core.common.listing import ListingFilterSet, count_by, is_blank_or_all
from freight_core.common.roles import normalize_role


class AuditLogFilter(ListingFilterSet):
    """
    user:   numeric -> actor id, otherwise actor name/email contains
    search: action, role, entity type, description, actor name/email
    role:   matches the recorded role name or the actor's current role
    action: one of AuditAction ("all" ignored)
    """
    search_fields = (
        "action",
        "role",
        "entity_type",
        "description",
        "actor__name",
        "actor__email",
    )

    user = django_filters.CharFilter(method="filter_user")
    role = django_filters.CharFilter(method="filter_role")
    action = django_filters.ChoiceFilter(choices=AuditAction.choices)

    class Meta:
        model = AuditLog
        fields = ["user", "role", "action"]

    def filter_user(self, queryset, name, value):
        if is_blank_or_all(value):
            return queryset
        term = value.strip()
        if term.isdigit():
            return queryset.filter(actor_id=int(term))
        return queryset.filter(Q(actor__name__icontains=term) | Q(actor__email__icontains=term))

    def filter_role(self, queryset, name, value):
        if is_blank_or_all(value):
            return queryset
        token = normalize_role(value)
        spaced = token.replace("_", " ")
        return queryset.filter(
            Q(role__iexact=spaced) | Q(role__iexact=token) | Q(actor__role__slug=token)
        )


def audit_logs_qs() -> QuerySet[AuditLog]:
    return AuditLog.objects.select_related("actor", "actor__role")


def list_audit_logs(*, params: Mapping | None = None) -> QuerySet[AuditLog]:
    return AuditLogFilter(params or {}, queryset=audit_logs_qs()).qs.order_by("-created_at", "-id")


def audit_action_stats(queryset: QuerySet[AuditLog]) -> dict[str, int]:
    return count_by(queryset, "action", AuditAction.values)
