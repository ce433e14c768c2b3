# freight_core/quotations/selectors.py
from __future__ import annotations

from typing import Mapping

import django_filters
from django.db.models import QuerySet

from freight_core.common.listing import ListingFilterSet
from freight_core.common.roles import RoleName, user_role
from freight_core.quotations.models import Quotation, QuotationStatus


class QuotationFilter(ListingFilterSet):
    search_fields = (
        "quote_id",
        "user__name",
        "user__email",
        "user__company__company_name",
    )

    status = django_filters.ChoiceFilter(choices=QuotationStatus.choices)

    class Meta:
        model = Quotation
        fields = ["status"]


def quotations_qs() -> QuerySet[Quotation]:
    return Quotation.objects.select_related("user", "user__role", "user__company").prefetch_related("items")


def quotations_for(actor) -> QuerySet[Quotation]:
    """
    Customers only ever see quotations addressed to them.
    """
    qs = quotations_qs()
    if user_role(actor) == RoleName.CUSTOMER:
        qs = qs.filter(user=actor)
    return qs


def list_quotations(*, actor, params: Mapping | None = None) -> QuerySet[Quotation]:
    return QuotationFilter(params or {}, queryset=quotations_for(actor)).qs.order_by("-created_at", "-id")
