# freight_core/leads/selectors.py
from __future__ import annotations

from typing import Mapping

import django_filters
from django.db.models import QuerySet

from freight_core.common.listing import ListingFilterSet
from freight_core.leads.models import Lead, LeadStatus


class LeadFilter(ListingFilterSet):
    search_fields = ("company", "contact", "email", "phone")
    date_field = ("added_date", False)

    status = django_filters.ChoiceFilter(choices=LeadStatus.choices)

    class Meta:
        model = Lead
        fields = ["status"]


def leads_qs() -> QuerySet[Lead]:
    return Lead.objects.all()


def list_leads(*, params: Mapping | None = None) -> QuerySet[Lead]:
    return LeadFilter(params or {}, queryset=leads_qs()).qs.order_by("-created_at", "-id")
