# freight_core/clearances/selectors.py
from __future__ import annotations

from typing import Mapping

import django_filters
from django.db.models import Q, QuerySet

from freight_core.clearances.models import Clearance, ClearanceDocKey, ClearanceDocument, ClearanceStatus
from freight_core.common.listing import ListingFilterSet
from freight_core.common.roles import RoleName, user_role


class ClearanceFilter(ListingFilterSet):
    search_fields = (
        "clearance_no",
        "arrival_port",
        "shipment__shipment_no",
        "shipment__tracking_no",
        "shipment__customer__name",
        "shipment__customer__company__company_name",
        "cha__name",
        "cha__email",
    )

    status = django_filters.ChoiceFilter(choices=ClearanceStatus.choices)

    class Meta:
        model = Clearance
        fields = ["status"]


def clearances_qs() -> QuerySet[Clearance]:
    return Clearance.objects.select_related(
        "shipment",
        "shipment__customer",
        "shipment__order",
        "cha",
        "cha__role",
        "cha__company",
    ).prefetch_related("documents")


def clearances_for(actor) -> QuerySet[Clearance]:
    qs = clearances_qs()
    if user_role(actor) == RoleName.CUSTOMER:
        qs = qs.filter(Q(shipment__customer=actor) | Q(shipment__order__customer=actor))
    return qs


def list_clearances(*, actor, params: Mapping | None = None) -> QuerySet[Clearance]:
    return ClearanceFilter(params or {}, queryset=clearances_for(actor)).qs.order_by("-created_at", "-id")


def document_checklist(clearance: Clearance) -> list[dict]:
    """
    Every known document slot, in display order, with the uploaded file if any.
    """
    uploaded = {d.doc_key: d for d in clearance.documents.all()}
    return [
        {
            "doc_key": key.value,
            "doc_type": key.label,
            "uploaded": key.value in uploaded,
            "document": uploaded.get(key.value),
        }
        for key in ClearanceDocKey
    ]


def get_clearance_document(clearance: Clearance, doc_key: str) -> ClearanceDocument | None:
    return ClearanceDocument.objects.filter(clearance=clearance, doc_key=doc_key).first()
