# freight_core/shipments/selectors.py
from __future__ import annotations

from typing import Mapping

import django_filters
from django.db.models import Q, QuerySet

from freight_core.common.listing import ListingFilterSet, count_by
from freight_core.common.roles import RoleName, user_role
from freight_core.shipments.models import Shipment, ShipmentDocument, ShipmentStatus


class ShipmentFilter(ListingFilterSet):
    search_fields = (
        "shipment_no",
        "tracking_no",
        "carrier_name",
        "origin",
        "destination",
        "customer__name",
        "customer__email",
        "customer__company__company_name",
        "order__order_no",
        "order__customer__name",
        "order__customer__email",
        "order__customer__company__company_name",
    )

    status = django_filters.ChoiceFilter(choices=ShipmentStatus.choices)

    class Meta:
        model = Shipment
        fields = ["status"]


def shipments_qs() -> QuerySet[Shipment]:
    return Shipment.objects.select_related(
        "customer",
        "customer__role",
        "customer__company",
        "order",
        "order__customer",
    ).prefetch_related("documents")


def shipments_for(actor, qs: QuerySet[Shipment] | None = None) -> QuerySet[Shipment]:
    """
    Customers see shipments addressed to them or raised against their orders.
    """
    qs = shipments_qs() if qs is None else qs
    if user_role(actor) == RoleName.CUSTOMER:
        qs = qs.filter(Q(customer=actor) | Q(order__customer=actor))
    return qs


def list_shipments(*, actor, params: Mapping | None = None) -> QuerySet[Shipment]:
    return ShipmentFilter(params or {}, queryset=shipments_for(actor)).qs.order_by("-created_at", "-id")


def shipment_status_stats(actor) -> dict[str, int]:
    # Counted over the actor's visible shipments, before search/status filters
    return count_by(shipments_for(actor, Shipment.objects.all()), "status", ShipmentStatus.values)


def get_shipment_document(shipment: Shipment, document_id) -> ShipmentDocument | None:
    if not str(document_id).isdigit():
        return None
    return ShipmentDocument.objects.filter(shipment=shipment, pk=document_id).first()
