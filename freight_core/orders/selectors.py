# freight_core/orders/selectors.py
from __future__ import annotations

from typing import Mapping

import django_filters
from django.db.models import QuerySet

from freight_core.common.listing import ListingFilterSet
from freight_core.common.roles import RoleName, user_role
from freight_core.orders.models import Order, OrderStatus


class OrderFilter(ListingFilterSet):
    search_fields = (
        "order_no",
        "customer__name",
        "customer__email",
        "customer__company__company_name",
        "supplier__name",
        "supplier__email",
        "supplier__company__company_name",
    )

    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)

    class Meta:
        model = Order
        fields = ["status"]


def orders_qs() -> QuerySet[Order]:
    return Order.objects.select_related(
        "customer",
        "customer__role",
        "customer__company",
        "supplier",
        "supplier__role",
        "supplier__company",
        "quotation",
    )


def orders_for(actor) -> QuerySet[Order]:
    """
    Customers see their own orders, suppliers the ones they supply.
    """
    qs = orders_qs()
    role = user_role(actor)
    if role == RoleName.CUSTOMER:
        qs = qs.filter(customer=actor)
    elif role == RoleName.SUPPLIER:
        qs = qs.filter(supplier=actor)
    return qs


def list_orders(*, actor, params: Mapping | None = None) -> QuerySet[Order]:
    return OrderFilter(params or {}, queryset=orders_for(actor)).qs.order_by("-created_at", "-id")
