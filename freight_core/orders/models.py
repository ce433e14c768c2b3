# freight_core/orders/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models

from freight_core.common.models import SoftDeleteModel


class OrderStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    CONFIRMED = "confirmed", "Confirmed"
    IN_TRANSIT = "in_transit", "In Transit"
    ARRIVED = "arrived", "Arrived"
    CLEARANCE = "clearance", "Clearance"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


class Order(SoftDeleteModel):
    order_no = models.CharField(max_length=32, unique=True)

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    supplier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="supplied_orders",
    )
    quotation = models.ForeignKey(
        "quotations.Quotation",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )

    status = models.CharField(max_length=16, choices=OrderStatus.choices, default=OrderStatus.DRAFT, db_index=True)
    status_timeline = models.JSONField(default=list, blank=True)

    origin_country = models.CharField(max_length=80, blank=True, null=True)
    destination_port = models.CharField(max_length=120, blank=True, null=True)
    invoice_value = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    currency = models.CharField(max_length=3, default="USD")
    expected_arrival_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True, null=True)

    class Meta:
        db_table = "orders_order"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["customer", "status"]),
            models.Index(fields=["supplier", "status"]),
        ]

    def __str__(self) -> str:
        return self.order_no
