# freight_core/shipments/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models

from freight_core.common.models import SoftDeleteModel, TimeStampedModel


class ShipmentStatus(models.TextChoices):
    DEPARTED = "Departed", "Departed"
    IN_TRANSIT = "In Transit", "In Transit"
    ARRIVED_AT_PORT = "Arrived at Port", "Arrived at Port"
    CUSTOMS_CLEARANCE = "Customs Clearance", "Customs Clearance"
    DELIVERED = "Delivered", "Delivered"


class Shipment(SoftDeleteModel):
    shipment_no = models.CharField(max_length=32, unique=True)

    order = models.ForeignKey("orders.Order", on_delete=models.PROTECT, related_name="shipments")
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="shipments",
    )

    status = models.CharField(
        max_length=32,
        choices=ShipmentStatus.choices,
        default=ShipmentStatus.IN_TRANSIT,
        db_index=True,
    )
    status_timeline = models.JSONField(default=list, blank=True)

    origin = models.CharField(max_length=120, blank=True, null=True)
    destination = models.CharField(max_length=120, blank=True, null=True)
    carrier_name = models.CharField(max_length=120, blank=True, null=True)
    tracking_no = models.CharField(max_length=120, blank=True, null=True, db_index=True)
    eta = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True, null=True)

    class Meta:
        db_table = "shipments_shipment"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["customer", "status"]),
        ]

    def __str__(self) -> str:
        return self.shipment_no


def shipment_document_path(instance: "ShipmentDocument", filename: str) -> str:
    return f"shipments/{instance.shipment.shipment_no}/{filename}"


class ShipmentDocument(TimeStampedModel):
    shipment = models.ForeignKey(Shipment, on_delete=models.CASCADE, related_name="documents")
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    file_name = models.CharField(max_length=255)
    file = models.FileField(upload_to=shipment_document_path, max_length=500)
    mime_type = models.CharField(max_length=120, blank=True, null=True)
    file_size = models.PositiveBigIntegerField(null=True, blank=True)

    class Meta:
        db_table = "shipments_shipment_document"
        ordering = ["id"]

    def __str__(self) -> str:
        return self.file_name
