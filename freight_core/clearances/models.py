# freight_core/clearances/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models

from freight_core.common.models import SoftDeleteModel, TimeStampedModel


class ClearanceStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    IN_PROGRESS = "in_progress", "In Progress"
    CLEARED = "cleared", "Cleared"
    RELEASED = "released", "Released"


class ClearanceDocKey(models.TextChoices):
    BILL_OF_ENTRY = "bill_of_entry", "Bill of Entry"
    INVOICE = "invoice", "Invoice Copy"
    PACKING_LIST = "packing_list", "Packing List"
    DUTY_RECEIPT = "duty_receipt", "Duty Payment Receipt"
    RELEASE_ORDER = "release_order", "Release Order"


class Clearance(SoftDeleteModel):
    clearance_no = models.CharField(max_length=32, unique=True)

    shipment = models.ForeignKey("shipments.Shipment", on_delete=models.PROTECT, related_name="clearances")
    cha = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="handled_clearances",
    )

    arrival_port = models.CharField(max_length=150, blank=True, null=True)
    arrival_date = models.DateField(null=True, blank=True)

    duty_amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    currency = models.CharField(max_length=3, default="USD")

    status = models.CharField(
        max_length=16,
        choices=ClearanceStatus.choices,
        default=ClearanceStatus.PENDING,
        db_index=True,
    )
    status_timeline = models.JSONField(default=list, blank=True)
    clearance_date = models.DateField(null=True, blank=True)
    released_date = models.DateField(null=True, blank=True)

    class Meta:
        db_table = "clearances_clearance"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["cha", "status"]),
        ]

    def __str__(self) -> str:
        return self.clearance_no


def clearance_document_path(instance: "ClearanceDocument", filename: str) -> str:
    return f"clearances/{instance.clearance.clearance_no}/{instance.doc_key}/{filename}"


class ClearanceDocument(TimeStampedModel):
    clearance = models.ForeignKey(Clearance, on_delete=models.CASCADE, related_name="documents")
    doc_key = models.CharField(max_length=50, choices=ClearanceDocKey.choices)
    doc_type = models.CharField(max_length=100)

    file = models.FileField(upload_to=clearance_document_path, max_length=500)
    original_name = models.CharField(max_length=255)
    mime_type = models.CharField(max_length=120, blank=True, null=True)
    file_size = models.PositiveBigIntegerField(null=True, blank=True)

    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    uploaded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "clearances_clearance_document"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["clearance", "doc_key"], name="uniq_clearance_doc_key"),
        ]

    def __str__(self) -> str:
        return f"{self.clearance_id}:{self.doc_key}"
