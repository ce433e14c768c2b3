# freight_core/quotations/models.py
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from freight_core.common.models import SoftDeleteModel, TimeStampedModel


class QuotationStatus(models.TextChoices):
    DRAFT = "Draft", "Draft"
    SENT = "Sent", "Sent"
    APPROVED = "Approved", "Approved"
    REJECTED = "Rejected", "Rejected"
    CHANGES_REQUESTED = "ChangesRequested", "Changes Requested"


# Statuses a customer may move their own quotation into
CUSTOMER_RESPONSES = (
    QuotationStatus.APPROVED,
    QuotationStatus.REJECTED,
    QuotationStatus.CHANGES_REQUESTED,
)


class Quotation(SoftDeleteModel):
    quote_id = models.CharField(max_length=32, unique=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="quotations",
    )

    date = models.DateField(default=timezone.localdate)
    valid_until = models.DateField()

    status = models.CharField(
        max_length=24,
        choices=QuotationStatus.choices,
        default=QuotationStatus.DRAFT,
        db_index=True,
    )
    terms_and_conditions = models.TextField(blank=True, null=True)
    customer_note = models.TextField(blank=True, null=True)

    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        db_table = "quotations_quotation"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "status"]),
        ]

    def __str__(self) -> str:
        return self.quote_id


class QuotationItem(TimeStampedModel):
    quotation = models.ForeignKey(Quotation, on_delete=models.CASCADE, related_name="items")
    description = models.CharField(max_length=500)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit = models.CharField(max_length=32, default="Pieces")
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        db_table = "quotations_quotation_item"
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.description} x{self.quantity}"
