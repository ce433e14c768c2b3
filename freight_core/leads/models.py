# freight_core/leads/models.py
from __future__ import annotations

from django.db import models

from freight_core.common.models import SoftDeleteModel


class LeadStatus(models.TextChoices):
    NEW = "new", "New"
    CONTACTED = "contacted", "Contacted"
    QUALIFIED = "qualified", "Qualified"
    CONVERTED = "converted", "Converted"


class Lead(SoftDeleteModel):
    company = models.CharField(max_length=255)
    contact = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=32, blank=True)
    value = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    added_date = models.DateField(null=True, blank=True, db_index=True)
    last_contact = models.DateField(null=True, blank=True)

    status = models.CharField(max_length=16, choices=LeadStatus.choices, default=LeadStatus.NEW, db_index=True)

    class Meta:
        db_table = "leads_lead"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.company} ({self.get_status_display()})"
