# freight_core/leads/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from freight_core.common.api.serializers import FieldAliasMixin
from freight_core.leads.models import Lead, LeadStatus


class LeadSerializer(serializers.ModelSerializer):
    class Meta:
        model = Lead
        fields = [
            "id",
            "company",
            "contact",
            "email",
            "phone",
            "value",
            "added_date",
            "last_contact",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class LeadWriteSerializer(FieldAliasMixin, serializers.Serializer):
    # camelCase spellings still sent by older clients
    field_aliases = {
        "addedDate": "added_date",
        "lastContact": "last_contact",
    }

    company = serializers.CharField(max_length=255)
    contact = serializers.CharField(max_length=255)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=32)
    value = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True, min_value=0)
    added_date = serializers.DateField(required=False, allow_null=True)
    last_contact = serializers.DateField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=LeadStatus.choices, required=False)
