# freight_core/quotations/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from freight_core.common.api.serializers import FieldAliasMixin
from freight_core.iam.api.serializers import UserMiniSerializer
from freight_core.iam.models import User
from freight_core.quotations.models import Quotation, QuotationItem, QuotationStatus


class QuotationItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuotationItem
        fields = ["id", "description", "quantity", "unit", "unit_price", "total"]
        read_only_fields = fields


class QuotationSerializer(serializers.ModelSerializer):
    user = UserMiniSerializer(read_only=True)
    items = QuotationItemSerializer(many=True, read_only=True)

    class Meta:
        model = Quotation
        fields = [
            "id",
            "quote_id",
            "user",
            "date",
            "valid_until",
            "status",
            "terms_and_conditions",
            "customer_note",
            "total_amount",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class QuotationItemWriteSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=500)
    quantity = serializers.IntegerField(min_value=1)
    unit = serializers.CharField(max_length=32, required=False, allow_blank=True, allow_null=True)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class QuotationWriteSerializer(FieldAliasMixin, serializers.Serializer):
    """
    `user` (or `user_id`) is the customer the quotation is addressed to.
    Sending `items` replaces the whole item set and recomputes the total.
    """
    field_aliases = {"user_id": "user"}

    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    date = serializers.DateField()
    valid_until = serializers.DateField()
    status = serializers.ChoiceField(choices=QuotationStatus.choices, required=False)
    terms_and_conditions = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    items = QuotationItemWriteSerializer(many=True, allow_empty=False)

    def validate(self, attrs):
        date = attrs.get("date", getattr(self.instance, "date", None))
        valid_until = attrs.get("valid_until", getattr(self.instance, "valid_until", None))
        if date and valid_until and valid_until < date:
            raise serializers.ValidationError({"valid_until": ["Must be on or after the quotation date."]})
        return attrs


class QuotationResponseSerializer(serializers.Serializer):
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)
