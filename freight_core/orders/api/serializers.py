# freight_core/orders/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from freight_core.common.api.serializers import FieldAliasMixin, TimelineEntrySerializer
from freight_core.common.workflow import read_timeline
from freight_core.iam.models import User
from freight_core.iam.api.serializers import UserMiniSerializer
from freight_core.orders.models import Order, OrderStatus
from freight_core.quotations.models import Quotation


class QuotationRefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Quotation
        fields = ["id", "quote_id", "status", "total_amount"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    customer = UserMiniSerializer(read_only=True)
    supplier = UserMiniSerializer(read_only=True)
    quotation = QuotationRefSerializer(read_only=True)
    status_timeline = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_no",
            "customer",
            "supplier",
            "quotation",
            "status",
            "status_timeline",
            "origin_country",
            "destination_port",
            "invoice_value",
            "currency",
            "expected_arrival_date",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_status_timeline(self, obj):
        return TimelineEntrySerializer(read_timeline(obj), many=True).data


class OrderWriteSerializer(FieldAliasMixin, serializers.Serializer):
    field_aliases = {
        "customer_id": "customer",
        "supplier_id": "supplier",
        "quotation_id": "quotation",
    }

    customer = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    supplier = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), required=False, allow_null=True)
    quotation = serializers.PrimaryKeyRelatedField(queryset=Quotation.objects.all(), required=False, allow_null=True)
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    origin_country = serializers.CharField(max_length=80, required=False, allow_blank=True, allow_null=True)
    destination_port = serializers.CharField(max_length=120, required=False, allow_blank=True, allow_null=True)
    invoice_value = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    currency = serializers.CharField(min_length=3, max_length=3, required=False)
    expected_arrival_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_currency(self, value: str) -> str:
        return value.upper()


class OrderTimelineSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    order_no = serializers.CharField()
    status = serializers.CharField()
    timeline = TimelineEntrySerializer(many=True)
