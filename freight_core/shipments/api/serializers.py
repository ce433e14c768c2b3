# freight_core/shipments/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from freight_core.common.api.serializers import FieldAliasMixin, TimelineEntrySerializer
from freight_core.common.storage import MAX_UPLOAD_SIZE
from freight_core.common.workflow import read_timeline
from freight_core.iam.api.serializers import UserMiniSerializer
from freight_core.iam.models import User
from freight_core.orders.models import Order
from freight_core.shipments.models import Shipment, ShipmentDocument, ShipmentStatus


class ShipmentDocumentSerializer(serializers.ModelSerializer):
    file_url = serializers.SerializerMethodField()

    class Meta:
        model = ShipmentDocument
        fields = ["id", "file_name", "file_url", "mime_type", "file_size", "uploaded_by", "created_at"]
        read_only_fields = fields

    def get_file_url(self, obj) -> str | None:
        if not obj.file:
            return None
        url = obj.file.url
        request = self.context.get("request")
        return request.build_absolute_uri(url) if request is not None else url


class OrderRefSerializer(serializers.ModelSerializer):
    customer = UserMiniSerializer(read_only=True)

    class Meta:
        model = Order
        fields = ["id", "order_no", "status", "customer"]
        read_only_fields = fields


class ShipmentSerializer(serializers.ModelSerializer):
    order = OrderRefSerializer(read_only=True)
    customer = UserMiniSerializer(read_only=True)
    documents = ShipmentDocumentSerializer(many=True, read_only=True)
    status_timeline = serializers.SerializerMethodField()

    class Meta:
        model = Shipment
        fields = [
            "id",
            "shipment_no",
            "order",
            "customer",
            "status",
            "status_timeline",
            "origin",
            "destination",
            "carrier_name",
            "tracking_no",
            "eta",
            "notes",
            "documents",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_status_timeline(self, obj):
        return TimelineEntrySerializer(read_timeline(obj), many=True).data


class ShipmentWriteSerializer(FieldAliasMixin, serializers.Serializer):
    field_aliases = {
        "order_id": "order",
        "customer_id": "customer",
    }

    order = serializers.PrimaryKeyRelatedField(queryset=Order.objects.all())
    customer = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), required=False, allow_null=True)
    status = serializers.ChoiceField(choices=ShipmentStatus.choices, required=False)
    origin = serializers.CharField(max_length=120, required=False, allow_blank=True, allow_null=True)
    destination = serializers.CharField(max_length=120, required=False, allow_blank=True, allow_null=True)
    carrier_name = serializers.CharField(max_length=120, required=False, allow_blank=True, allow_null=True)
    tracking_no = serializers.CharField(max_length=120, required=False, allow_blank=True, allow_null=True)
    eta = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ShipmentDocumentUploadSerializer(serializers.Serializer):
    documents = serializers.ListField(child=serializers.FileField(), allow_empty=False)

    def validate_documents(self, files):
        too_big = [f.name for f in files if f.size > MAX_UPLOAD_SIZE]
        if too_big:
            raise serializers.ValidationError(
                f"Files may not be larger than 10 MB: {', '.join(too_big)}."
            )
        return files


class ShipmentTimelineSerializer(serializers.Serializer):
    shipment_id = serializers.IntegerField()
    shipment_no = serializers.CharField()
    status = serializers.CharField()
    timeline = TimelineEntrySerializer(many=True)
