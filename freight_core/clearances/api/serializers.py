# freight_core/clearances/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from freight_core.clearances.models import Clearance, ClearanceDocKey, ClearanceDocument, ClearanceStatus
from freight_core.clearances.selectors import document_checklist
from freight_core.common.api.serializers import FieldAliasMixin, TimelineEntrySerializer
from freight_core.common.storage import MAX_UPLOAD_SIZE
from freight_core.common.workflow import read_timeline
from freight_core.iam.api.serializers import UserMiniSerializer
from freight_core.iam.models import User
from freight_core.shipments.models import Shipment


class ClearanceDocumentSerializer(serializers.ModelSerializer):
    file_url = serializers.SerializerMethodField()

    class Meta:
        model = ClearanceDocument
        fields = [
            "id",
            "doc_key",
            "doc_type",
            "original_name",
            "file_url",
            "mime_type",
            "file_size",
            "uploaded_by",
            "uploaded_at",
        ]
        read_only_fields = fields

    def get_file_url(self, obj) -> str | None:
        if not obj.file:
            return None
        url = obj.file.url
        request = self.context.get("request")
        return request.build_absolute_uri(url) if request is not None else url


class ChecklistItemSerializer(serializers.Serializer):
    doc_key = serializers.CharField()
    doc_type = serializers.CharField()
    uploaded = serializers.BooleanField()
    document = ClearanceDocumentSerializer(allow_null=True)


class ShipmentRefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Shipment
        fields = ["id", "shipment_no", "status", "tracking_no"]
        read_only_fields = fields


class ClearanceSerializer(serializers.ModelSerializer):
    shipment = ShipmentRefSerializer(read_only=True)
    cha = UserMiniSerializer(read_only=True)
    status_timeline = serializers.SerializerMethodField()
    documents = serializers.SerializerMethodField()

    class Meta:
        model = Clearance
        fields = [
            "id",
            "clearance_no",
            "shipment",
            "cha",
            "arrival_port",
            "arrival_date",
            "duty_amount",
            "currency",
            "status",
            "status_timeline",
            "clearance_date",
            "released_date",
            "documents",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_status_timeline(self, obj):
        return TimelineEntrySerializer(read_timeline(obj), many=True).data

    def get_documents(self, obj):
        return ChecklistItemSerializer(document_checklist(obj), many=True, context=self.context).data


class ClearanceWriteSerializer(FieldAliasMixin, serializers.Serializer):
    field_aliases = {
        "shipment_id": "shipment",
        "cha_id": "cha",
    }

    shipment = serializers.PrimaryKeyRelatedField(queryset=Shipment.objects.all())
    cha = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), required=False, allow_null=True)
    arrival_port = serializers.CharField(max_length=150, required=False, allow_blank=True, allow_null=True)
    arrival_date = serializers.DateField(required=False, allow_null=True)
    duty_amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0, required=False, allow_null=True)
    currency = serializers.CharField(min_length=3, max_length=3, required=False)
    status = serializers.ChoiceField(choices=ClearanceStatus.choices, required=False)
    clearance_date = serializers.DateField(required=False, allow_null=True)
    released_date = serializers.DateField(required=False, allow_null=True)

    def validate_currency(self, value: str) -> str:
        return value.upper()


class ClearanceDocumentUploadSerializer(serializers.Serializer):
    doc_key = serializers.ChoiceField(choices=ClearanceDocKey.choices)
    file = serializers.FileField()

    def validate_file(self, upload):
        if upload.size > MAX_UPLOAD_SIZE:
            raise serializers.ValidationError("The file may not be larger than 10 MB.")
        return upload


class ClearanceTimelineSerializer(serializers.Serializer):
    clearance_id = serializers.IntegerField()
    clearance_no = serializers.CharField()
    status = serializers.CharField()
    timeline = TimelineEntrySerializer(many=True)
