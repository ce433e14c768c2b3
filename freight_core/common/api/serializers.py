# freight_core/common/api/serializers.py
from __future__ import annotations

from rest_framework import serializers


class StatusUpdateSerializer(serializers.Serializer):
    """
    Body of every PATCH {id}/status/ endpoint. Membership of `status` in the
    entity's allowed set is checked by the workflow.
    """
    status = serializers.CharField()
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class TimelineEntrySerializer(serializers.Serializer):
    status = serializers.CharField()
    note = serializers.CharField(allow_null=True)
    changed_at = serializers.DateTimeField()
    changed_by = serializers.IntegerField(allow_null=True)


class FieldAliasMixin:
    """
    Accept alternate spellings for writable fields (`customer_id` for
    `customer`, `addedDate` for `added_date`). The canonical key wins when
    both are sent.
    """
    field_aliases: dict[str, str] = {}

    def to_internal_value(self, data):
        if self.field_aliases and hasattr(data, "copy"):
            data = data.copy()
            for alias, field in self.field_aliases.items():
                if alias in data and field not in data:
                    data[field] = data[alias]
        return super().to_internal_value(data)
