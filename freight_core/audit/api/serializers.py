# freight_core/audit/api/serializers.py
from rest_framework import serializers

from freight_core.audit.export import resource_label
from freight_core.audit.models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField()
    user_email = serializers.SerializerMethodField()
    resource = serializers.SerializerMethodField()

    class Meta:
        model = AuditLog
        fields = [
            "id",
            "actor",
            "user_name",
            "user_email",
            "role",
            "action",
            "entity_type",
            "entity_id",
            "resource",
            "description",
            "metadata",
            "ip_address",
            "user_agent",
            "created_at",
        ]
        read_only_fields = fields

    def get_user_name(self, obj) -> str:
        return obj.actor.name if obj.actor_id else "System"

    def get_user_email(self, obj) -> str:
        return obj.actor.email if obj.actor_id else ""

    def get_resource(self, obj) -> str:
        return resource_label(obj)
