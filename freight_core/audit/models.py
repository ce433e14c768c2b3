# freight_core/audit/models.py
from django.conf import settings
from django.db import models


class AuditAction(models.TextChoices):
    CREATE = "Create", "Create"
    UPDATE = "Update", "Update"
    DELETE = "Delete", "Delete"
    APPROVE = "Approve", "Approve"
    REJECT = "Reject", "Reject"
    SEND = "Send", "Send"
    LOGIN = "Login", "Login"
    LOGOUT = "Logout", "Logout"


class ImmutableAuditLogError(Exception):
    pass


class AuditLog(models.Model):
    """
    Immutable audit record.
    Rows are written once through AuditService and never updated or deleted
    by the application.
    """
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="audit_logs",
        null=True,
        blank=True,
    )
    role = models.CharField(max_length=255, blank=True, db_index=True)  # actor role name at the time

    action = models.CharField(max_length=32, choices=AuditAction.choices, db_index=True)
    entity_type = models.CharField(max_length=128, blank=True, db_index=True)  # e.g. "Quotation"
    entity_id = models.CharField(max_length=64, blank=True, db_index=True)
    description = models.TextField(blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=512, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "audit_audit_log"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["entity_type", "entity_id"]),
            models.Index(fields=["action", "created_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.action} {self.entity_type} #{self.entity_id}"

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise ImmutableAuditLogError("Audit log entries cannot be modified.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableAuditLogError("Audit log entries cannot be deleted.")
