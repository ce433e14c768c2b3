# freight_core/common/workflow.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping

from django.db import models, transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from rest_framework.exceptions import ValidationError

from freight_core.audit.models import AuditAction
from freight_core.audit.services import AuditService, RequestOrigin

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimelineEntry:
    """
    One status change. Stored as an ordered JSON list on the entity; only
    ever appended through `append_timeline`.
    """
    status: str
    changed_at: datetime
    note: str | None = None
    changed_by: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "note": self.note,
            "changed_at": self.changed_at.isoformat(),
            "changed_by": self.changed_by,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TimelineEntry":
        raw = data.get("changed_at")
        changed_at = raw if isinstance(raw, datetime) else parse_datetime(str(raw or ""))
        return cls(
            status=str(data.get("status") or ""),
            note=data.get("note"),
            changed_at=changed_at or timezone.now(),
            changed_by=data.get("changed_by"),
        )


def read_timeline(instance, field_name: str = "status_timeline") -> list[TimelineEntry]:
    return [TimelineEntry.from_dict(item) for item in (getattr(instance, field_name, None) or [])]


def append_timeline(
    instance,
    *,
    status: str,
    note: str | None = None,
    actor=None,
    field_name: str = "status_timeline",
) -> TimelineEntry:
    """
    Appends to the in-memory list; the caller saves `field_name`.
    Prior entries are kept as stored (never rewritten or reordered).
    """
    entry = TimelineEntry(
        status=status,
        note=note or None,
        changed_at=timezone.now(),
        changed_by=getattr(actor, "pk", None),
    )
    existing = list(getattr(instance, field_name, None) or [])
    existing.append(entry.to_dict())
    setattr(instance, field_name, existing)
    return entry


def default_action_for(target_status: str) -> str:
    return AuditAction.UPDATE


@dataclass(frozen=True)
class StatusWorkflow:
    """
    Guarded status transition for one entity type.

    statuses        allowed set for the status field
    timeline_field  JSON list field to append to, or None
    action_for      target status -> audit action
    on_enter        target status -> hook(instance) returning extra fields it changed
    """
    entity_type: str
    statuses: tuple[str, ...]
    status_field: str = "status"
    timeline_field: str | None = None
    label_field: str | None = None
    action_for: Callable[[str], str] = default_action_for
    on_enter: Mapping[str, Callable[[models.Model], Iterable[str]]] = field(default_factory=dict)

    def validate(self, target_status, *, allowed: Iterable[str] | None = None) -> str:
        value = "" if target_status is None else str(target_status).strip()
        choices = tuple(allowed) if allowed is not None else self.statuses

        if not value:
            raise ValidationError({"status": ["This field is required."]})
        if value not in self.statuses or value not in choices:
            raise ValidationError(
                {"status": [f'"{value}" is not a valid status. Allowed: {", ".join(choices)}.']}
            )
        return value

    def describe(self, instance, target_status: str) -> str:
        label = getattr(instance, self.label_field, None) if self.label_field else None
        label = label or f"#{instance.pk}"
        return f"Updated {self.entity_type.lower()} {label} status to {target_status}"

    def transition(
        self,
        instance,
        *,
        target_status,
        note: str | None = None,
        actor=None,
        origin: RequestOrigin | None = None,
        allowed: Iterable[str] | None = None,
        extra_fields: Mapping[str, Any] | None = None,
        description: str | None = None,
    ):
        """
        Validate -> write status (+ timeline, hooks) -> audit.

        Nothing is mutated when validation fails. The audit write happens after
        the status write and can never undo it.
        """
        status_value = self.validate(target_status, allowed=allowed)
        previous = getattr(instance, self.status_field)

        with transaction.atomic():
            setattr(instance, self.status_field, status_value)
            update_fields = [self.status_field]

            if self.timeline_field:
                append_timeline(
                    instance,
                    status=status_value,
                    note=note,
                    actor=actor,
                    field_name=self.timeline_field,
                )
                update_fields.append(self.timeline_field)

            for name, value in (extra_fields or {}).items():
                setattr(instance, name, value)
                update_fields.append(name)

            hook = self.on_enter.get(status_value)
            if hook is not None:
                update_fields.extend(hook(instance) or [])

            if any(f.name == "updated_at" for f in instance._meta.concrete_fields):
                update_fields.append("updated_at")

            instance.save(update_fields=list(dict.fromkeys(update_fields)))

        logger.info(
            "%s %s status %s -> %s",
            self.entity_type,
            instance.pk,
            previous,
            status_value,
        )

        metadata = {"from": previous, "status": status_value}
        if note:
            metadata["note"] = note
        if self.label_field:
            metadata[self.label_field] = getattr(instance, self.label_field, None)

        AuditService.record(
            action=self.action_for(status_value),
            actor=actor,
            entity_type=self.entity_type,
            entity_id=instance.pk,
            description=description or self.describe(instance, status_value),
            metadata=metadata,
            origin=origin,
        )
        return instance
