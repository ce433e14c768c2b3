# freight_core/leads/services.py
from __future__ import annotations

from typing import Any, Mapping

from django.db import transaction

from freight_core.audit.models import AuditAction
from freight_core.audit.services import AuditService, RequestOrigin
from freight_core.common.workflow import StatusWorkflow
from freight_core.leads.models import Lead, LeadStatus

LEAD_FIELDS = ("company", "contact", "email", "phone", "value", "added_date", "last_contact", "status")

# Non-null text columns: a null from the client clears them
BLANK_WHEN_NULL = ("email", "phone")

LEAD_WORKFLOW = StatusWorkflow(
    entity_type="Lead",
    statuses=tuple(LeadStatus.values),
    label_field="company",
)


def _clean(data: Mapping[str, Any]) -> dict[str, Any]:
    cleaned = dict(data)
    for name in BLANK_WHEN_NULL:
        if name in cleaned and cleaned[name] is None:
            cleaned[name] = ""
    return cleaned


class LeadService:
    @staticmethod
    @transaction.atomic
    def create(*, data: Mapping[str, Any], actor=None, origin: RequestOrigin | None = None) -> Lead:
        data = _clean(data)
        values = {k: data[k] for k in LEAD_FIELDS if k in data and data[k] is not None}
        lead = Lead.objects.create(**values)

        AuditService.record(
            action=AuditAction.CREATE,
            actor=actor,
            entity_type="Lead",
            entity_id=lead.pk,
            description=f"Created lead for {lead.company}",
            metadata={"status": lead.status},
            origin=origin,
        )
        return lead

    @staticmethod
    @transaction.atomic
    def update(*, lead: Lead, data: Mapping[str, Any], actor=None, origin: RequestOrigin | None = None) -> Lead:
        data = _clean(data)
        # Status changes go through the workflow so they are validated and audited as such
        changed = [k for k in LEAD_FIELDS if k in data and k != "status"]
        for name in changed:
            setattr(lead, name, data[name])
        if changed:
            lead.save(update_fields=[*changed, "updated_at"])

        AuditService.record(
            action=AuditAction.UPDATE,
            actor=actor,
            entity_type="Lead",
            entity_id=lead.pk,
            description=f"Updated lead {lead.company}",
            metadata={"fields": changed},
            origin=origin,
        )

        if data.get("status") and data["status"] != lead.status:
            LeadService.set_status(lead=lead, status=data["status"], actor=actor, origin=origin)
        return lead

    @staticmethod
    def set_status(*, lead: Lead, status, note: str | None = None, actor=None, origin: RequestOrigin | None = None) -> Lead:
        return LEAD_WORKFLOW.transition(
            lead,
            target_status=status,
            note=note,
            actor=actor,
            origin=origin,
            description=f"Updated lead status to {status}",
        )

    @staticmethod
    @transaction.atomic
    def delete(*, lead: Lead, actor=None, origin: RequestOrigin | None = None) -> None:
        lead.soft_delete()
        AuditService.record(
            action=AuditAction.DELETE,
            actor=actor,
            entity_type="Lead",
            entity_id=lead.pk,
            description=f"Deleted lead for {lead.company}",
            origin=origin,
        )
