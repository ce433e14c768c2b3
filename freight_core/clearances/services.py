# freight_core/clearances/services.py
from __future__ import annotations

from typing import Any, Mapping

from django.db import transaction
from django.utils import timezone

from freight_core.audit.models import AuditAction
from freight_core.audit.services import AuditService, RequestOrigin
from freight_core.clearances.models import Clearance, ClearanceDocKey, ClearanceDocument, ClearanceStatus
from freight_core.common.numbering import next_document_number
from freight_core.common.storage import discard_file_on_commit, discard_saved_files_on_error
from freight_core.common.workflow import StatusWorkflow, append_timeline

CLEARANCE_FIELDS = (
    "shipment",
    "cha",
    "arrival_port",
    "arrival_date",
    "duty_amount",
    "currency",
    "status",
    "clearance_date",
    "released_date",
)


def _stamp(field_name: str):
    def hook(clearance: Clearance) -> list[str]:
        if getattr(clearance, field_name) is not None:
            return []
        setattr(clearance, field_name, timezone.localdate())
        return [field_name]

    return hook


CLEARANCE_WORKFLOW = StatusWorkflow(
    entity_type="Clearance",
    statuses=tuple(ClearanceStatus.values),
    timeline_field="status_timeline",
    label_field="clearance_no",
    on_enter={
        ClearanceStatus.CLEARED: _stamp("clearance_date"),
        ClearanceStatus.RELEASED: _stamp("released_date"),
    },
)


class ClearanceService:
    @staticmethod
    @transaction.atomic
    def create(*, data: Mapping[str, Any], actor=None, origin: RequestOrigin | None = None) -> Clearance:
        values = {k: data[k] for k in CLEARANCE_FIELDS if k in data and data[k] is not None}
        clearance = Clearance(
            clearance_no=next_document_number(Clearance, field="clearance_no", prefix="CLR"),
            **values,
        )
        append_timeline(clearance, status=clearance.status, note="Clearance created", actor=actor)
        clearance.save()

        AuditService.record(
            action=AuditAction.CREATE,
            actor=actor,
            entity_type="Clearance",
            entity_id=clearance.pk,
            description=f"Created clearance {clearance.clearance_no}",
            metadata={"clearance_no": clearance.clearance_no, "shipment_no": clearance.shipment.shipment_no},
            origin=origin,
        )
        return clearance

    @staticmethod
    @transaction.atomic
    def update(
        *,
        clearance: Clearance,
        data: Mapping[str, Any],
        actor=None,
        origin: RequestOrigin | None = None,
    ) -> Clearance:
        changed = [k for k in CLEARANCE_FIELDS if k in data and k != "status"]
        for name in changed:
            setattr(clearance, name, data[name])
        if changed:
            clearance.save(update_fields=[*changed, "updated_at"])

        AuditService.record(
            action=AuditAction.UPDATE,
            actor=actor,
            entity_type="Clearance",
            entity_id=clearance.pk,
            description=f"Updated clearance {clearance.clearance_no}",
            metadata={"clearance_no": clearance.clearance_no, "fields": changed},
            origin=origin,
        )

        if data.get("status") and data["status"] != clearance.status:
            ClearanceService.set_status(clearance=clearance, status=data["status"], actor=actor, origin=origin)
        return clearance

    @staticmethod
    def set_status(
        *,
        clearance: Clearance,
        status,
        note: str | None = None,
        actor=None,
        origin: RequestOrigin | None = None,
    ) -> Clearance:
        return CLEARANCE_WORKFLOW.transition(
            clearance,
            target_status=status,
            note=note,
            actor=actor,
            origin=origin,
            description=f"Updated clearance status to {status}",
        )

    @staticmethod
    @transaction.atomic
    def delete(*, clearance: Clearance, actor=None, origin: RequestOrigin | None = None) -> None:
        clearance.soft_delete()
        AuditService.record(
            action=AuditAction.DELETE,
            actor=actor,
            entity_type="Clearance",
            entity_id=clearance.pk,
            description=f"Deleted clearance {clearance.clearance_no}",
            metadata={"clearance_no": clearance.clearance_no},
            origin=origin,
        )

    @staticmethod
    @transaction.atomic
    def upload_document(
        *,
        clearance: Clearance,
        doc_key: str,
        upload,
        actor=None,
        origin: RequestOrigin | None = None,
    ) -> ClearanceDocument:
        """
        One file per doc_key: a second upload for the same key replaces the first.
        """
        document = ClearanceDocument.objects.filter(clearance=clearance, doc_key=doc_key).first()
        replaced = document is not None
        if replaced:
            discard_file_on_commit(document.file)
        else:
            document = ClearanceDocument(clearance=clearance, doc_key=doc_key)

        document.doc_type = ClearanceDocKey(doc_key).label
        document.original_name = upload.name
        document.mime_type = getattr(upload, "content_type", None)
        document.file_size = upload.size
        document.uploaded_by = actor if getattr(actor, "is_authenticated", False) else None
        document.uploaded_at = timezone.now()
        with discard_saved_files_on_error() as keep:
            document.file.save(upload.name, upload, save=False)
            keep(document.file)
            document.save()

        AuditService.record(
            action=AuditAction.UPDATE,
            actor=actor,
            entity_type="Clearance",
            entity_id=clearance.pk,
            description=f"{'Replaced' if replaced else 'Uploaded'} clearance document {document.doc_type}",
            metadata={"clearance_no": clearance.clearance_no, "doc_key": doc_key, "file": upload.name},
            origin=origin,
        )
        return document

    @staticmethod
    @transaction.atomic
    def delete_document(
        *,
        document: ClearanceDocument,
        actor=None,
        origin: RequestOrigin | None = None,
    ) -> None:
        clearance = document.clearance
        doc_key = document.doc_key
        document.delete()
        discard_file_on_commit(document.file)

        AuditService.record(
            action=AuditAction.DELETE,
            actor=actor,
            entity_type="Clearance",
            entity_id=clearance.pk,
            description=f"Deleted clearance document {doc_key}",
            metadata={"clearance_no": clearance.clearance_no, "doc_key": doc_key},
            origin=origin,
        )
