# freight_core/shipments/services.py
from __future__ import annotations

from typing import Any, Iterable, Mapping

from django.db import transaction

from freight_core.audit.models import AuditAction
from freight_core.audit.services import AuditService, RequestOrigin
from freight_core.common.numbering import next_document_number
from freight_core.common.storage import discard_file_on_commit, discard_saved_files_on_error
from freight_core.common.workflow import StatusWorkflow, append_timeline
from freight_core.shipments.models import Shipment, ShipmentDocument, ShipmentStatus

SHIPMENT_FIELDS = (
    "order",
    "customer",
    "status",
    "origin",
    "destination",
    "carrier_name",
    "tracking_no",
    "eta",
    "notes",
)

SHIPMENT_WORKFLOW = StatusWorkflow(
    entity_type="Shipment",
    statuses=tuple(ShipmentStatus.values),
    timeline_field="status_timeline",
    label_field="shipment_no",
)


class ShipmentService:
    @staticmethod
    @transaction.atomic
    def create(*, data: Mapping[str, Any], actor=None, origin: RequestOrigin | None = None) -> Shipment:
        values = {k: data[k] for k in SHIPMENT_FIELDS if k in data and data[k] is not None}
        shipment = Shipment(
            shipment_no=next_document_number(Shipment, field="shipment_no", prefix="SHIP"),
            **values,
        )
        if shipment.customer_id is None:
            shipment.customer_id = shipment.order.customer_id

        append_timeline(shipment, status=shipment.status, note="Shipment created", actor=actor)
        shipment.save()

        AuditService.record(
            action=AuditAction.CREATE,
            actor=actor,
            entity_type="Shipment",
            entity_id=shipment.pk,
            description=f"Created shipment {shipment.shipment_no}",
            metadata={"shipment_no": shipment.shipment_no, "order_no": shipment.order.order_no},
            origin=origin,
        )
        return shipment

    @staticmethod
    @transaction.atomic
    def update(
        *,
        shipment: Shipment,
        data: Mapping[str, Any],
        actor=None,
        origin: RequestOrigin | None = None,
    ) -> Shipment:
        changed = [k for k in SHIPMENT_FIELDS if k in data and k != "status"]
        for name in changed:
            setattr(shipment, name, data[name])
        if changed:
            shipment.save(update_fields=[*changed, "updated_at"])

        AuditService.record(
            action=AuditAction.UPDATE,
            actor=actor,
            entity_type="Shipment",
            entity_id=shipment.pk,
            description=f"Updated shipment {shipment.shipment_no}",
            metadata={"shipment_no": shipment.shipment_no, "fields": changed},
            origin=origin,
        )

        if data.get("status") and data["status"] != shipment.status:
            ShipmentService.set_status(shipment=shipment, status=data["status"], actor=actor, origin=origin)
        return shipment

    @staticmethod
    def set_status(
        *,
        shipment: Shipment,
        status,
        note: str | None = None,
        actor=None,
        origin: RequestOrigin | None = None,
    ) -> Shipment:
        return SHIPMENT_WORKFLOW.transition(
            shipment,
            target_status=status,
            note=note,
            actor=actor,
            origin=origin,
            description=f"Updated shipment status to {status}",
        )

    @staticmethod
    @transaction.atomic
    def delete(*, shipment: Shipment, actor=None, origin: RequestOrigin | None = None) -> None:
        shipment.soft_delete()
        AuditService.record(
            action=AuditAction.DELETE,
            actor=actor,
            entity_type="Shipment",
            entity_id=shipment.pk,
            description=f"Deleted shipment {shipment.shipment_no}",
            metadata={"shipment_no": shipment.shipment_no},
            origin=origin,
        )

    @staticmethod
    @transaction.atomic
    def upload_documents(
        *,
        shipment: Shipment,
        files: Iterable,
        actor=None,
        origin: RequestOrigin | None = None,
    ) -> list[ShipmentDocument]:
        uploader = actor if getattr(actor, "is_authenticated", False) else None

        created = []
        with discard_saved_files_on_error() as keep:
            for upload in files:
                document = ShipmentDocument(
                    shipment=shipment,
                    uploaded_by=uploader,
                    file_name=upload.name,
                    mime_type=getattr(upload, "content_type", None),
                    file_size=upload.size,
                )
                document.file.save(upload.name, upload, save=False)
                keep(document.file)
                document.save()
                created.append(document)

        AuditService.record(
            action=AuditAction.UPDATE,
            actor=actor,
            entity_type="Shipment",
            entity_id=shipment.pk,
            description="Uploaded shipment documents",
            metadata={"shipment_no": shipment.shipment_no, "files": [d.file_name for d in created]},
            origin=origin,
        )
        return created

    @staticmethod
    @transaction.atomic
    def delete_document(
        *,
        document: ShipmentDocument,
        actor=None,
        origin: RequestOrigin | None = None,
    ) -> None:
        shipment = document.shipment
        file_name = document.file_name
        document.delete()
        discard_file_on_commit(document.file)

        AuditService.record(
            action=AuditAction.DELETE,
            actor=actor,
            entity_type="Shipment",
            entity_id=shipment.pk,
            description=f"Deleted shipment document {file_name}",
            metadata={"shipment_no": shipment.shipment_no, "file": file_name},
            origin=origin,
        )

