# freight_core/orders/services.py
from __future__ import annotations

from typing import Any, Mapping

from django.db import transaction

from freight_core.audit.models import AuditAction
from freight_core.audit.services import AuditService, RequestOrigin
from freight_core.common.numbering import next_document_number
from freight_core.common.workflow import StatusWorkflow, append_timeline
from freight_core.orders.models import Order, OrderStatus

ORDER_FIELDS = (
    "customer",
    "supplier",
    "quotation",
    "status",
    "origin_country",
    "destination_port",
    "invoice_value",
    "currency",
    "expected_arrival_date",
    "notes",
)

ORDER_WORKFLOW = StatusWorkflow(
    entity_type="Order",
    statuses=tuple(OrderStatus.values),
    timeline_field="status_timeline",
    label_field="order_no",
)


class OrderService:
    @staticmethod
    @transaction.atomic
    def create(*, data: Mapping[str, Any], actor=None, origin: RequestOrigin | None = None) -> Order:
        values = {k: data[k] for k in ORDER_FIELDS if k in data and data[k] is not None}
        order = Order(
            order_no=next_document_number(Order, field="order_no", prefix="O"),
            **values,
        )
        append_timeline(order, status=order.status, note="Order created", actor=actor)
        order.save()

        AuditService.record(
            action=AuditAction.CREATE,
            actor=actor,
            entity_type="Order",
            entity_id=order.pk,
            description=f"Created order {order.order_no}",
            metadata={"order_no": order.order_no, "status": order.status},
            origin=origin,
        )
        return order

    @staticmethod
    @transaction.atomic
    def update(*, order: Order, data: Mapping[str, Any], actor=None, origin: RequestOrigin | None = None) -> Order:
        changed = [k for k in ORDER_FIELDS if k in data and k != "status"]
        for name in changed:
            setattr(order, name, data[name])
        if changed:
            order.save(update_fields=[*changed, "updated_at"])

        AuditService.record(
            action=AuditAction.UPDATE,
            actor=actor,
            entity_type="Order",
            entity_id=order.pk,
            description=f"Updated order {order.order_no}",
            metadata={"order_no": order.order_no, "fields": changed},
            origin=origin,
        )

        if data.get("status") and data["status"] != order.status:
            OrderService.set_status(order=order, status=data["status"], actor=actor, origin=origin)
        return order

    @staticmethod
    def set_status(*, order: Order, status, note: str | None = None, actor=None, origin: RequestOrigin | None = None) -> Order:
        return ORDER_WORKFLOW.transition(
            order,
            target_status=status,
            note=note,
            actor=actor,
            origin=origin,
            description=f"Updated order status to {status}",
        )

    @staticmethod
    @transaction.atomic
    def delete(*, order: Order, actor=None, origin: RequestOrigin | None = None) -> None:
        order.soft_delete()
        AuditService.record(
            action=AuditAction.DELETE,
            actor=actor,
            entity_type="Order",
            entity_id=order.pk,
            description=f"Deleted order {order.order_no}",
            metadata={"order_no": order.order_no},
            origin=origin,
        )
