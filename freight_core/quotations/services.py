# freight_core/quotations/services.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping

from django.db import transaction
from rest_framework.exceptions import PermissionDenied, ValidationError

from freight_core.audit.models import AuditAction
from freight_core.audit.services import AuditService, RequestOrigin
from freight_core.common.numbering import next_document_number
from freight_core.common.workflow import StatusWorkflow
from freight_core.quotations.models import CUSTOMER_RESPONSES, Quotation, QuotationItem, QuotationStatus

CENT = Decimal("0.01")

QUOTATION_FIELDS = ("user", "date", "valid_until", "status", "terms_and_conditions")

_STATUS_ACTIONS = {
    QuotationStatus.APPROVED: AuditAction.APPROVE,
    QuotationStatus.REJECTED: AuditAction.REJECT,
    QuotationStatus.SENT: AuditAction.SEND,
}


def quotation_action_for(target_status: str) -> str:
    return _STATUS_ACTIONS.get(target_status, AuditAction.UPDATE)


QUOTATION_WORKFLOW = StatusWorkflow(
    entity_type="Quotation",
    statuses=tuple(QuotationStatus.values),
    label_field="quote_id",
    action_for=quotation_action_for,
)


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def _replace_items(quotation: Quotation, items: Iterable[Mapping[str, Any]]) -> Decimal:
    """
    Drop current items, write the new set, return the recomputed total.
    """
    quotation.items.all().delete()

    rows = []
    for item in items:
        quantity = int(item["quantity"])
        unit_price = _money(item["unit_price"])
        rows.append(
            QuotationItem(
                quotation=quotation,
                description=item["description"],
                quantity=quantity,
                unit=item.get("unit") or "Pieces",
                unit_price=unit_price,
                total=_money(quantity * unit_price),
            )
        )
    QuotationItem.objects.bulk_create(rows)
    return _money(sum((r.total for r in rows), Decimal("0")))


class QuotationService:
    @staticmethod
    @transaction.atomic
    def create(*, data: Mapping[str, Any], actor=None, origin: RequestOrigin | None = None) -> Quotation:
        items = data.get("items") or []
        if not items:
            raise ValidationError({"items": ["At least one item is required."]})

        values = {k: data[k] for k in QUOTATION_FIELDS if k in data and data[k] is not None}
        quotation = Quotation.objects.create(
            quote_id=next_document_number(Quotation, field="quote_id", prefix="Q"),
            **values,
        )

        quotation.total_amount = _replace_items(quotation, items)
        quotation.save(update_fields=["total_amount", "updated_at"])

        AuditService.record(
            action=AuditAction.CREATE,
            actor=actor,
            entity_type="Quotation",
            entity_id=quotation.pk,
            description=f"Created quotation {quotation.quote_id}",
            metadata={"quote_id": quotation.quote_id, "total_amount": str(quotation.total_amount)},
            origin=origin,
        )
        return quotation

    @staticmethod
    @transaction.atomic
    def update(
        *,
        quotation: Quotation,
        data: Mapping[str, Any],
        actor=None,
        origin: RequestOrigin | None = None,
    ) -> Quotation:
        changed = [k for k in QUOTATION_FIELDS if k in data and k != "status"]
        for name in changed:
            setattr(quotation, name, data[name])

        if data.get("items") is not None:
            quotation.total_amount = _replace_items(quotation, data["items"])
            changed.append("total_amount")

        if changed:
            quotation.save(update_fields=[*changed, "updated_at"])

        AuditService.record(
            action=AuditAction.UPDATE,
            actor=actor,
            entity_type="Quotation",
            entity_id=quotation.pk,
            description=f"Updated quotation {quotation.quote_id}",
            metadata={"quote_id": quotation.quote_id, "fields": changed},
            origin=origin,
        )

        if data.get("status") and data["status"] != quotation.status:
            QuotationService.set_status(quotation=quotation, status=data["status"], actor=actor, origin=origin)
        return quotation

    @staticmethod
    def set_status(
        *,
        quotation: Quotation,
        status,
        note: str | None = None,
        actor=None,
        origin: RequestOrigin | None = None,
    ) -> Quotation:
        return QUOTATION_WORKFLOW.transition(
            quotation,
            target_status=status,
            note=note,
            actor=actor,
            origin=origin,
        )

    @staticmethod
    def respond(
        *,
        quotation: Quotation,
        status,
        note: str | None = None,
        actor,
        origin: RequestOrigin | None = None,
    ) -> Quotation:
        """
        Customer answer to a quotation addressed to them: Approved, Rejected
        or ChangesRequested. The note lands on `customer_note`.
        """
        if quotation.user_id != getattr(actor, "pk", None):
            raise PermissionDenied("You can only respond to your own quotations.")

        extra = {"customer_note": note} if note is not None else None
        return QUOTATION_WORKFLOW.transition(
            quotation,
            target_status=status,
            note=note,
            actor=actor,
            origin=origin,
            allowed=CUSTOMER_RESPONSES,
            extra_fields=extra,
            description=f"Customer marked quotation {quotation.quote_id} as {status}",
        )

    @staticmethod
    @transaction.atomic
    def delete(*, quotation: Quotation, actor=None, origin: RequestOrigin | None = None) -> None:
        quotation.soft_delete()
        AuditService.record(
            action=AuditAction.DELETE,
            actor=actor,
            entity_type="Quotation",
            entity_id=quotation.pk,
            description=f"Deleted quotation {quotation.quote_id}",
            metadata={"quote_id": quotation.quote_id},
            origin=origin,
        )
