# freight_core/common/tests/test_workflow.py
from datetime import date

import pytest
from rest_framework.exceptions import ValidationError

from freight_core.audit.models import AuditAction, AuditLog
from freight_core.clearances.models import ClearanceStatus
from freight_core.clearances.services import ClearanceService
from freight_core.common.workflow import TimelineEntry, read_timeline
from freight_core.leads.models import Lead
from freight_core.leads.services import LeadService
from freight_core.orders.services import OrderService

pytestmark = pytest.mark.django_db


def test_out_of_set_status_is_rejected_and_nothing_changes(order, admin_user):
    before = list(order.status_timeline)

    with pytest.raises(ValidationError) as exc:
        OrderService.set_status(order=order, status="teleported", actor=admin_user)

    assert "status" in exc.value.detail
    order.refresh_from_db()
    assert order.status == "draft"
    assert order.status_timeline == before


def test_transition_appends_exactly_one_entry_and_keeps_history(order, admin_user):
    OrderService.set_status(order=order, status="confirmed", note="PO received", actor=admin_user)
    OrderService.set_status(order=order, status="in_transit", actor=admin_user)

    order.refresh_from_db()
    timeline = read_timeline(order)

    assert [e.status for e in timeline] == ["draft", "confirmed", "in_transit"]
    assert timeline[0].note == "Order created"
    assert timeline[1].note == "PO received"
    assert timeline[1].changed_by == admin_user.pk
    assert all(isinstance(e, TimelineEntry) for e in timeline)


def test_transition_writes_update_audit(order, admin_user):
    OrderService.set_status(order=order, status="confirmed", actor=admin_user)

    log = AuditLog.objects.filter(entity_type="Order", entity_id=str(order.pk)).first()
    assert log.action == AuditAction.UPDATE
    assert log.description == "Updated order status to confirmed"
    assert log.metadata["status"] == "confirmed"
    assert log.metadata["from"] == "draft"


def test_audit_failure_never_undoes_the_transition(monkeypatch, admin_user):
    lead = Lead.objects.create(company="Globex", contact="Hank")

    def boom(*args, **kwargs):
        raise RuntimeError("audit store down")

    monkeypatch.setattr(AuditLog.objects, "create", boom)

    LeadService.set_status(lead=lead, status="contacted", actor=admin_user)

    lead.refresh_from_db()
    assert lead.status == "contacted"


def test_clearance_hooks_stamp_dates_once(clearance, cha_user):
    ClearanceService.set_status(clearance=clearance, status=ClearanceStatus.CLEARED, actor=cha_user)
    clearance.refresh_from_db()
    stamped = clearance.clearance_date
    assert stamped is not None
    assert clearance.released_date is None

    clearance.clearance_date = date(2020, 1, 1)
    clearance.save(update_fields=["clearance_date"])

    ClearanceService.set_status(clearance=clearance, status=ClearanceStatus.CLEARED, actor=cha_user)
    ClearanceService.set_status(clearance=clearance, status=ClearanceStatus.RELEASED, actor=cha_user)
    clearance.refresh_from_db()

    assert clearance.clearance_date == date(2020, 1, 1)
    assert clearance.released_date is not None
