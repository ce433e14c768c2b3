import csv
import io

import pytest

from freight_core.audit.models import AuditAction, AuditLog, ImmutableAuditLogError
from freight_core.audit.services import AuditService, RequestOrigin

pytestmark = pytest.mark.django_db


@pytest.fixture
def logs(admin_user, customer, back_office):
    AuditService.record(action=AuditAction.CREATE, actor=admin_user, entity_type="Order", entity_id=1,
                        description="Created order O-2026-001")
    AuditService.record(action=AuditAction.LOGIN, actor=customer, entity_type="User", entity_id=customer.pk,
                        description="carla logged in", origin=RequestOrigin(ip_address="10.0.0.7", user_agent="pytest"))
    AuditService.record(action=AuditAction.APPROVE, actor=customer, entity_type="Quotation", entity_id=4,
                        description="Customer marked quotation Q-2026-004 as Approved",
                        metadata={"quote_id": "Q-2026-004"})
    AuditService.record(action=AuditAction.UPDATE, actor=back_office, entity_type="Lead", entity_id=9,
                        description="Updated lead")
    AuditService.record(action=AuditAction.DELETE, entity_type="Shipment", entity_id=3,
                        description="Purged by maintenance job")


def _results(res):
    return res.json()["data"]["results"]


def test_admin_only(customer_client, back_office_client):
    assert customer_client.get("/api/v1/audit-logs/").status_code == 403
    assert back_office_client.get("/api/v1/audit-logs/export/").status_code == 403


def test_filter_by_action(admin_client, logs):
    rows = _results(admin_client.get("/api/v1/audit-logs/", {"action": "Approve"}))
    assert [r["description"] for r in rows] == ["Customer marked quotation Q-2026-004 as Approved"]


def test_filter_by_role_any_spelling(admin_client, logs):
    rows = _results(admin_client.get("/api/v1/audit-logs/", {"role": "back-office"}))
    assert [r["entity_type"] for r in rows] == ["Lead"]


def test_filter_by_user_id_and_name(admin_client, logs, customer):
    by_id = _results(admin_client.get("/api/v1/audit-logs/", {"user": str(customer.pk)}))
    by_name = _results(admin_client.get("/api/v1/audit-logs/", {"user": "carla"}))
    assert len(by_id) == 2
    assert {r["id"] for r in by_id} == {r["id"] for r in by_name}


def test_all_means_no_filter(admin_client, logs):
    res = admin_client.get("/api/v1/audit-logs/", {"action": "all", "role": "all", "user": "all"})
    assert res.json()["data"]["count"] == 5


def test_include_stats_is_zero_filled(admin_client, logs):
    body = admin_client.get("/api/v1/audit-logs/", {"include_stats": "true", "user": "carla"}).json()
    assert set(body["stats"]) == set(AuditAction.values)
    assert body["stats"]["Login"] == 1
    assert body["stats"]["Approve"] == 1
    assert body["stats"]["Reject"] == 0


def test_no_stats_unless_asked(admin_client, logs):
    assert "stats" not in admin_client.get("/api/v1/audit-logs/").json()


def test_csv_export(admin_client, logs):
    res = admin_client.get("/api/v1/audit-logs/export/")
    assert res.status_code == 200
    assert res["Content-Type"].startswith("text/csv")

    disposition = res["Content-Disposition"]
    assert disposition.startswith('attachment; filename="audit-logs-')
    assert disposition.endswith('.csv"')

    rows = list(csv.reader(io.StringIO(res.content.decode())))
    assert rows[0] == [
        "Timestamp", "User Name", "User Email", "Role", "Action",
        "Resource", "Details", "IP Address", "User Agent",
    ]
    assert len(rows) == 6

    by_action = {r[4]: r for r in rows[1:]}
    assert by_action["Delete"][1] == "System"
    assert by_action["Delete"][2] == ""
    assert by_action["Approve"][5] == "Quotation #4 (Q-2026-004)"
    assert by_action["Login"][7] == "10.0.0.7"
    assert by_action["Login"][8] == "pytest"


def test_csv_export_honours_filters(admin_client, logs):
    res = admin_client.get("/api/v1/audit-logs/export/", {"action": "Create"})
    rows = list(csv.reader(io.StringIO(res.content.decode())))
    assert len(rows) == 2
    assert rows[1][1] == "Ada Admin"


def test_entries_are_immutable(logs):
    log = AuditLog.objects.first()
    log.description = "tampered"
    with pytest.raises(ImmutableAuditLogError):
        log.save()
    with pytest.raises(ImmutableAuditLogError):
        log.delete()


def test_records_role_at_time_of_action(customer, roles):
    entry = AuditService.record(action=AuditAction.UPDATE, actor=customer, entity_type="User", entity_id=customer.pk)
    customer.role = roles["supplier"]
    customer.save()

    entry.refresh_from_db()
    assert entry.role == "Customer"
