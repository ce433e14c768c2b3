from datetime import date

import pytest

from freight_core.audit.models import AuditLog
from freight_core.leads.models import Lead

pytestmark = pytest.mark.django_db


@pytest.fixture
def lead(db):
    return Lead.objects.create(company="Blue Harbor Trading", contact="Priya", email="priya@blueharbor.test",
                               added_date=date(2026, 1, 10))


def test_back_office_creates_lead_with_camelcase_dates(back_office_client, back_office):
    res = back_office_client.post(
        "/api/v1/leads/",
        {"company": "Northwind", "contact": "Jo", "addedDate": "2026-02-03", "lastContact": "2026-02-05"},
        format="json",
    )
    assert res.status_code == 201, res.json()

    data = res.json()["data"]
    assert data["added_date"] == "2026-02-03"
    assert data["last_contact"] == "2026-02-05"
    assert data["status"] == "new"

    log = AuditLog.objects.get(entity_type="Lead", action="Create")
    assert log.actor_id == back_office.pk
    assert log.role == "Back Office"


def test_customer_and_supplier_cannot_touch_leads(customer_client, supplier_client, lead):
    assert customer_client.get("/api/v1/leads/").status_code == 403
    assert supplier_client.get(f"/api/v1/leads/{lead.pk}/").status_code == 403
    assert customer_client.post("/api/v1/leads/", {"company": "x", "contact": "y"}, format="json").status_code == 403


def test_update_lead(admin_client, lead):
    res = admin_client.patch(f"/api/v1/leads/{lead.pk}/", {"phone": "+91 22 5555 0100"}, format="json")
    assert res.status_code == 200
    assert res.json()["data"]["phone"] == "+91 22 5555 0100"
    assert res.json()["data"]["company"] == "Blue Harbor Trading"


def test_status_change_is_audited(back_office_client, lead):
    res = back_office_client.patch(f"/api/v1/leads/{lead.pk}/status/", {"status": "qualified"}, format="json")
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "qualified"

    log = AuditLog.objects.filter(entity_type="Lead", entity_id=str(lead.pk)).latest("id")
    assert log.metadata["from"] == "new"
    assert log.metadata["status"] == "qualified"


def test_unknown_status_is_422(admin_client, lead):
    res = admin_client.patch(f"/api/v1/leads/{lead.pk}/status/", {"status": "won"}, format="json")
    assert res.status_code == 422

    lead.refresh_from_db()
    assert lead.status == "new"


def test_list_filters(admin_client, lead):
    Lead.objects.create(company="Red Sea Cargo", contact="Omar", status="contacted", added_date=date(2026, 3, 1))

    rows = admin_client.get("/api/v1/leads/", {"status": "contacted"}).json()["data"]["results"]
    assert [r["company"] for r in rows] == ["Red Sea Cargo"]

    rows = admin_client.get("/api/v1/leads/", {"search": "harbor"}).json()["data"]["results"]
    assert [r["company"] for r in rows] == ["Blue Harbor Trading"]

    rows = admin_client.get("/api/v1/leads/", {"date_from": "2026-01-01", "date_to": "2026-01-31"}).json()["data"]["results"]
    assert [r["company"] for r in rows] == ["Blue Harbor Trading"]


def test_delete_is_soft(admin_client, lead):
    res = admin_client.delete(f"/api/v1/leads/{lead.pk}/")
    assert res.status_code == 200

    assert not Lead.objects.filter(pk=lead.pk).exists()
    assert Lead.all_objects.filter(pk=lead.pk).exists()
    assert admin_client.get(f"/api/v1/leads/{lead.pk}/").status_code == 404


def test_null_email_and_phone_are_stored_blank(admin_client):
    res = admin_client.post(
        "/api/v1/leads/",
        {"company": "Acme", "contact": "Ann", "email": None, "phone": None},
        format="json",
    )
    assert res.status_code == 201, res.json()
    assert res.json()["data"]["email"] == ""
    assert res.json()["data"]["phone"] == ""


def test_patch_with_null_clears_email(admin_client, lead):
    res = admin_client.patch(f"/api/v1/leads/{lead.pk}/", {"email": None, "phone": None}, format="json")
    assert res.status_code == 200, res.json()

    lead.refresh_from_db()
    assert lead.email == ""
    assert lead.phone == ""
