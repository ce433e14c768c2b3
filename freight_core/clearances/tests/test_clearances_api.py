from pathlib import Path

import pytest
from django.conf import settings
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone

from freight_core.audit.models import AuditLog
from freight_core.clearances.models import ClearanceDocument
from freight_core.clearances.services import ClearanceService

pytestmark = pytest.mark.django_db


def _upload(name="boe.pdf", body=b"%PDF-1.4 bill of entry"):
    return SimpleUploadedFile(name, body, content_type="application/pdf")


def test_create_seeds_timeline_and_checklist(cha_client, shipment, cha_user):
    res = cha_client.post(
        "/api/v1/clearances/",
        {"shipment_id": shipment.pk, "cha_id": cha_user.pk, "arrival_port": "Mundra", "duty_amount": "1200.00"},
        format="json",
    )
    assert res.status_code == 201, res.json()

    data = res.json()["data"]
    assert data["clearance_no"].startswith("CLR-")
    assert data["status"] == "pending"
    assert data["status_timeline"][0]["note"] == "Clearance created"
    assert [d["doc_key"] for d in data["documents"]] == [
        "bill_of_entry", "invoice", "packing_list", "duty_receipt", "release_order",
    ]
    assert not any(d["uploaded"] for d in data["documents"])


def test_checklist_labels(cha_client, clearance):
    docs = cha_client.get(f"/api/v1/clearances/{clearance.pk}/").json()["data"]["documents"]
    assert [d["doc_type"] for d in docs] == [
        "Bill of Entry", "Invoice Copy", "Packing List", "Duty Payment Receipt", "Release Order",
    ]


def test_upload_fills_the_slot(cha_client, clearance, cha_user):
    res = cha_client.post(
        f"/api/v1/clearances/{clearance.pk}/documents/",
        {"doc_key": "bill_of_entry", "file": _upload()},
        format="multipart",
    )
    assert res.status_code == 201, res.json()
    assert res.json()["data"]["doc_type"] == "Bill of Entry"
    assert res.json()["data"]["uploaded_by"] == cha_user.pk

    docs = cha_client.get(f"/api/v1/clearances/{clearance.pk}/").json()["data"]["documents"]
    slot = docs[0]
    assert slot["uploaded"] is True
    assert slot["document"]["original_name"] == "boe.pdf"


def test_second_upload_replaces_first(cha_client, clearance, cha_user, django_capture_on_commit_callbacks):
    first = ClearanceService.upload_document(clearance=clearance, doc_key="invoice", upload=_upload("inv-v1.pdf"),
                                             actor=cha_user)
    storage, old_path = first.file.storage, first.file.name

    with django_capture_on_commit_callbacks(execute=True):
        res = cha_client.post(
            f"/api/v1/clearances/{clearance.pk}/documents/",
            {"doc_key": "invoice", "file": _upload("inv-v2.pdf")},
            format="multipart",
        )
    assert res.status_code == 201

    docs = ClearanceDocument.objects.filter(clearance=clearance, doc_key="invoice")
    assert docs.count() == 1
    assert docs.get().original_name == "inv-v2.pdf"
    assert not storage.exists(old_path)

    log = AuditLog.objects.filter(entity_type="Clearance").latest("id")
    assert log.description == "Replaced clearance document Invoice Copy"


def test_unknown_doc_key_is_422(cha_client, clearance):
    res = cha_client.post(
        f"/api/v1/clearances/{clearance.pk}/documents/",
        {"doc_key": "passport", "file": _upload()},
        format="multipart",
    )
    assert res.status_code == 422
    assert "doc_key" in res.json()["errors"]


def test_delete_document_by_key(cha_client, clearance, cha_user):
    ClearanceService.upload_document(clearance=clearance, doc_key="packing_list", upload=_upload("pl.pdf"),
                                     actor=cha_user)

    res = cha_client.delete(f"/api/v1/clearances/{clearance.pk}/documents/packing_list/")
    assert res.status_code == 200
    assert not ClearanceDocument.objects.filter(clearance=clearance).exists()

    assert cha_client.delete(f"/api/v1/clearances/{clearance.pk}/documents/packing_list/").status_code == 404


def test_cleared_and_released_stamp_dates(cha_client, clearance):
    res = cha_client.patch(f"/api/v1/clearances/{clearance.pk}/status/", {"status": "cleared"}, format="json")
    assert res.status_code == 200

    data = res.json()["data"]
    today = timezone.localdate().isoformat()
    assert data["clearance_date"] == today
    assert data["released_date"] is None

    data = cha_client.patch(f"/api/v1/clearances/{clearance.pk}/status/", {"status": "released"},
                            format="json").json()["data"]
    assert data["released_date"] == today

    timeline = cha_client.get(f"/api/v1/clearances/{clearance.pk}/timeline/").json()["data"]["timeline"]
    assert [e["status"] for e in timeline] == ["pending", "cleared", "released"]


def test_invalid_status_is_422(cha_client, clearance):
    res = cha_client.patch(f"/api/v1/clearances/{clearance.pk}/status/", {"status": "seized"}, format="json")
    assert res.status_code == 422


def test_customer_reads_own_clearance_only(customer_client, client_for, other_customer, clearance):
    rows = customer_client.get("/api/v1/clearances/").json()["data"]["results"]
    assert [r["id"] for r in rows] == [clearance.pk]
    assert customer_client.get(f"/api/v1/clearances/{clearance.pk}/timeline/").status_code == 200

    assert client_for(other_customer).get(f"/api/v1/clearances/{clearance.pk}/").status_code == 403


def test_customer_is_read_only(customer_client, clearance):
    assert customer_client.patch(f"/api/v1/clearances/{clearance.pk}/status/", {"status": "cleared"},
                                 format="json").status_code == 403
    res = customer_client.post(
        f"/api/v1/clearances/{clearance.pk}/documents/",
        {"doc_key": "invoice", "file": _upload()},
        format="multipart",
    )
    assert res.status_code == 403


def test_supplier_has_no_access(supplier_client, clearance):
    assert supplier_client.get("/api/v1/clearances/").status_code == 403


def test_failed_upload_removes_the_stored_file(clearance, cha_user, monkeypatch):
    def stored():
        return {p for p in Path(settings.MEDIA_ROOT).rglob("*") if p.is_file()}

    def failing_save(self, *args, **kwargs):
        raise RuntimeError("database went away")

    monkeypatch.setattr(ClearanceDocument, "save", failing_save)
    before = stored()

    with pytest.raises(RuntimeError):
        ClearanceService.upload_document(clearance=clearance, doc_key="invoice", upload=_upload("inv.pdf"),
                                         actor=cha_user)

    assert stored() == before
