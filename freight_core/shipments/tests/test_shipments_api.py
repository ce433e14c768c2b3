from pathlib import Path

import pytest
from django.conf import settings
from django.core.files.uploadedfile import SimpleUploadedFile

from freight_core.audit.models import AuditLog
from freight_core.orders.services import OrderService
from freight_core.shipments.models import ShipmentDocument, ShipmentStatus
from freight_core.shipments.services import ShipmentService

pytestmark = pytest.mark.django_db


def _pdf(name="bill-of-lading.pdf", body=b"%PDF-1.4 test"):
    return SimpleUploadedFile(name, body, content_type="application/pdf")


def test_customer_defaults_to_order_customer(cha_client, order, customer):
    res = cha_client.post(
        "/api/v1/shipments/",
        {"order_id": order.pk, "carrier_name": "MSC", "destination": "Nhava Sheva"},
        format="json",
    )
    assert res.status_code == 201, res.json()

    data = res.json()["data"]
    assert data["customer"]["id"] == customer.pk
    assert data["shipment_no"].startswith("SHIP-")
    assert data["status"] == "In Transit"
    assert data["status_timeline"][0]["note"] == "Shipment created"


def test_status_change_and_timeline(cha_client, shipment):
    res = cha_client.patch(
        f"/api/v1/shipments/{shipment.pk}/status/",
        {"status": "Arrived at Port", "note": "Berthed at JNPT"},
        format="json",
    )
    assert res.status_code == 200

    body = cha_client.get(f"/api/v1/shipments/{shipment.pk}/timeline/").json()["data"]
    assert body["status"] == "Arrived at Port"
    assert [e["status"] for e in body["timeline"]] == ["In Transit", "Arrived at Port"]


def test_invalid_status_is_422(cha_client, shipment):
    res = cha_client.patch(f"/api/v1/shipments/{shipment.pk}/status/", {"status": "Lost at sea"}, format="json")
    assert res.status_code == 422


def test_include_stats_has_every_status(admin_client, shipment, cha_user):
    ShipmentService.set_status(shipment=shipment, status=ShipmentStatus.DELIVERED, actor=cha_user)

    body = admin_client.get("/api/v1/shipments/", {"include_stats": "1"}).json()
    assert set(body["stats"]) == set(ShipmentStatus.values)
    assert body["stats"]["Delivered"] == 1
    assert body["stats"]["Departed"] == 0

    assert "stats" not in admin_client.get("/api/v1/shipments/").json()


def test_customer_sees_only_own_shipments(customer_client, client_for, other_customer, shipment, admin_user, cha_user):
    other_order = OrderService.create(data={"customer": other_customer}, actor=admin_user)
    ShipmentService.create(data={"order": other_order}, actor=cha_user)

    rows = customer_client.get("/api/v1/shipments/").json()["data"]["results"]
    assert [r["id"] for r in rows] == [shipment.pk]

    stats = customer_client.get("/api/v1/shipments/", {"include_stats": "true"}).json()["stats"]
    assert stats["In Transit"] == 1

    assert client_for(other_customer).get(f"/api/v1/shipments/{shipment.pk}/").status_code == 403


def test_customer_cannot_edit_shipment(customer_client, shipment):
    res = customer_client.patch(f"/api/v1/shipments/{shipment.pk}/", {"notes": "x"}, format="json")
    assert res.status_code == 403


def test_search_by_tracking_and_order_number(admin_client, shipment, order):
    assert [r["id"] for r in admin_client.get("/api/v1/shipments/", {"search": "msku"}).json()["data"]["results"]] \
        == [shipment.pk]
    assert [r["id"] for r in admin_client.get("/api/v1/shipments/", {"search": order.order_no}).json()["data"]["results"]] \
        == [shipment.pk]


def test_upload_documents(customer_client, shipment, customer):
    res = customer_client.post(
        f"/api/v1/shipments/{shipment.pk}/documents/",
        {"documents": [_pdf(), _pdf("invoice.pdf")]},
        format="multipart",
    )
    assert res.status_code == 201, res.json()

    data = res.json()["data"]
    assert [d["file_name"] for d in data] == ["bill-of-lading.pdf", "invoice.pdf"]
    assert data[0]["uploaded_by"] == customer.pk
    assert data[0]["file_url"].startswith("http://testserver/media/shipments/")

    log = AuditLog.objects.filter(entity_type="Shipment", entity_id=str(shipment.pk)).latest("id")
    assert log.metadata["files"] == ["bill-of-lading.pdf", "invoice.pdf"]


def test_oversized_upload_is_422(cha_client, shipment, monkeypatch):
    monkeypatch.setattr("freight_core.shipments.api.serializers.MAX_UPLOAD_SIZE", 8)

    res = cha_client.post(
        f"/api/v1/shipments/{shipment.pk}/documents/",
        {"documents": [_pdf(body=b"0123456789")]},
        format="multipart",
    )
    assert res.status_code == 422
    assert "documents" in res.json()["errors"]
    assert not ShipmentDocument.objects.exists()


def test_delete_document_removes_blob(cha_client, shipment, cha_user, django_capture_on_commit_callbacks):
    [document] = ShipmentService.upload_documents(shipment=shipment, files=[_pdf()], actor=cha_user)
    storage, path = document.file.storage, document.file.name
    assert storage.exists(path)

    with django_capture_on_commit_callbacks(execute=True):
        res = cha_client.delete(f"/api/v1/shipments/{shipment.pk}/documents/{document.pk}/")
    assert res.status_code == 200

    assert not ShipmentDocument.objects.filter(pk=document.pk).exists()
    assert not storage.exists(path)


def test_customer_cannot_delete_document(customer_client, shipment, cha_user):
    [document] = ShipmentService.upload_documents(shipment=shipment, files=[_pdf()], actor=cha_user)
    res = customer_client.delete(f"/api/v1/shipments/{shipment.pk}/documents/{document.pk}/")
    assert res.status_code == 403


def test_unknown_document_is_404(cha_client, shipment):
    assert cha_client.delete(f"/api/v1/shipments/{shipment.pk}/documents/999/").status_code == 404


def _stored_files():
    return {p for p in Path(settings.MEDIA_ROOT).rglob("*") if p.is_file()}


def test_failed_upload_leaves_no_files_behind(shipment, cha_user, monkeypatch):
    original_save = ShipmentDocument.save

    def failing_save(self, *args, **kwargs):
        if self.file_name == "broken.pdf":
            raise RuntimeError("disk quota exceeded")
        return original_save(self, *args, **kwargs)

    monkeypatch.setattr(ShipmentDocument, "save", failing_save)
    before = _stored_files()

    with pytest.raises(RuntimeError):
        ShipmentService.upload_documents(
            shipment=shipment,
            files=[_pdf("packing-list.pdf"), _pdf("broken.pdf")],
            actor=cha_user,
        )

    assert _stored_files() == before
    assert not ShipmentDocument.objects.filter(shipment=shipment).exists()
