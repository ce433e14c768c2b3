import pytest

from freight_core.audit.models import AuditLog
from freight_core.iam.models import Role

pytestmark = pytest.mark.django_db


def test_list_roles_is_admin_only(admin_client, back_office_client):
    assert back_office_client.get("/api/v1/roles/").status_code == 403

    res = admin_client.get("/api/v1/roles/")
    assert res.status_code == 200
    names = {r["name"] for r in res.json()["data"]["results"]}
    assert {"Admin", "Customer", "Supplier", "CHA", "Back Office"} <= names


def test_create_role_writes_audit(admin_client, admin_user):
    res = admin_client.post("/api/v1/roles/", {"name": "Warehouse"}, format="json")
    assert res.status_code == 201
    assert res.json()["data"]["slug"] == "warehouse"

    log = AuditLog.objects.get(entity_type="Role", action="Create")
    assert log.actor_id == admin_user.pk
    assert log.description == "Created role Warehouse"


def test_duplicate_role_name_is_422(admin_client):
    res = admin_client.post("/api/v1/roles/", {"name": "back-office"}, format="json")
    assert res.status_code == 422
    assert "name" in res.json()["errors"]


def test_delete_role_held_by_user_is_conflict(admin_client, customer, roles):
    res = admin_client.delete(f"/api/v1/roles/{roles['customer'].pk}/")
    assert res.status_code == 400

    body = res.json()
    assert body["code"] == "conflict"
    assert body["message"] == "Cannot delete role assigned to users."
    assert Role.objects.filter(pk=roles["customer"].pk).exists()


def test_soft_deleted_users_still_block_role_delete(admin_client, make_user, roles):
    role = Role.objects.create(name="Auditor")
    user = make_user("customer")
    user.role = role
    user.save()
    user.soft_delete()

    res = admin_client.delete(f"/api/v1/roles/{role.pk}/")
    assert res.status_code == 400


def test_delete_unused_role(admin_client):
    role = Role.objects.create(name="Temp")
    res = admin_client.delete(f"/api/v1/roles/{role.pk}/")
    assert res.status_code == 200
    assert not Role.objects.filter(pk=role.pk).exists()
