import pytest

from freight_core.audit.models import AuditLog
from freight_core.iam.models import User

pytestmark = pytest.mark.django_db


def test_create_user_by_role_name(admin_client):
    res = admin_client.post(
        "/api/v1/users/",
        {
            "name": "Nina New",
            "email": "nina@example.com",
            "password": "Secret@123",
            "role_name": "back-office",
            "company_name": "Nina Traders",
        },
        format="json",
    )
    assert res.status_code == 201, res.json()

    data = res.json()["data"]
    assert data["role"]["slug"] == "back_office"
    assert data["company"]["company_name"] == "Nina Traders"
    assert "password" not in data


def test_create_user_by_role_id(admin_client, roles):
    res = admin_client.post(
        "/api/v1/users/",
        {"name": "Ivan Id", "email": "ivan@example.com", "password": "Secret@123", "role": str(roles["cha"].pk)},
        format="json",
    )
    assert res.status_code == 201
    assert res.json()["data"]["role"]["name"] == "CHA"


def test_unknown_role_is_422(admin_client):
    res = admin_client.post(
        "/api/v1/users/",
        {"name": "X", "email": "x@example.com", "password": "Secret@123", "role": "pilot"},
        format="json",
    )
    assert res.status_code == 422
    assert "role" in res.json()["errors"]


def test_duplicate_email_is_422(admin_client, customer):
    res = admin_client.post(
        "/api/v1/users/",
        {"name": "Dup", "email": "CARLA@example.com", "password": "Secret@123", "role": "customer"},
        format="json",
    )
    assert res.status_code == 422
    assert "email" in res.json()["errors"]


def test_list_filters_and_stats(admin_client, customer, other_customer, supplier):
    res = admin_client.get("/api/v1/users/", {"role": "Customer"})
    assert res.status_code == 200

    body = res.json()
    emails = {u["email"] for u in body["data"]["results"]}
    assert emails == {"carla@example.com", "otto@example.com"}
    assert body["stats"]["customer"] == 2
    assert body["stats"]["supplier"] == 1
    assert body["stats"]["total"] == 4  # admin included


def test_search_matches_company_name(admin_client, customer, other_customer):
    res = admin_client.get("/api/v1/users/", {"search": "acme"})
    emails = [u["email"] for u in res.json()["data"]["results"]]
    assert emails == ["carla@example.com"]


def test_update_role(admin_client, customer):
    res = admin_client.put(f"/api/v1/users/{customer.pk}/role/", {"role": "Supplier"}, format="json")
    assert res.status_code == 200
    assert res.json()["data"]["role"]["slug"] == "supplier"

    log = AuditLog.objects.filter(entity_type="User", entity_id=str(customer.pk)).latest("id")
    assert log.metadata == {"from": "Customer", "to": "Supplier"}


def test_soft_delete_hides_user(admin_client, customer):
    res = admin_client.delete(f"/api/v1/users/{customer.pk}/")
    assert res.status_code == 200

    assert not User.objects.filter(pk=customer.pk).exists()
    assert User.all_objects.filter(pk=customer.pk).exists()
    assert admin_client.get(f"/api/v1/users/{customer.pk}/").status_code == 404


def test_cannot_delete_self(admin_client, admin_user):
    res = admin_client.delete(f"/api/v1/users/{admin_user.pk}/")
    assert res.status_code == 422


def test_non_admin_cannot_manage_users(customer_client):
    assert customer_client.get("/api/v1/users/").status_code == 403


def test_null_company_fields_clear_the_value(admin_client, customer):
    res = admin_client.patch(
        f"/api/v1/users/{customer.pk}/",
        {"company_phone": None, "website": None, "company_name": "Acme Imports Ltd"},
        format="json",
    )
    assert res.status_code == 200, res.json()

    company = res.json()["data"]["company"]
    assert company["company_name"] == "Acme Imports Ltd"
    assert company["company_phone"] == ""
    assert company["website"] == ""
