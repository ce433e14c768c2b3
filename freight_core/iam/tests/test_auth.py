import pytest

from freight_core.audit.models import AuditLog

pytestmark = pytest.mark.django_db


def test_login_sets_cookies_and_audits(anon_client, customer):
    res = anon_client.post(
        "/api/v1/auth/login/",
        {"email": "carla@example.com", "password": "Pass@12345"},
        format="json",
    )
    assert res.status_code == 200, res.json()

    data = res.json()["data"]
    assert data["access"] and data["refresh"]
    assert data["user"]["email"] == "carla@example.com"
    assert "fd_access" in res.cookies
    assert "fd_refresh" in res.cookies

    log = AuditLog.objects.get(action="Login")
    assert log.actor_id == customer.pk
    assert log.role == "Customer"


def test_wrong_password_is_401(anon_client, customer):
    res = anon_client.post(
        "/api/v1/auth/login/",
        {"email": "carla@example.com", "password": "nope-nope"},
        format="json",
    )
    assert res.status_code == 401
    assert res.json()["status"] == "error"
    assert not AuditLog.objects.filter(action="Login").exists()


def test_access_cookie_authenticates(anon_client, customer):
    anon_client.post(
        "/api/v1/auth/login/",
        {"email": "carla@example.com", "password": "Pass@12345"},
        format="json",
    )
    # APIClient keeps the cookies from the login response
    res = anon_client.get("/api/v1/me/")
    assert res.status_code == 200
    assert res.json()["data"]["company"]["company_name"] == "Acme Imports"


def test_bearer_header_authenticates(anon_client, customer):
    login = anon_client.post(
        "/api/v1/auth/login/",
        {"email": "carla@example.com", "password": "Pass@12345"},
        format="json",
    )
    access = login.json()["data"]["access"]

    from rest_framework.test import APIClient

    fresh = APIClient()
    res = fresh.get("/api/v1/me/", HTTP_AUTHORIZATION=f"Bearer {access}")
    assert res.status_code == 200
    assert res.json()["data"]["role"]["slug"] == "customer"


def test_logout_audits_and_clears_cookies(customer_client, customer):
    res = customer_client.post("/api/v1/auth/logout/")
    assert res.status_code == 200
    assert res.cookies["fd_access"].value == ""

    log = AuditLog.objects.get(action="Logout")
    assert log.actor_id == customer.pk


def test_me_requires_authentication(anon_client):
    assert anon_client.get("/api/v1/me/").status_code == 401


def test_bearer_header_wins_over_stale_cookie(anon_client, customer, supplier):
    anon_client.post(
        "/api/v1/auth/login/",
        {"email": "carla@example.com", "password": "Pass@12345"},
        format="json",
    )
    supplier_login = anon_client.post(
        "/api/v1/auth/login/",
        {"email": "sam@example.com", "password": "Pass@12345"},
        format="json",
    )
    access = supplier_login.json()["data"]["access"]
    anon_client.cookies["fd_access"] = "not-a-token"

    res = anon_client.get("/api/v1/me/", HTTP_AUTHORIZATION=f"Bearer {access}")
    assert res.status_code == 200
    assert res.json()["data"]["email"] == "sam@example.com"
