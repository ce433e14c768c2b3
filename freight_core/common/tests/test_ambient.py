import logging
from io import StringIO

import pytest
from django.core.management import call_command

from freight_core.common.logging_config import RequestIDFilter, clear_current_request_id, set_current_request_id
from freight_core.iam.models import Role


@pytest.mark.django_db
def test_ensure_roles_is_idempotent():
    out = StringIO()
    call_command("ensure_roles", stdout=out)
    call_command("ensure_roles", stdout=out)

    assert sorted(Role.objects.values_list("slug", flat=True)) == [
        "admin", "back_office", "cha", "customer", "supplier",
    ]
    assert "Back Office" in out.getvalue()


def _record():
    return logging.LogRecord("freight_core", logging.INFO, __file__, 1, "msg", None, None)


def test_request_id_filter_outside_request():
    record = _record()
    assert RequestIDFilter().filter(record) is True
    assert record.request_id == "N/A"


def test_request_id_filter_uses_current_request():
    set_current_request_id("abc123def456")
    try:
        record = _record()
        RequestIDFilter().filter(record)
    finally:
        clear_current_request_id()
    assert record.request_id == "abc123def456"


@pytest.mark.django_db
def test_every_response_carries_request_id(admin_client):
    res = admin_client.get("/api/v1/me/")
    assert res.status_code == 200
    assert len(res["X-Request-ID"]) >= 8


def test_schema_lists_only_versioned_paths():
    from freight_core.common.spectacular_hooks import preprocess_exclude_legacy_api

    endpoints = [
        ("/api/v1/orders/", None, "GET", None),
        ("/api/orders/", None, "GET", None),
        ("/api/schema/", None, "GET", None),
        ("/admin/", None, "GET", None),
    ]
    kept = [path for path, *_ in preprocess_exclude_legacy_api(endpoints)]
    assert kept == ["/api/v1/orders/", "/admin/"]
