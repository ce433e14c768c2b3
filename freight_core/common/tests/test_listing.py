# freight_core/common/tests/test_listing.py
from datetime import date

import pytest

from freight_core.common.listing import count_by, is_blank_or_all, truthy
from freight_core.leads.models import Lead, LeadStatus
from freight_core.leads.selectors import list_leads

pytestmark = pytest.mark.django_db


@pytest.fixture
def leads():
    return [
        Lead.objects.create(company="Acme", contact="Ann", added_date=date(2025, 12, 31), status="new"),
        Lead.objects.create(company="Globex", contact="Gus", added_date=date(2026, 1, 1), status="contacted"),
        Lead.objects.create(company="Initech", contact="Ian", added_date=date(2026, 1, 31), status="new"),
        Lead.objects.create(company="Umbrella", contact="Uma", added_date=date(2026, 2, 1), status="qualified"),
    ]


def test_date_range_is_inclusive_on_both_ends(leads):
    qs = list_leads(params={"date_from": "2026-01-01", "date_to": "2026-01-31"})
    assert sorted(l.company for l in qs) == ["Globex", "Initech"]


def test_status_all_equals_no_filter(leads):
    assert list_leads(params={"status": "all"}).count() == list_leads(params={}).count() == 4


def test_unknown_status_and_bad_dates_are_ignored(leads):
    assert list_leads(params={"status": "bogus"}).count() == 4
    assert list_leads(params={"date_from": "not-a-date"}).count() == 4


def test_search_is_case_insensitive_substring(leads):
    assert [l.company for l in list_leads(params={"search": "GLOB"})] == ["Globex"]


def test_count_by_zero_fills_known_keys(leads):
    stats = count_by(Lead.objects.all(), "status", LeadStatus.values)
    assert stats == {"new": 2, "contacted": 1, "qualified": 1, "converted": 0}

    empty = count_by(Lead.objects.none(), "status", LeadStatus.values)
    assert set(empty) == set(LeadStatus.values)
    assert all(v == 0 for v in empty.values())


def test_helpers():
    assert is_blank_or_all(None)
    assert is_blank_or_all(" ALL ")
    assert not is_blank_or_all("new")
    assert truthy("true") and truthy("1") and not truthy("no") and not truthy(None)


def test_page_past_the_end_is_empty_not_404(admin_client, leads):
    res = admin_client.get("/api/v1/leads/", {"per_page": 2, "page": 5})
    assert res.status_code == 200

    data = res.json()["data"]
    assert data["results"] == []
    assert data["count"] == 4
    assert data["last_page"] == 2
    assert data["current_page"] == 5
    assert data["next"] is None
    assert "page=2" in data["previous"]


def test_junk_page_number_falls_back_to_first_page(admin_client, leads):
    res = admin_client.get("/api/v1/leads/", {"per_page": 3, "page": "abc"})
    assert res.status_code == 200

    data = res.json()["data"]
    assert data["current_page"] == 1
    assert len(data["results"]) == 3


def test_last_page_keyword(admin_client, leads):
    data = admin_client.get("/api/v1/leads/", {"per_page": 3, "page": "last"}).json()["data"]
    assert data["current_page"] == 2
    assert len(data["results"]) == 1
