# freight_core/common/tests/test_roles.py
import pytest

from freight_core.common.roles import normalize_role, role_allowed, user_role


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Back Office", "back_office"),
        ("back-office", "back_office"),
        ("  BACK__office ", "back_office"),
        ("CHA", "cha"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_role(raw, expected):
    assert normalize_role(raw) == expected


def test_role_allowed_compares_normalized_forms():
    assert role_allowed("Back Office", {"back_office"})
    assert role_allowed("back_office", {"Back-Office"})
    assert not role_allowed("Customer", {"admin", "cha"})
    assert not role_allowed("", {"admin"})


@pytest.mark.django_db
def test_user_role_uses_role_slug_and_treats_superuser_as_admin(make_user, back_office):
    assert user_role(back_office) == "back_office"

    boss = make_user("customer", is_superuser=True, is_staff=True)
    assert user_role(boss) == "admin"
