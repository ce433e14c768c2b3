# freight_core/common/roles.py
from __future__ import annotations

import re
from typing import Iterable

from django.db import models


class RoleName(models.TextChoices):
    """
    Closed set of capability tokens. Role rows in the database map onto these
    through their normalized slug.
    """
    ADMIN = "admin", "Admin"
    CUSTOMER = "customer", "Customer"
    SUPPLIER = "supplier", "Supplier"
    CHA = "cha", "CHA"
    BACK_OFFICE = "back_office", "Back Office"


_SEPARATORS = re.compile(r"[\s_\-]+")


def normalize_role(value) -> str:
    """
    "Back Office", "back-office", " BACK__office " -> "back_office"
    """
    if value is None:
        return ""
    token = _SEPARATORS.sub("_", str(value).strip().lower())
    return token.strip("_")


def role_allowed(role_name, allowed: Iterable[str]) -> bool:
    token = normalize_role(role_name)
    if not token:
        return False
    return token in {normalize_role(a) for a in allowed}


def user_role(user) -> str:
    """
    Normalized role token of an authenticated user ("" when none).
    Superusers are treated as admin.
    """
    if not user or not getattr(user, "is_authenticated", False):
        return ""

    if getattr(user, "is_superuser", False):
        return RoleName.ADMIN.value

    role = getattr(user, "role", None)
    if role is None:
        return ""
    return normalize_role(getattr(role, "slug", None) or getattr(role, "name", ""))