# freight_core/common/numbering.py
from __future__ import annotations

import re

from django.db import models
from django.utils import timezone


def next_document_number(model: type[models.Model], *, field: str, prefix: str, year: int | None = None) -> str:
    """
    Human-facing document number: <PREFIX>-<YEAR>-<seq>, seq zero-padded to 3
    digits and restarting every calendar year.

    Soft-deleted rows keep their number, so the scan goes through `all_objects`
    when the model has it. Call inside the creating transaction.
    """
    year = year or timezone.localdate().year
    stem = f"{prefix}-{year}-"
    pattern = re.compile(rf"^{re.escape(stem)}(\d+)$")

    manager = getattr(model, "all_objects", model._default_manager)
    issued = (
        manager.select_for_update()
        .filter(**{f"{field}__startswith": stem})
        .values_list(field, flat=True)
    )

    highest = 0
    for number in issued:
        m = pattern.match(number or "")
        if m:
            highest = max(highest, int(m.group(1)))

    return f"{stem}{highest + 1:03d}"
