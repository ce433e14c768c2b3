# freight_core/common/listing.py
from __future__ import annotations

from functools import reduce
from operator import or_
from typing import Iterable

import django_filters
from django.db.models import Count, Q, QuerySet

ALL_SENTINEL = "all"


def is_blank_or_all(value) -> bool:
    if value is None:
        return True
    text = str(value).strip()
    return text == "" or text.lower() == ALL_SENTINEL


def truthy(value) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


class ListingFilterSet(django_filters.FilterSet):
    """
    Shared listing filters:
      - search: case-insensitive substring across `search_fields` (may span one relation)
      - date: created/added on that day
      - date_from / date_to: inclusive range on the date portion

    Used straight from selectors through `.qs`, so a malformed value is dropped
    from cleaned_data and simply not applied. "all" is never a valid choice,
    which makes it a no-op on ChoiceFilters.
    """

    search_fields: tuple[str, ...] = ()

    search = django_filters.CharFilter(method="filter_search")
    date = django_filters.DateFilter(method="filter_date")
    date_from = django_filters.DateFilter(method="filter_date_from")
    date_to = django_filters.DateFilter(method="filter_date_to")

    # Override: (field name, True if DateTimeField)
    date_field: tuple[str, bool] = ("created_at", True)

    def _date_lookup(self, suffix: str = "") -> str:
        field, is_datetime = self.date_field
        base = f"{field}__date" if is_datetime else field
        return f"{base}__{suffix}" if suffix else base

    def filter_search(self, queryset, name, value):
        term = (value or "").strip()
        if not term or not self.search_fields:
            return queryset
        q = reduce(or_, (Q(**{f"{f}__icontains": term}) for f in self.search_fields))
        return queryset.filter(q).distinct()

    def filter_date(self, queryset, name, value):
        return queryset.filter(**{self._date_lookup(): value})

    def filter_date_from(self, queryset, name, value):
        return queryset.filter(**{self._date_lookup("gte"): value})

    def filter_date_to(self, queryset, name, value):
        return queryset.filter(**{self._date_lookup("lte"): value})


def count_by(queryset: QuerySet, field: str, keys: Iterable[str]) -> dict[str, int]:
    """
    Group-by count merged onto a zero-filled map of known categories.
    Unknown values found in the data are kept as well.
    """
    stats = {k: 0 for k in keys}
    rows = queryset.order_by().values(field).annotate(n=Count("pk", distinct=True))
    for row in rows:
        key = row[field]
        if key is None:
            continue
        stats[key] = stats.get(key, 0) + row["n"]
    return stats
