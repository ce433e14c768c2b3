from __future__ import annotations

from typing import Any

from django.core.paginator import Page
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.utils.urls import replace_query_param


class DefaultPagination(PageNumberPagination):
    """
    Page numbers past the end give an empty page with the real totals;
    junk page numbers fall back to page 1. Listings never 404 on paging.
    """
    page_size = 10
    page_size_query_param = "per_page"
    max_page_size = 100

    def _page_number(self, request, paginator) -> int:
        raw = request.query_params.get(self.page_query_param)
        if raw in self.last_page_strings:
            return paginator.num_pages
        try:
            number = int(raw)
        except (TypeError, ValueError):
            return 1
        return max(number, 1)

    def paginate_queryset(self, queryset, request, view=None):
        page_size = self.get_page_size(request)
        if not page_size:
            return None

        paginator = self.django_paginator_class(queryset, page_size)
        number = self._page_number(request, paginator)
        self.request = request

        if number > paginator.num_pages:
            self.page = Page([], number, paginator)
            return []

        self.page = paginator.page(number)
        return list(self.page)

    def get_previous_link(self):
        if self.page.number > self.page.paginator.num_pages:
            url = self.request.build_absolute_uri()
            return replace_query_param(url, self.page_query_param, self.page.paginator.num_pages)
        return super().get_previous_link()

    def get_paginated_payload(self, data) -> dict[str, Any]:
        return {
            "count": self.page.paginator.count,
            "per_page": self.page.paginator.per_page,
            "current_page": self.page.number,
            "last_page": self.page.paginator.num_pages,
            "next": self.get_next_link(),
            "previous": self.get_previous_link(),
            "results": data,
        }

    def get_paginated_response(self, data):
        return Response({"status": "success", "data": self.get_paginated_payload(data)})


def paginate(
    request,
    queryset,
    serializer_class,
    *,
    stats: dict[str, int] | None = None,
    paginator: DefaultPagination | None = None,
    context: dict[str, Any] | None = None,
) -> Response:
    """
    Shared pagination helper to enforce a stable contract:
      {"status": "success", "data": {count, per_page, current_page, last_page, next, previous, results}, "stats"?}
    """
    p = paginator or DefaultPagination()
    ctx = {"request": request, **(context or {})}

    page = p.paginate_queryset(queryset, request)
    if page is not None:
        ser = serializer_class(page, many=True, context=ctx)
        payload = {"status": "success", "data": p.get_paginated_payload(ser.data)}
    else:
        ser = serializer_class(queryset, many=True, context=ctx)
        payload = {"status": "success", "data": ser.data}

    if stats is not None:
        payload["stats"] = stats
    return Response(payload)
