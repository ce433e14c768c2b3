# freight_core/common/api/responses.py
from __future__ import annotations

from typing import Any

from rest_framework import status as http
from rest_framework.response import Response


def success(data: Any = None, *, message: str | None = None, status: int = http.HTTP_200_OK) -> Response:
    body: dict[str, Any] = {"status": "success"}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return Response(body, status=status)
