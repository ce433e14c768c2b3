from __future__ import annotations

import logging
import re

from freight_core.common.api.exceptions import ensure_request_id
from freight_core.common.logging_config import clear_current_request_id, set_current_request_id

logger = logging.getLogger("django.request")

_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9\-]{8,64}$")


class RequestIDMiddleware:
    """
    Attaches a request id to every request:
      - request.request_id (reused by the API error envelope)
      - thread-local for log records
      - X-Request-ID response header

    A well-formed inbound X-Request-ID is kept so ids line up across proxies.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        inbound = request.META.get("HTTP_X_REQUEST_ID", "")
        if inbound and _SAFE_REQUEST_ID.match(inbound):
            request.request_id = inbound
        request_id = ensure_request_id(request)

        set_current_request_id(request_id)
        try:
            response = self.get_response(request)
        finally:
            clear_current_request_id()

        response["X-Request-ID"] = request_id
        return response

    def process_exception(self, request, exception):
        logger.error(
            "Exception: %s: %s",
            type(exception).__name__,
            exception,
            exc_info=True,
            extra={"request_id": getattr(request, "request_id", "N/A")},
        )
        return None
