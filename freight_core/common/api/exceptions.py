# freight_core/common/api/exceptions.py

from __future__ import annotations

import logging
import uuid
from typing import Any

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotAuthenticated,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def ensure_request_id(request) -> str:
    """
    Ensures request has a stable request_id attribute and returns it.
    Safe to call from middleware and DRF exception handler.
    """
    rid = getattr(request, "request_id", None) if request is not None else None
    if not rid:
        rid = uuid.uuid4().hex
        if request is not None:
            setattr(request, "request_id", rid)
    return rid


def build_error_envelope(*, request=None, code: str, message: str, errors: Any = None) -> dict[str, Any]:
    """
    Canonical error envelope:
      {"status": "error", "code", "message", "errors", "request_id"}
    """
    return {
        "status": "error",
        "code": code,
        "message": message,
        "errors": errors,
        "request_id": ensure_request_id(request),
    }


class ConflictError(APIException):
    """
    Business rule blocks the action (e.g. deleting a role that users still hold).
    Surfaced as 400 with code "conflict".
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Conflict."
    default_code = "conflict"

    def __init__(self, detail=None, code=None):
        super().__init__(detail=detail or self.default_detail, code=code or self.default_code)


def _code_for(exc: Exception, http_status: int) -> str:
    if isinstance(exc, ValidationError):
        return "validation_error"
    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)) or http_status == status.HTTP_401_UNAUTHORIZED:
        return "not_authenticated"
    if isinstance(exc, PermissionDenied):
        return "permission_denied"
    if isinstance(exc, (Http404, NotFound)):
        return "not_found"
    if isinstance(exc, APIException):
        return getattr(exc, "default_code", "api_error") or "api_error"
    if http_status >= 500:
        return "server_error"
    return "error"


def _status_for(exc: Exception, http_status: int) -> int:
    # Validation failures are reported as 422 across the API
    if isinstance(exc, ValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    return http_status


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(exc.message_dict if hasattr(exc, "error_dict") else exc.messages)

    response = drf_exception_handler(exc, context)

    # Truly unhandled error
    if response is None:
        logger.error(
            "Unhandled API error: %s",
            exc,
            exc_info=(type(exc), exc, exc.__traceback__),
            extra={"request_id": ensure_request_id(request)},
        )
        return Response(
            build_error_envelope(
                request=request,
                code="server_error",
                message="Unexpected server error.",
                errors=None,
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    http_status = _status_for(exc, response.status_code)
    code = _code_for(exc, response.status_code)

    data = response.data

    # Message + errors rules:
    # 1) {"detail": "..."} only -> message=detail, errors=None
    # 2) {"detail": "...", ...} -> message=detail, errors={...without detail}
    # 3) field errors -> message="The given data was invalid.", errors=data
    message = "Request failed."
    errors = data

    if isinstance(data, dict) and "detail" in data:
        message = str(data.get("detail"))
        rest = {k: v for k, v in data.items() if k != "detail"}
        errors = rest or None
    elif isinstance(data, list):
        message = str(data[0]) if len(data) == 1 else "The given data was invalid."
        errors = {"non_field_errors": data}
    elif code == "validation_error":
        message = "The given data was invalid."

    return Response(
        build_error_envelope(
            request=request,
            code=code,
            message=message,
            errors=errors,
        ),
        status=http_status,
        headers={k: v for k, v in response.items() if k in ("WWW-Authenticate", "Retry-After")},
    )
