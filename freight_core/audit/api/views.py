# freight_core/audit/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from freight_core.audit.api.serializers import AuditLogSerializer
from freight_core.audit.export import write_audit_csv
from freight_core.audit.models import AuditLog
from freight_core.audit.selectors import audit_action_stats, list_audit_logs
from freight_core.common.api.pagination import paginate
from freight_core.common.listing import truthy
from freight_core.common.permissions import AdminOnlyPermission

FILTER_PARAMETERS = [
    OpenApiParameter(name="user", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                     description="User id, or part of the user's name/email."),
    OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="role", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                     description='Role name in any case/separator style, or "all".'),
    OpenApiParameter(name="action", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                     description='Create, Update, Delete, Approve, Reject, Send, Login, Logout or "all".'),
    OpenApiParameter(name="date", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="date_from", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
    OpenApiParameter(name="date_to", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
]


class AuditLogViewSet(viewsets.GenericViewSet):
    """
    Read-only audit trail (admin only) + CSV export.
    """
    permission_classes = [AdminOnlyPermission]
    serializer_class = AuditLogSerializer
    queryset = AuditLog.objects.none()

    @extend_schema(
        tags=["Audit"],
        responses={200: AuditLogSerializer(many=True)},
        parameters=[
            *FILTER_PARAMETERS,
            OpenApiParameter(name="per_page", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="include_stats", type=OpenApiTypes.BOOL, location=OpenApiParameter.QUERY,
                             required=False, description="Adds per-action counts over the filtered rows."),
        ],
    )
    def list(self, request):
        qs = list_audit_logs(params=request.query_params)
        stats = audit_action_stats(qs) if truthy(request.query_params.get("include_stats")) else None
        return paginate(request, qs, AuditLogSerializer, stats=stats)

    @extend_schema(
        tags=["Audit"],
        parameters=FILTER_PARAMETERS,
        responses={200: OpenApiResponse(response=OpenApiTypes.BINARY, description="text/csv attachment")},
    )
    @action(detail=False, methods=["get"], url_path="export")
    def export(self, request):
        qs = list_audit_logs(params=request.query_params)
        return write_audit_csv(qs.iterator())
