# freight_core/quotations/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound

from freight_core.audit.services import RequestOrigin
from freight_core.common.api.pagination import paginate
from freight_core.common.api.responses import success
from freight_core.common.api.serializers import StatusUpdateSerializer
from freight_core.common.permissions import QuotationPermission
from freight_core.quotations.api.serializers import (
    QuotationResponseSerializer,
    QuotationSerializer,
    QuotationWriteSerializer,
)
from freight_core.quotations.models import Quotation, QuotationStatus
from freight_core.quotations.selectors import list_quotations, quotations_qs
from freight_core.quotations.services import QuotationService


class QuotationViewSet(viewsets.GenericViewSet):
    """
    Staff create and manage quotations; the addressed customer can read theirs
    and approve / reject / request changes.
    """
    permission_classes = [QuotationPermission]
    serializer_class = QuotationSerializer
    queryset = Quotation.objects.none()

    def is_owner(self, user, obj: Quotation) -> bool:
        return obj.user_id == user.pk

    def _get_object(self, request, pk) -> Quotation:
        quotation = quotations_qs().filter(pk=pk).first() if str(pk).isdigit() else None
        if quotation is None:
            raise NotFound("Quotation not found.")
        self.check_object_permissions(request, quotation)
        return quotation

    @extend_schema(
        tags=["Quotations"],
        responses={200: QuotationSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="Quote id, customer name, email or company contains."),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="Draft | Sent | Approved | Rejected | ChangesRequested | all"),
            OpenApiParameter(name="per_page", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = list_quotations(actor=request.user, params=request.query_params)
        return paginate(request, qs, QuotationSerializer)

    @extend_schema(tags=["Quotations"], responses={200: QuotationSerializer})
    def retrieve(self, request, pk=None):
        return success(QuotationSerializer(self._get_object(request, pk)).data)

    @extend_schema(tags=["Quotations"], request=QuotationWriteSerializer, responses={201: QuotationSerializer})
    def create(self, request):
        ser = QuotationWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        quotation = QuotationService.create(
            data=ser.validated_data,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        quotation = quotations_qs().get(pk=quotation.pk)
        return success(
            QuotationSerializer(quotation).data,
            message="Quotation created successfully.",
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Quotations"], request=QuotationWriteSerializer, responses={200: QuotationSerializer})
    def update(self, request, pk=None):
        quotation = self._get_object(request, pk)

        ser = QuotationWriteSerializer(quotation, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        QuotationService.update(
            quotation=quotation,
            data=ser.validated_data,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        quotation = quotations_qs().get(pk=quotation.pk)
        return success(QuotationSerializer(quotation).data, message="Quotation updated successfully.")

    @extend_schema(tags=["Quotations"], request=QuotationWriteSerializer, responses={200: QuotationSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Quotations"], responses={200: None})
    def destroy(self, request, pk=None):
        quotation = self._get_object(request, pk)
        QuotationService.delete(quotation=quotation, actor=request.user, origin=RequestOrigin.from_request(request))
        return success(message="Quotation deleted successfully.")

    @extend_schema(tags=["Quotations"], request=StatusUpdateSerializer, responses={200: QuotationSerializer})
    @action(detail=True, methods=["patch", "put"], url_path="status")
    def set_status(self, request, pk=None):
        quotation = self._get_object(request, pk)

        ser = StatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        quotation = QuotationService.set_status(
            quotation=quotation,
            status=ser.validated_data["status"],
            note=ser.validated_data.get("note"),
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(QuotationSerializer(quotation).data, message="Quotation status updated successfully.")

    # ---- customer responses ----

    def _respond(self, request, pk, target_status: str, message: str):
        quotation = self._get_object(request, pk)

        ser = QuotationResponseSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        quotation = QuotationService.respond(
            quotation=quotation,
            status=target_status,
            note=ser.validated_data.get("note"),
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(QuotationSerializer(quotation).data, message=message)

    @extend_schema(tags=["Quotations"], request=QuotationResponseSerializer, responses={200: QuotationSerializer})
    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):
        return self._respond(request, pk, QuotationStatus.APPROVED, "Quotation approved.")

    @extend_schema(tags=["Quotations"], request=QuotationResponseSerializer, responses={200: QuotationSerializer})
    @action(detail=True, methods=["post"], url_path="reject")
    def reject(self, request, pk=None):
        return self._respond(request, pk, QuotationStatus.REJECTED, "Quotation rejected.")

    @extend_schema(tags=["Quotations"], request=QuotationResponseSerializer, responses={200: QuotationSerializer})
    @action(detail=True, methods=["post"], url_path="request-changes")
    def request_changes(self, request, pk=None):
        return self._respond(request, pk, QuotationStatus.CHANGES_REQUESTED, "Changes requested on quotation.")
