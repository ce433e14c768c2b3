# freight_core/clearances/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser

from freight_core.audit.services import RequestOrigin
from freight_core.clearances.api.serializers import (
    ClearanceDocumentSerializer,
    ClearanceDocumentUploadSerializer,
    ClearanceSerializer,
    ClearanceTimelineSerializer,
    ClearanceWriteSerializer,
)
from freight_core.clearances.models import Clearance
from freight_core.clearances.selectors import clearances_qs, get_clearance_document, list_clearances
from freight_core.clearances.services import ClearanceService
from freight_core.common.api.pagination import paginate
from freight_core.common.api.responses import success
from freight_core.common.api.serializers import StatusUpdateSerializer
from freight_core.common.permissions import ClearancePermission
from freight_core.common.workflow import read_timeline


class ClearanceViewSet(viewsets.GenericViewSet):
    """
    Customs clearances, one per shipment arrival. CHA + admin operate;
    customers can follow the clearances of their own shipments.
    """
    permission_classes = [ClearancePermission]
    serializer_class = ClearanceSerializer
    queryset = Clearance.objects.none()
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def is_owner(self, user, obj: Clearance) -> bool:
        return user.pk in (obj.shipment.customer_id, obj.shipment.order.customer_id)

    def _get_object(self, request, pk) -> Clearance:
        clearance = clearances_qs().filter(pk=pk).first() if str(pk).isdigit() else None
        if clearance is None:
            raise NotFound("Clearance not found.")
        self.check_object_permissions(request, clearance)
        return clearance

    def _render(self, request, clearance: Clearance):
        # Reload so the document checklist reflects writes made in this request
        fresh = clearances_qs().get(pk=clearance.pk)
        return ClearanceSerializer(fresh, context={"request": request}).data

    @extend_schema(
        tags=["Clearances"],
        responses={200: ClearanceSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="Clearance no, port, shipment no / tracking no, customer or CHA contains."),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="pending | in_progress | cleared | released | all"),
            OpenApiParameter(name="date", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="date_from", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="date_to", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="per_page", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = list_clearances(actor=request.user, params=request.query_params)
        return paginate(request, qs, ClearanceSerializer)

    @extend_schema(tags=["Clearances"], responses={200: ClearanceSerializer})
    def retrieve(self, request, pk=None):
        clearance = self._get_object(request, pk)
        return success(ClearanceSerializer(clearance, context={"request": request}).data)

    @extend_schema(tags=["Clearances"], request=ClearanceWriteSerializer, responses={201: ClearanceSerializer})
    def create(self, request):
        ser = ClearanceWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        clearance = ClearanceService.create(
            data=ser.validated_data,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(
            self._render(request, clearance),
            message="Clearance created successfully.",
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Clearances"], request=ClearanceWriteSerializer, responses={200: ClearanceSerializer})
    def update(self, request, pk=None):
        clearance = self._get_object(request, pk)

        ser = ClearanceWriteSerializer(clearance, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        clearance = ClearanceService.update(
            clearance=clearance,
            data=ser.validated_data,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(self._render(request, clearance), message="Clearance updated successfully.")

    @extend_schema(tags=["Clearances"], request=ClearanceWriteSerializer, responses={200: ClearanceSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Clearances"], responses={200: None})
    def destroy(self, request, pk=None):
        clearance = self._get_object(request, pk)
        ClearanceService.delete(clearance=clearance, actor=request.user, origin=RequestOrigin.from_request(request))
        return success(message="Clearance deleted successfully.")

    @extend_schema(tags=["Clearances"], request=StatusUpdateSerializer, responses={200: ClearanceSerializer})
    @action(detail=True, methods=["patch", "put"], url_path="status")
    def set_status(self, request, pk=None):
        clearance = self._get_object(request, pk)

        ser = StatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        clearance = ClearanceService.set_status(
            clearance=clearance,
            status=ser.validated_data["status"],
            note=ser.validated_data.get("note"),
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(self._render(request, clearance), message="Clearance status updated successfully.")

    @extend_schema(tags=["Clearances"], responses={200: ClearanceTimelineSerializer})
    @action(detail=True, methods=["get"], url_path="timeline")
    def timeline(self, request, pk=None):
        clearance = self._get_object(request, pk)
        payload = {
            "clearance_id": clearance.pk,
            "clearance_no": clearance.clearance_no,
            "status": clearance.status,
            "timeline": read_timeline(clearance),
        }
        return success(ClearanceTimelineSerializer(payload).data)

    @extend_schema(
        tags=["Clearances"],
        request={"multipart/form-data": ClearanceDocumentUploadSerializer},
        responses={201: ClearanceDocumentSerializer},
    )
    @action(detail=True, methods=["post"], url_path="documents")
    def upload_document(self, request, pk=None):
        clearance = self._get_object(request, pk)

        ser = ClearanceDocumentUploadSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        document = ClearanceService.upload_document(
            clearance=clearance,
            doc_key=ser.validated_data["doc_key"],
            upload=ser.validated_data["file"],
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(
            ClearanceDocumentSerializer(document, context={"request": request}).data,
            message="Document uploaded successfully.",
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Clearances"], responses={200: None})
    @action(detail=True, methods=["delete"], url_path=r"documents/(?P<doc_key>[a-z_]+)")
    def delete_document(self, request, pk=None, doc_key=None):
        clearance = self._get_object(request, pk)

        document = get_clearance_document(clearance, doc_key)
        if document is None:
            raise NotFound("Document not found.")

        ClearanceService.delete_document(
            document=document,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(message="Document deleted successfully.")
