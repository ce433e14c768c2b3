# freight_core/shipments/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser

from freight_core.audit.services import RequestOrigin
from freight_core.common.api.pagination import paginate
from freight_core.common.api.responses import success
from freight_core.common.api.serializers import StatusUpdateSerializer
from freight_core.common.listing import truthy
from freight_core.common.permissions import ShipmentPermission
from freight_core.common.workflow import read_timeline
from freight_core.shipments.api.serializers import (
    ShipmentDocumentSerializer,
    ShipmentDocumentUploadSerializer,
    ShipmentSerializer,
    ShipmentTimelineSerializer,
    ShipmentWriteSerializer,
)
from freight_core.shipments.models import Shipment
from freight_core.shipments.selectors import (
    get_shipment_document,
    list_shipments,
    shipment_status_stats,
    shipments_qs,
)
from freight_core.shipments.services import ShipmentService


class ShipmentViewSet(viewsets.GenericViewSet):
    """
    Shipments:
    - CHA + admin operate
    - customers read their own (directly or through the order) and upload documents
    """
    permission_classes = [ShipmentPermission]
    serializer_class = ShipmentSerializer
    queryset = Shipment.objects.none()
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def is_owner(self, user, obj: Shipment) -> bool:
        return user.pk in (obj.customer_id, obj.order.customer_id)

    def _get_object(self, request, pk) -> Shipment:
        shipment = shipments_qs().filter(pk=pk).first() if str(pk).isdigit() else None
        if shipment is None:
            raise NotFound("Shipment not found.")
        self.check_object_permissions(request, shipment)
        return shipment

    def _ctx(self, request) -> dict:
        return {"request": request}

    @extend_schema(
        tags=["Shipments"],
        responses={200: ShipmentSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="Shipment no, tracking no, carrier, route, customer or order fields contain."),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="Departed | In Transit | Arrived at Port | Customs Clearance | Delivered | all"),
            OpenApiParameter(name="include_stats", type=OpenApiTypes.BOOL, location=OpenApiParameter.QUERY,
                             required=False, description="Add per-status counts."),
            OpenApiParameter(name="per_page", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = list_shipments(actor=request.user, params=request.query_params)
        stats = shipment_status_stats(request.user) if truthy(request.query_params.get("include_stats")) else None
        return paginate(request, qs, ShipmentSerializer, stats=stats)

    @extend_schema(tags=["Shipments"], responses={200: ShipmentSerializer})
    def retrieve(self, request, pk=None):
        return success(ShipmentSerializer(self._get_object(request, pk), context=self._ctx(request)).data)

    @extend_schema(tags=["Shipments"], request=ShipmentWriteSerializer, responses={201: ShipmentSerializer})
    def create(self, request):
        ser = ShipmentWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        shipment = ShipmentService.create(
            data=ser.validated_data,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(
            ShipmentSerializer(shipment, context=self._ctx(request)).data,
            message="Shipment created successfully.",
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Shipments"], request=ShipmentWriteSerializer, responses={200: ShipmentSerializer})
    def update(self, request, pk=None):
        shipment = self._get_object(request, pk)

        ser = ShipmentWriteSerializer(shipment, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        shipment = ShipmentService.update(
            shipment=shipment,
            data=ser.validated_data,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(
            ShipmentSerializer(shipment, context=self._ctx(request)).data,
            message="Shipment updated successfully.",
        )

    @extend_schema(tags=["Shipments"], request=ShipmentWriteSerializer, responses={200: ShipmentSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Shipments"], responses={200: None})
    def destroy(self, request, pk=None):
        shipment = self._get_object(request, pk)
        ShipmentService.delete(shipment=shipment, actor=request.user, origin=RequestOrigin.from_request(request))
        return success(message="Shipment deleted successfully.")

    @extend_schema(tags=["Shipments"], request=StatusUpdateSerializer, responses={200: ShipmentSerializer})
    @action(detail=True, methods=["patch", "put"], url_path="status")
    def set_status(self, request, pk=None):
        shipment = self._get_object(request, pk)

        ser = StatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        shipment = ShipmentService.set_status(
            shipment=shipment,
            status=ser.validated_data["status"],
            note=ser.validated_data.get("note"),
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(
            ShipmentSerializer(shipment, context=self._ctx(request)).data,
            message="Shipment status updated successfully.",
        )

    @extend_schema(tags=["Shipments"], responses={200: ShipmentTimelineSerializer})
    @action(detail=True, methods=["get"], url_path="timeline")
    def timeline(self, request, pk=None):
        shipment = self._get_object(request, pk)
        payload = {
            "shipment_id": shipment.pk,
            "shipment_no": shipment.shipment_no,
            "status": shipment.status,
            "timeline": read_timeline(shipment),
        }
        return success(ShipmentTimelineSerializer(payload).data)

    @extend_schema(
        tags=["Shipments"],
        request={"multipart/form-data": ShipmentDocumentUploadSerializer},
        responses={201: ShipmentDocumentSerializer(many=True)},
    )
    @action(detail=True, methods=["post"], url_path="documents")
    def upload_documents(self, request, pk=None):
        shipment = self._get_object(request, pk)

        ser = ShipmentDocumentUploadSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        documents = ShipmentService.upload_documents(
            shipment=shipment,
            files=ser.validated_data["documents"],
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(
            ShipmentDocumentSerializer(documents, many=True, context=self._ctx(request)).data,
            message="Documents uploaded successfully.",
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Shipments"], responses={200: None})
    @action(detail=True, methods=["delete"], url_path=r"documents/(?P<document_id>[^/.]+)")
    def delete_document(self, request, pk=None, document_id=None):
        shipment = self._get_object(request, pk)

        document = get_shipment_document(shipment, document_id)
        if document is None:
            raise NotFound("Document not found.")

        ShipmentService.delete_document(
            document=document,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(message="Document deleted successfully.")
