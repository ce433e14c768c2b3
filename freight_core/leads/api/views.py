# freight_core/leads/api/views.py
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
from freight_core.common.permissions import LeadPermission
from freight_core.leads.api.serializers import LeadSerializer, LeadWriteSerializer
from freight_core.leads.models import Lead
from freight_core.leads.selectors import leads_qs, list_leads
from freight_core.leads.services import LeadService


class LeadViewSet(viewsets.GenericViewSet):
    """
    Sales pipeline (admin + back office).
    """
    permission_classes = [LeadPermission]
    serializer_class = LeadSerializer
    queryset = Lead.objects.none()

    def _get_object(self, request, pk) -> Lead:
        lead = leads_qs().filter(pk=pk).first() if str(pk).isdigit() else None
        if lead is None:
            raise NotFound("Lead not found.")
        self.check_object_permissions(request, lead)
        return lead

    @extend_schema(
        tags=["Leads"],
        responses={200: LeadSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="Company, contact, email or phone contains."),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description='new | contacted | qualified | converted | all'),
            OpenApiParameter(name="date", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False,
                             description="Added on this day."),
            OpenApiParameter(name="date_from", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="date_to", type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="per_page", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        return paginate(request, list_leads(params=request.query_params), LeadSerializer)

    @extend_schema(tags=["Leads"], responses={200: LeadSerializer})
    def retrieve(self, request, pk=None):
        return success(LeadSerializer(self._get_object(request, pk)).data)

    @extend_schema(tags=["Leads"], request=LeadWriteSerializer, responses={201: LeadSerializer})
    def create(self, request):
        ser = LeadWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        lead = LeadService.create(
            data=ser.validated_data,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(LeadSerializer(lead).data, message="Lead created successfully.", status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Leads"], request=LeadWriteSerializer, responses={200: LeadSerializer})
    def update(self, request, pk=None):
        lead = self._get_object(request, pk)

        ser = LeadWriteSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        lead = LeadService.update(
            lead=lead,
            data=ser.validated_data,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(LeadSerializer(lead).data, message="Lead updated successfully.")

    @extend_schema(tags=["Leads"], request=LeadWriteSerializer, responses={200: LeadSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Leads"], responses={200: None})
    def destroy(self, request, pk=None):
        lead = self._get_object(request, pk)
        LeadService.delete(lead=lead, actor=request.user, origin=RequestOrigin.from_request(request))
        return success(message="Lead deleted successfully.")

    @extend_schema(tags=["Leads"], request=StatusUpdateSerializer, responses={200: LeadSerializer})
    @action(detail=True, methods=["patch", "put"], url_path="status")
    def set_status(self, request, pk=None):
        lead = self._get_object(request, pk)

        ser = StatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        lead = LeadService.set_status(
            lead=lead,
            status=ser.validated_data["status"],
            note=ser.validated_data.get("note"),
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(LeadSerializer(lead).data, message="Lead status updated successfully.")
