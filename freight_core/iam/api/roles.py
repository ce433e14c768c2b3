# freight_core/iam/api/roles.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.exceptions import NotFound

from freight_core.audit.services import RequestOrigin
from freight_core.common.api.pagination import paginate
from freight_core.common.api.responses import success
from freight_core.common.permissions import AdminOnlyPermission
from freight_core.iam.api.serializers import RoleSerializer, RoleWriteSerializer
from freight_core.iam.models import Role
from freight_core.iam.selectors import roles_qs
from freight_core.iam.services import RoleService


class RoleViewSet(viewsets.GenericViewSet):
    """
    Admin-only role management.
    """
    permission_classes = [AdminOnlyPermission]
    serializer_class = RoleSerializer
    queryset = Role.objects.none()

    def _get_object(self, pk) -> Role:
        role = roles_qs().filter(pk=pk).first() if str(pk).isdigit() else None
        if role is None:
            raise NotFound("Role not found.")
        return role

    @extend_schema(tags=["Roles"], responses={200: RoleSerializer(many=True)})
    def list(self, request):
        return paginate(request, roles_qs(), RoleSerializer)

    @extend_schema(tags=["Roles"], responses={200: RoleSerializer})
    def retrieve(self, request, pk=None):
        return success(RoleSerializer(self._get_object(pk)).data)

    @extend_schema(tags=["Roles"], request=RoleWriteSerializer, responses={201: RoleSerializer})
    def create(self, request):
        ser = RoleWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        role = RoleService.create(
            name=ser.validated_data["name"],
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(RoleSerializer(role).data, message="Role created successfully.", status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Roles"], request=RoleWriteSerializer, responses={200: RoleSerializer})
    def update(self, request, pk=None):
        role = self._get_object(pk)

        ser = RoleWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        role = RoleService.update(
            role=role,
            name=ser.validated_data["name"],
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(RoleSerializer(role).data, message="Role updated successfully.")

    @extend_schema(tags=["Roles"], request=RoleWriteSerializer, responses={200: RoleSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Roles"], responses={200: None})
    def destroy(self, request, pk=None):
        role = self._get_object(pk)
        RoleService.delete(role=role, actor=request.user, origin=RequestOrigin.from_request(request))
        return success(message="Role deleted successfully.")
