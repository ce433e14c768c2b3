# freight_core/iam/api/users.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound

from freight_core.audit.services import RequestOrigin
from freight_core.common.api.pagination import paginate
from freight_core.common.api.responses import success
from freight_core.common.permissions import AdminOnlyPermission
from freight_core.iam.api.serializers import (
    UserCreateSerializer,
    UserRoleSerializer,
    UserSerializer,
    UserUpdateSerializer,
)
from freight_core.iam.models import User
from freight_core.iam.selectors import list_users, user_role_stats, users_qs
from freight_core.iam.services import UserService


class UserViewSet(viewsets.GenericViewSet):
    """
    Admin-only user management:
    - list (search / role / status + role stats)
    - create / retrieve / update / soft delete
    - PUT {id}/role/
    """
    permission_classes = [AdminOnlyPermission]
    serializer_class = UserSerializer
    queryset = User.objects.none()

    def _get_object(self, pk) -> User:
        user = users_qs().filter(pk=pk).first() if str(pk).isdigit() else None
        if user is None:
            raise NotFound("User not found.")
        return user

    @extend_schema(
        tags=["Users"],
        responses={200: UserSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="Name, email or company name contains."),
            OpenApiParameter(name="role", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description='Role name in any case/separator style, or "all".'),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description='active | inactive | all'),
            OpenApiParameter(name="per_page", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = list_users(params=request.query_params)
        return paginate(request, qs, UserSerializer, stats=user_role_stats())

    @extend_schema(tags=["Users"], responses={200: UserSerializer})
    def retrieve(self, request, pk=None):
        return success(UserSerializer(self._get_object(pk)).data)

    @extend_schema(tags=["Users"], request=UserCreateSerializer, responses={201: UserSerializer})
    def create(self, request):
        ser = UserCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        user = UserService.create(
            data=ser.validated_data,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        user = self._get_object(user.pk)
        return success(UserSerializer(user).data, message="User created successfully.", status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Users"], request=UserUpdateSerializer, responses={200: UserSerializer})
    def update(self, request, pk=None):
        user = self._get_object(pk)

        ser = UserUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        UserService.update(
            user=user,
            data=ser.validated_data,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(UserSerializer(self._get_object(pk)).data, message="User updated successfully.")

    @extend_schema(tags=["Users"], request=UserUpdateSerializer, responses={200: UserSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Users"], responses={200: None})
    def destroy(self, request, pk=None):
        user = self._get_object(pk)
        UserService.delete(user=user, actor=request.user, origin=RequestOrigin.from_request(request))
        return success(message="User deleted successfully.")

    @extend_schema(tags=["Users"], request=UserRoleSerializer, responses={200: UserSerializer})
    @action(detail=True, methods=["put", "patch"], url_path="role")
    def update_role(self, request, pk=None):
        user = self._get_object(pk)

        ser = UserRoleSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        UserService.update_role(
            user=user,
            role=ser.validated_data["role"],
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(UserSerializer(self._get_object(pk)).data, message="User role updated successfully.")
