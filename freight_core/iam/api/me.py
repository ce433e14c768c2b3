# freight_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from freight_core.common.api.responses import success
from freight_core.iam.api.schema_serializers import MeResponseSerializer
from freight_core.iam.api.serializers import UserSerializer
from freight_core.iam.selectors import users_qs


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["Auth"])
    def get(self, request):
        """
        Current user with role and company.
        """
        user = users_qs().filter(pk=request.user.pk).first() or request.user
        return success(UserSerializer(user).data)
