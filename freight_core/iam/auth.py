# freight_core/iam/auth.py

from __future__ import annotations

from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication


class CookieOrHeaderJWTAuthentication(JWTAuthentication):
    """
    Access token from `Authorization: Bearer ...`, else from the `fd_access`
    cookie that login sets. An Authorization header always wins, so API
    clients are never affected by a stale browser cookie. The refresh cookie
    is only read by `auth/refresh/`.
    """

    def _access_cookie(self, request) -> str | None:
        return request.COOKIES.get(settings.SIMPLE_JWT.get("AUTH_COOKIE", "fd_access")) or None

    def authenticate(self, request):
        if self.get_header(request):
            return super().authenticate(request)

        raw_token = self._access_cookie(request)
        if raw_token is None:
            return None

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token
