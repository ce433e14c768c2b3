# freight_core/iam/api/schema_serializers.py
from __future__ import annotations

from rest_framework import serializers

from freight_core.iam.api.serializers import UserSerializer


class LoginRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField()


class TokenPairSerializer(serializers.Serializer):
    access = serializers.CharField()
    refresh = serializers.CharField()
    user = UserSerializer()


class LoginResponseSerializer(serializers.Serializer):
    status = serializers.CharField()
    message = serializers.CharField()
    data = TokenPairSerializer()


class RefreshRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, help_text="Falls back to the refresh cookie.")


class DetailResponseSerializer(serializers.Serializer):
    status = serializers.CharField()
    message = serializers.CharField()


class MeResponseSerializer(serializers.Serializer):
    status = serializers.CharField()
    data = UserSerializer()
