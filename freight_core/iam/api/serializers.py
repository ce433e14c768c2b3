# freight_core/iam/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from freight_core.iam.models import CompanyDetail, Role, User, UserStatus


class RoleSerializer(serializers.ModelSerializer):
    users_count = serializers.SerializerMethodField()

    class Meta:
        model = Role
        fields = ["id", "name", "slug", "users_count", "created_at", "updated_at"]
        read_only_fields = fields

    def get_users_count(self, obj) -> int:
        return obj.users.filter(deleted_at__isnull=True).count()


class RoleWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)


class RoleMiniSerializer(serializers.ModelSerializer):
    class Meta:
        model = Role
        fields = ["id", "name", "slug"]
        read_only_fields = fields


class CompanyDetailSerializer(serializers.ModelSerializer):
    class Meta:
        model = CompanyDetail
        fields = [
            "company_name",
            "company_email",
            "company_phone",
            "company_address",
            "city",
            "state",
            "country",
            "zip_code",
            "website",
        ]
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    role = RoleMiniSerializer(read_only=True)
    company = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "name", "email", "role", "status", "company", "last_login", "created_at", "updated_at"]
        read_only_fields = fields

    def get_company(self, obj):
        company = getattr(obj, "company", None)
        if company is None or company.deleted_at is not None:
            return None
        return CompanyDetailSerializer(company).data


class UserMiniSerializer(serializers.ModelSerializer):
    role = serializers.CharField(source="role_name", read_only=True)
    company_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "name", "email", "role", "company_name"]
        read_only_fields = fields

    def get_company_name(self, obj) -> str:
        company = getattr(obj, "company", None)
        return company.company_name if company is not None else ""


class _CompanyFieldsMixin(serializers.Serializer):
    company_name = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    company_email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    company_phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=32)
    company_address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    city = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=128)
    state = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=128)
    country = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=128)
    zip_code = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=32)
    website = serializers.URLField(required=False, allow_blank=True, allow_null=True)


def _merge_role_reference(attrs: dict, *, required: bool) -> dict:
    """
    `role` and `role_name` are interchangeable; either may hold an id or a name.
    """
    role_name = attrs.pop("role_name", None)
    if attrs.get("role") in (None, "") and role_name not in (None, ""):
        attrs["role"] = role_name
    if required and attrs.get("role") in (None, ""):
        raise serializers.ValidationError({"role": ["This field is required."]})
    return attrs


class UserCreateSerializer(_CompanyFieldsMixin):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField(max_length=254)
    password = serializers.CharField(min_length=8, write_only=True, trim_whitespace=False)
    role = serializers.CharField(required=False, allow_blank=True)
    role_name = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=UserStatus.choices, required=False, default=UserStatus.ACTIVE)

    def validate(self, attrs):
        return _merge_role_reference(attrs, required=True)


class UserUpdateSerializer(_CompanyFieldsMixin):
    name = serializers.CharField(max_length=255, required=False)
    email = serializers.EmailField(max_length=254, required=False)
    password = serializers.CharField(min_length=8, write_only=True, required=False, trim_whitespace=False)
    role = serializers.CharField(required=False, allow_blank=True)
    role_name = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=UserStatus.choices, required=False)

    def validate(self, attrs):
        return _merge_role_reference(attrs, required=False)


class UserRoleSerializer(serializers.Serializer):
    role = serializers.CharField(required=False, allow_blank=True)
    role_name = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        return _merge_role_reference(attrs, required=True)
