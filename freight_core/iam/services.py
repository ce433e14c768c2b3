# freight_core/iam/services.py
from __future__ import annotations

import logging
from typing import Any, Mapping

from django.db import transaction
from rest_framework.exceptions import ValidationError

from freight_core.audit.models import AuditAction
from freight_core.audit.services import AuditService, RequestOrigin
from freight_core.common.api.exceptions import ConflictError
from freight_core.common.roles import RoleName, normalize_role
from freight_core.iam.models import CompanyDetail, Role, User, UserStatus
from freight_core.iam.selectors import resolve_role

logger = logging.getLogger(__name__)

COMPANY_FIELDS = (
    "company_name",
    "company_email",
    "company_phone",
    "company_address",
    "city",
    "state",
    "country",
    "zip_code",
    "website",
)


def ensure_default_roles() -> dict[str, Role]:
    """
    Idempotent: one Role row per RoleName.
    """
    roles: dict[str, Role] = {}
    for value, label in RoleName.choices:
        role = Role.objects.filter(slug=value).first()
        if role is None:
            role = Role.objects.create(name=label)
        roles[value] = role
    return roles


class RoleService:
    @staticmethod
    def _ensure_unique(name: str, *, exclude_id: int | None = None) -> None:
        qs = Role.objects.filter(slug=normalize_role(name))
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        if qs.exists():
            raise ValidationError({"name": ["A role with this name already exists."]})

    @staticmethod
    @transaction.atomic
    def create(*, name: str, actor=None, origin: RequestOrigin | None = None) -> Role:
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["This field is required."]})
        RoleService._ensure_unique(name)

        role = Role.objects.create(name=name)
        AuditService.record(
            action=AuditAction.CREATE,
            actor=actor,
            entity_type="Role",
            entity_id=role.pk,
            description=f"Created role {role.name}",
            origin=origin,
        )
        return role

    @staticmethod
    @transaction.atomic
    def update(*, role: Role, name: str, actor=None, origin: RequestOrigin | None = None) -> Role:
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["This field is required."]})
        RoleService._ensure_unique(name, exclude_id=role.pk)

        previous = role.name
        role.name = name
        role.save(update_fields=["name", "updated_at"])
        AuditService.record(
            action=AuditAction.UPDATE,
            actor=actor,
            entity_type="Role",
            entity_id=role.pk,
            description=f"Renamed role {previous} to {role.name}",
            metadata={"from": previous, "to": role.name},
            origin=origin,
        )
        return role

    @staticmethod
    @transaction.atomic
    def delete(*, role: Role, actor=None, origin: RequestOrigin | None = None) -> None:
        # Soft-deleted users still reference the role
        if User.all_objects.filter(role=role).exists():
            raise ConflictError("Cannot delete role assigned to users.")

        role_id, role_name = role.pk, role.name
        role.delete()
        AuditService.record(
            action=AuditAction.DELETE,
            actor=actor,
            entity_type="Role",
            entity_id=role_id,
            description=f"Deleted role {role_name}",
            origin=origin,
        )


class UserService:
    """
    User write-model operations.
    Company fields travel with the user payload and live on CompanyDetail.
    """

    @staticmethod
    def _ensure_email_free(email: str, *, exclude_id: int | None = None) -> None:
        qs = User.all_objects.filter(email__iexact=email)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        if qs.exists():
            raise ValidationError({"email": ["The email has already been taken."]})

    @staticmethod
    def _apply_company(user: User, data: Mapping[str, Any]) -> None:
        values = {k: data[k] for k in COMPANY_FIELDS if k in data}
        if not values:
            return
        values = {k: (v or "") for k, v in values.items()}
        company = CompanyDetail.all_objects.filter(user=user).first()
        if company is None:
            CompanyDetail.objects.create(user=user, **values)
            return
        for k, v in values.items():
            setattr(company, k, v)
        company.deleted_at = None
        company.save()

    @staticmethod
    @transaction.atomic
    def create(
        *,
        data: Mapping[str, Any],
        actor=None,
        origin: RequestOrigin | None = None,
    ) -> User:
        email = User.objects.normalize_email(data["email"])
        UserService._ensure_email_free(email)

        role = resolve_role(data.get("role"))
        user = User.objects.create_user(
            email=email,
            password=data["password"],
            name=data["name"],
            role=role,
            status=data.get("status") or UserStatus.ACTIVE,
        )
        UserService._apply_company(user, data)

        logger.info("User %s created with role %s", user.pk, role.slug)
        AuditService.record(
            action=AuditAction.CREATE,
            actor=actor,
            entity_type="User",
            entity_id=user.pk,
            description=f"Created user {user.email}",
            metadata={"role": role.name},
            origin=origin,
        )
        return user

    @staticmethod
    @transaction.atomic
    def update(
        *,
        user: User,
        data: Mapping[str, Any],
        actor=None,
        origin: RequestOrigin | None = None,
    ) -> User:
        changed: list[str] = []

        if "email" in data:
            email = User.objects.normalize_email(data["email"])
            if email.lower() != user.email.lower():
                UserService._ensure_email_free(email, exclude_id=user.pk)
            user.email = email
            changed.append("email")

        for name in ("name", "status"):
            if name in data and data[name] is not None:
                setattr(user, name, data[name])
                changed.append(name)

        if data.get("role") not in (None, ""):
            user.role = resolve_role(data["role"])
            changed.append("role")

        if data.get("password"):
            user.set_password(data["password"])
            changed.append("password")

        user.save()
        UserService._apply_company(user, data)

        AuditService.record(
            action=AuditAction.UPDATE,
            actor=actor,
            entity_type="User",
            entity_id=user.pk,
            description=f"Updated user {user.email}",
            metadata={"fields": changed},
            origin=origin,
        )
        return user

    @staticmethod
    @transaction.atomic
    def update_role(*, user: User, role, actor=None, origin: RequestOrigin | None = None) -> User:
        new_role = resolve_role(role)
        previous = user.role_name

        user.role = new_role
        user.save(update_fields=["role", "updated_at"])

        AuditService.record(
            action=AuditAction.UPDATE,
            actor=actor,
            entity_type="User",
            entity_id=user.pk,
            description=f"Changed role of {user.email} from {previous or 'none'} to {new_role.name}",
            metadata={"from": previous, "to": new_role.name},
            origin=origin,
        )
        return user

    @staticmethod
    @transaction.atomic
    def delete(*, user: User, actor=None, origin: RequestOrigin | None = None) -> None:
        if actor is not None and actor.pk == user.pk:
            raise ValidationError({"user": ["You cannot delete your own account."]})

        user.soft_delete()
        AuditService.record(
            action=AuditAction.DELETE,
            actor=actor,
            entity_type="User",
            entity_id=user.pk,
            description=f"Deleted user {user.email}",
            origin=origin,
        )
