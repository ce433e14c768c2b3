# freight_core/common/permissions.py

from __future__ import annotations

from rest_framework.permissions import SAFE_METHODS, BasePermission

from freight_core.common.roles import RoleName, role_allowed, user_role

ROLE_ADMIN = RoleName.ADMIN.value
ROLE_CUSTOMER = RoleName.CUSTOMER.value
ROLE_SUPPLIER = RoleName.SUPPLIER.value
ROLE_CHA = RoleName.CHA.value
ROLE_BACK_OFFICE = RoleName.BACK_OFFICE.value


class RolePermission(BasePermission):
    """
    Base permission class for role-based access control.

    Key behavior:
    - Requires authentication (unauthenticated requests surface as 401).
    - ADMIN bypass.
    - Uses allowed_roles_per_action for strict RBAC.
    - If action is unknown and request is SAFE, fall back to list/retrieve.
    - Object level: roles in `privileged_roles` see every row, everyone else
      must pass the view's `is_owner(user, obj)` check.
    """
    message = "You do not have permission to perform this action."

    # Override in subclasses: dict of action -> set of allowed roles
    allowed_roles_per_action: dict[str, set[str]] = {
        "list": {ROLE_ADMIN},
        "retrieve": {ROLE_ADMIN},
        "create": {ROLE_ADMIN},
        "update": {ROLE_ADMIN},
        "partial_update": {ROLE_ADMIN},
        "destroy": {ROLE_ADMIN},
    }

    privileged_roles: set[str] = {ROLE_ADMIN}

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        role = user_role(user)

        # ADMIN can do everything
        if role == ROLE_ADMIN:
            return True

        action = self._infer_action(request, view)
        allowed = self.allowed_roles_per_action.get(action)

        if allowed is None and request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            is_detail = "pk" in kwargs or "id" in kwargs
            allowed = self.allowed_roles_per_action.get("retrieve" if is_detail else "list")

        if allowed is not None:
            return role_allowed(role, allowed)

        # Unknown action => deny
        return False

    def has_object_permission(self, request, view, obj) -> bool:
        if not self.has_permission(request, view):
            return False

        if role_allowed(user_role(request.user), self.privileged_roles):
            return True

        is_owner = getattr(view, "is_owner", None)
        if is_owner is None:
            return False
        return bool(is_owner(request.user, obj))


# Specific permission classes for each module

class AdminOnlyPermission(RolePermission):
    """Role + user management, audit log"""
    allowed_roles_per_action = {}


class LeadPermission(RolePermission):
    """Sales leads: back office pipeline"""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "retrieve": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "create": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "update": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "partial_update": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "destroy": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "set_status": {ROLE_ADMIN, ROLE_BACK_OFFICE},
    }
    privileged_roles = {ROLE_ADMIN, ROLE_BACK_OFFICE}


class QuotationPermission(RolePermission):
    """Quotations: staff manage, customers read + respond to their own"""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN, ROLE_BACK_OFFICE, ROLE_CUSTOMER},
        "retrieve": {ROLE_ADMIN, ROLE_BACK_OFFICE, ROLE_CUSTOMER},
        "create": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "update": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "partial_update": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "destroy": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "set_status": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        # Customer response actions (ownership enforced per object)
        "approve": {ROLE_CUSTOMER},
        "reject": {ROLE_CUSTOMER},
        "request_changes": {ROLE_CUSTOMER},
    }
    privileged_roles = {ROLE_ADMIN, ROLE_BACK_OFFICE}


class OrderPermission(RolePermission):
    """Orders: staff manage, customers/suppliers read their own"""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN, ROLE_BACK_OFFICE, ROLE_CUSTOMER, ROLE_SUPPLIER},
        "retrieve": {ROLE_ADMIN, ROLE_BACK_OFFICE, ROLE_CUSTOMER, ROLE_SUPPLIER},
        "timeline": {ROLE_ADMIN, ROLE_BACK_OFFICE, ROLE_CUSTOMER, ROLE_SUPPLIER},
        "create": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "update": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "partial_update": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "destroy": {ROLE_ADMIN, ROLE_BACK_OFFICE},
        "set_status": {ROLE_ADMIN, ROLE_BACK_OFFICE},
    }
    privileged_roles = {ROLE_ADMIN, ROLE_BACK_OFFICE}


class ShipmentPermission(RolePermission):
    """Shipments: CHA operates, customers read + upload documents on their own"""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN, ROLE_CHA, ROLE_CUSTOMER},
        "retrieve": {ROLE_ADMIN, ROLE_CHA, ROLE_CUSTOMER},
        "timeline": {ROLE_ADMIN, ROLE_CHA, ROLE_CUSTOMER},
        "create": {ROLE_ADMIN, ROLE_CHA},
        "update": {ROLE_ADMIN, ROLE_CHA},
        "partial_update": {ROLE_ADMIN, ROLE_CHA},
        "destroy": {ROLE_ADMIN, ROLE_CHA},
        "set_status": {ROLE_ADMIN, ROLE_CHA},
        "upload_documents": {ROLE_ADMIN, ROLE_CHA, ROLE_CUSTOMER},
        "delete_document": {ROLE_ADMIN, ROLE_CHA},
    }
    privileged_roles = {ROLE_ADMIN, ROLE_CHA}


class ClearancePermission(RolePermission):
    """Customs clearances: CHA operates, customers read their own"""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN, ROLE_CHA, ROLE_CUSTOMER},
        "retrieve": {ROLE_ADMIN, ROLE_CHA, ROLE_CUSTOMER},
        "timeline": {ROLE_ADMIN, ROLE_CHA, ROLE_CUSTOMER},
        "create": {ROLE_ADMIN, ROLE_CHA},
        "update": {ROLE_ADMIN, ROLE_CHA},
        "partial_update": {ROLE_ADMIN, ROLE_CHA},
        "destroy": {ROLE_ADMIN, ROLE_CHA},
        "set_status": {ROLE_ADMIN, ROLE_CHA},
        "upload_document": {ROLE_ADMIN, ROLE_CHA},
        "delete_document": {ROLE_ADMIN, ROLE_CHA},
    }
    privileged_roles = {ROLE_ADMIN, ROLE_CHA}
