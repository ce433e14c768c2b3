# freight_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from freight_core.audit.api.views import AuditLogViewSet
from freight_core.clearances.api.views import ClearanceViewSet
from freight_core.iam.api.auth import LoginView, LogoutView, RefreshView
from freight_core.iam.api.me import MeView
from freight_core.iam.api.roles import RoleViewSet
from freight_core.iam.api.users import UserViewSet
from freight_core.leads.api.views import LeadViewSet
from freight_core.orders.api.views import OrderViewSet
from freight_core.quotations.api.views import QuotationViewSet
from freight_core.shipments.api.views import ShipmentViewSet

router = DefaultRouter()

# Administration
router.register(r"roles", RoleViewSet, basename="roles")
router.register(r"users", UserViewSet, basename="users")
router.register(r"audit-logs", AuditLogViewSet, basename="audit-logs")

# Sales
router.register(r"leads", LeadViewSet, basename="leads")
router.register(r"quotations", QuotationViewSet, basename="quotations")

# Operations
router.register(r"orders", OrderViewSet, basename="orders")
router.register(r"shipments", ShipmentViewSet, basename="shipments")
router.register(r"clearances", ClearanceViewSet, basename="clearances")

urlpatterns = [
    # Auth + /me
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
