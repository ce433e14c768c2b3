# freight_core/conftest.py
import itertools
from datetime import date
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from freight_core.common.roles import RoleName

_seq = itertools.count(1)


@pytest.fixture
def roles(db):
    from freight_core.iam.services import ensure_default_roles

    return ensure_default_roles()


@pytest.fixture
def make_user(roles):
    """
    make_user("customer", name="Acme Buyer", company_name="Acme Ltd")
    """
    from freight_core.iam.models import CompanyDetail, User

    def _make(role: str = RoleName.CUSTOMER, *, name=None, email=None, password="Pass@12345", company_name=None, **extra):
        n = next(_seq)
        user = User.objects.create_user(
            email=email or f"user{n}@example.com",
            password=password,
            name=name or f"User {n}",
            role=roles[role],
            **extra,
        )
        if company_name:
            CompanyDetail.objects.create(user=user, company_name=company_name)
        return user

    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(RoleName.ADMIN, name="Ada Admin", email="admin@example.com")


@pytest.fixture
def customer(make_user):
    return make_user(RoleName.CUSTOMER, name="Carla Customer", email="carla@example.com", company_name="Acme Imports")


@pytest.fixture
def other_customer(make_user):
    return make_user(RoleName.CUSTOMER, name="Otto Other", email="otto@example.com")


@pytest.fixture
def supplier(make_user):
    return make_user(RoleName.SUPPLIER, name="Sam Supplier", email="sam@example.com")


@pytest.fixture
def cha_user(make_user):
    return make_user(RoleName.CHA, name="Chris Agent", email="chris@example.com")


@pytest.fixture
def back_office(make_user):
    return make_user(RoleName.BACK_OFFICE, name="Bo Office", email="bo@example.com")


def _client_for(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def client_for():
    return _client_for


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def customer_client(customer):
    return _client_for(customer)


@pytest.fixture
def supplier_client(supplier):
    return _client_for(supplier)


@pytest.fixture
def cha_client(cha_user):
    return _client_for(cha_user)


@pytest.fixture
def back_office_client(back_office):
    return _client_for(back_office)


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def quotation(customer, admin_user):
    from freight_core.quotations.services import QuotationService

    return QuotationService.create(
        data={
            "user": customer,
            "date": date(2026, 3, 1),
            "valid_until": date(2026, 3, 31),
            "status": "Sent",
            "items": [
                {"description": "Ocean freight 20ft", "quantity": 2, "unit_price": Decimal("100.00")},
                {"description": "Documentation", "quantity": 1, "unit_price": Decimal("50.00")},
            ],
        },
        actor=admin_user,
    )


@pytest.fixture
def order(customer, supplier, admin_user):
    from freight_core.orders.services import OrderService

    return OrderService.create(
        data={"customer": customer, "supplier": supplier, "origin_country": "China", "destination_port": "Nhava Sheva"},
        actor=admin_user,
    )


@pytest.fixture
def shipment(order, cha_user):
    from freight_core.shipments.services import ShipmentService

    return ShipmentService.create(
        data={"order": order, "carrier_name": "Maersk", "tracking_no": "MSKU1234567", "origin": "Shanghai"},
        actor=cha_user,
    )


@pytest.fixture
def clearance(shipment, cha_user):
    from freight_core.clearances.services import ClearanceService

    return ClearanceService.create(
        data={"shipment": shipment, "cha": cha_user, "arrival_port": "Nhava Sheva"},
        actor=cha_user,
    )
