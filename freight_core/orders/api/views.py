# freight_core/orders/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound

from freight_core.audit.services import RequestOrigin
from freight_core.common.api.pagination import paginate
from freight_core.common.api.responses import success
from freight_core.common.api.serializers import StatusUpdateSerializer
from freight_core.common.permissions import OrderPermission
from freight_core.common.workflow import read_timeline
from freight_core.orders.api.serializers import OrderSerializer, OrderTimelineSerializer, OrderWriteSerializer
from freight_core.orders.models import Order
from freight_core.orders.selectors import list_orders, orders_qs
from freight_core.orders.services import OrderService


class OrderViewSet(viewsets.GenericViewSet):
    """
    Orders:
    - back office + admin manage
    - customers read their own, suppliers the ones they supply
    - status changes append to the order's timeline
    """
    permission_classes = [OrderPermission]
    serializer_class = OrderSerializer
    queryset = Order.objects.none()

    def is_owner(self, user, obj: Order) -> bool:
        return user.pk in (obj.customer_id, obj.supplier_id)

    def _get_object(self, request, pk) -> Order:
        order = orders_qs().filter(pk=pk).first() if str(pk).isdigit() else None
        if order is None:
            raise NotFound("Order not found.")
        self.check_object_permissions(request, order)
        return order

    @extend_schema(
        tags=["Orders"],
        responses={200: OrderSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="Order no, customer or supplier name / email / company contains."),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False,
                             description="draft | confirmed | in_transit | arrived | clearance | delivered | cancelled | all"),
            OpenApiParameter(name="per_page", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = list_orders(actor=request.user, params=request.query_params)
        return paginate(request, qs, OrderSerializer)

    @extend_schema(tags=["Orders"], responses={200: OrderSerializer})
    def retrieve(self, request, pk=None):
        return success(OrderSerializer(self._get_object(request, pk)).data)

    @extend_schema(tags=["Orders"], request=OrderWriteSerializer, responses={201: OrderSerializer})
    def create(self, request):
        ser = OrderWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        order = OrderService.create(
            data=ser.validated_data,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(OrderSerializer(order).data, message="Order created successfully.", status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Orders"], request=OrderWriteSerializer, responses={200: OrderSerializer})
    def update(self, request, pk=None):
        order = self._get_object(request, pk)

        ser = OrderWriteSerializer(order, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        order = OrderService.update(
            order=order,
            data=ser.validated_data,
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(OrderSerializer(order).data, message="Order updated successfully.")

    @extend_schema(tags=["Orders"], request=OrderWriteSerializer, responses={200: OrderSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Orders"], responses={200: None})
    def destroy(self, request, pk=None):
        order = self._get_object(request, pk)
        OrderService.delete(order=order, actor=request.user, origin=RequestOrigin.from_request(request))
        return success(message="Order deleted successfully.")

    @extend_schema(tags=["Orders"], request=StatusUpdateSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["patch", "put"], url_path="status")
    def set_status(self, request, pk=None):
        order = self._get_object(request, pk)

        ser = StatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        order = OrderService.set_status(
            order=order,
            status=ser.validated_data["status"],
            note=ser.validated_data.get("note"),
            actor=request.user,
            origin=RequestOrigin.from_request(request),
        )
        return success(OrderSerializer(order).data, message="Order status updated successfully.")

    @extend_schema(tags=["Orders"], responses={200: OrderTimelineSerializer})
    @action(detail=True, methods=["get"], url_path="timeline")
    def timeline(self, request, pk=None):
        order = self._get_object(request, pk)
        payload = {
            "order_id": order.pk,
            "order_no": order.order_no,
            "status": order.status,
            "timeline": read_timeline(order),
        }
        return success(OrderTimelineSerializer(payload).data)
