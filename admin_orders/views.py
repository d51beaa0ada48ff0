import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.pagination import PageNumberPagination

from order.models import Order
from storefront.exceptions import InvalidInput, NotFound
from .serializers import AdminOrderSerializer, AdminOrderDetailSerializer, OrderStatusSerializer

logger = logging.getLogger(__name__)


class AdminOrderPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100


class AdminOrderList(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        """
        GET /api/v1/admin/orders/?page=1&limit=10&status=pending
        """
        qs = (
            Order.objects.select_related("user")
            .prefetch_related("items__product")
            .order_by("-created_at")
        )

        status_param = request.query_params.get("status")
        if status_param and status_param.lower() != "all":
            wanted = status_param.upper()
            if wanted not in Order.Status.values:
                raise InvalidInput(f"Unknown order status '{status_param}'")
            qs = qs.filter(status=wanted)

        paginator = AdminOrderPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        serializer = AdminOrderSerializer(page, many=True, context={"request": request})
        return paginator.get_paginated_response(serializer.data)


def get_order_or_404(pk):
    order = (
        Order.objects.select_related("user", "payment")
        .prefetch_related("items__product")
        .filter(pk=pk)
        .first()
    )
    if order is None:
        raise NotFound("Order not found")
    return order


class AdminOrderDetail(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request, pk):
        order = get_order_or_404(pk)
        return Response(AdminOrderDetailSerializer(order, context={"request": request}).data)


class AdminOrderStatus(APIView):
    permission_classes = [IsAdminUser]

    def patch(self, request, pk):
        """
        Set the order status by hand.
        Body: { "status": "SHIPPED", "notes": "tracking 1Z..." }

        Operators may move an order from any status to any other.
        """
        order = get_order_or_404(pk)

        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        old_status = order.status
        order.status = serializer.validated_data["status"]
        update_fields = ["status", "updated_at"]
        if "notes" in serializer.validated_data:
            order.notes = serializer.validated_data["notes"]
            update_fields.append("notes")
        order.save(update_fields=update_fields)

        logger.info(
            "Order %s status %s -> %s by operator %s", order.pk, old_status, order.status, request.user.pk
        )
        return Response(AdminOrderDetailSerializer(order, context={"request": request}).data, status=status.HTTP_200_OK)

    put = patch
