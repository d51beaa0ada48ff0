# order/views.py
import json
import logging

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from storefront.exceptions import InvalidInput, NotFound, SignatureInvalid
from . import payments, services
from .models import Order, Notification
from .serializers import (
    CheckoutSerializer,
    CheckoutOrderSerializer,
    UserOrderSerializer,
    NotificationSerializer,
    NotificationReadSerializer,
)

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "HTTP_X_RAZORPAY_SIGNATURE"


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def user_orders(request):
    """
    GET /api/v1/order/my-orders/           -> list all user's orders
    GET /api/v1/order/my-orders/?order_id= -> single order
    """
    qs = (
        Order.objects.filter(user=request.user)
        .select_related("payment")
        .prefetch_related("items__product")
    )
    order_id = request.query_params.get("order_id")
    if order_id:
        order = qs.filter(id=order_id).first() if order_id.isdigit() else None
        if order is None:
            raise NotFound("Order not found")
        return Response(UserOrderSerializer(order).data)

    return Response(UserOrderSerializer(qs.order_by("-created_at"), many=True).data)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def checkout(request):
    """
    POST /api/v1/order/checkout/
    Body: { "shipping_address": {...}, "billing_address": {...} }
    Returns the pending order and what the client needs to open the payment.
    """
    serializer = CheckoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    order, authorization = services.create_order(
        request.user,
        serializer.validated_data["shipping_address"],
        serializer.validated_data["billing_address"],
    )
    order = Order.objects.prefetch_related("items__product").get(pk=order.pk)

    return Response({
        "order": CheckoutOrderSerializer(order).data,
        "client_secret": authorization.client_secret,
        "payment": {
            "reference": authorization.reference,
            "amount": authorization.amount,
            "currency": authorization.currency,
            "key_id": authorization.key_id,
        },
    }, status=status.HTTP_201_CREATED)


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def payment_webhook(request):
    """
    Razorpay webhook endpoint. The signature covers the raw body, so it is
    checked before the payload is parsed.
    """
    try:
        body = request.body.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("Webhook body is not valid UTF-8")
        raise SignatureInvalid("Invalid signature")
    payments.verify_webhook(body, request.META.get(SIGNATURE_HEADER))

    try:
        event = json.loads(body)
    except ValueError:
        raise InvalidInput("Webhook body is not valid JSON")
    if not isinstance(event, dict):
        raise InvalidInput("Webhook body must be a JSON object")

    services.handle_payment_event(event)
    return Response({"received": True}, status=status.HTTP_200_OK)


# Simple notifications list + mark-as-read
@api_view(["GET", "PATCH"])
@permission_classes([IsAuthenticated])
def notifications_view(request):
    if request.method == "GET":
        notes = Notification.objects.filter(user=request.user).order_by("-created_at")
        return Response(NotificationSerializer(notes, many=True).data)

    # PATCH: mark all as read (or accept {"id": <id>} to mark single)
    serializer = NotificationReadSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    note_id = serializer.validated_data.get("id")
    qs = Notification.objects.filter(user=request.user)
    if note_id is not None:
        qs = qs.filter(id=note_id)
    updated = qs.update(read=True)
    return Response({"message": "notifications updated", "updated": updated}, status=status.HTTP_200_OK)
