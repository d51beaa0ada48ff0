# order/serializers.py
from rest_framework import serializers
from product.serializers import ProductMiniSerializer
from .models import Order, OrderItem, Payment, Notification


class OrderItemSerializer(serializers.ModelSerializer):
    product = ProductMiniSerializer(read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product", "quantity", "price"]


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = ["id", "provider_reference", "amount", "currency", "status", "created_at"]
        read_only_fields = fields


class BaseOrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "status",
            "subtotal",
            "tax",
            "shipping",
            "total",
            "shipping_address",
            "billing_address",
            "notes",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields  # all are read-only for output only


class CheckoutOrderSerializer(BaseOrderSerializer):
    pass


class UserOrderSerializer(BaseOrderSerializer):
    payment_status = serializers.CharField(source="payment.status", read_only=True, default=None)

    class Meta(BaseOrderSerializer.Meta):
        fields = BaseOrderSerializer.Meta.fields + ["payment_status"]
        read_only_fields = fields


class CheckoutSerializer(serializers.Serializer):
    shipping_address = serializers.DictField(allow_empty=False)
    billing_address = serializers.DictField(allow_empty=False)


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ["id", "order", "message", "read", "created_at"]
        read_only_fields = fields


class NotificationReadSerializer(serializers.Serializer):
    # omit id to mark every notification read
    id = serializers.IntegerField(required=False, min_value=1)
