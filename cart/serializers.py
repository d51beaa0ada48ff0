from decimal import Decimal

from rest_framework import serializers
from product.serializers import ProductMiniSerializer
from .models import CartItem
from .services import cart_totals


class AddToCartSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)


class UpdateCartItemSerializer(serializers.Serializer):
    # 0 removes the item
    quantity = serializers.IntegerField(min_value=0)


class CartItemSerializer(serializers.ModelSerializer):
    product = ProductMiniSerializer(read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = ("id", "product", "quantity", "line_total", "added_at")


def serialize_cart(cart):
    total, item_count = cart_totals(cart)
    items = cart.items.all() if cart is not None else []
    return {
        "id": cart.id if cart is not None else None,
        "items": CartItemSerializer(items, many=True).data,
        "total": str(total.quantize(Decimal("0.01"))),
        "item_count": item_count,
    }
