from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status, permissions

from . import services
from .serializers import AddToCartSerializer, UpdateCartItemSerializer, serialize_cart


class CartListCreateAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, format=None):
        cart = services.get_cart(request.user)
        return Response(serialize_cart(cart), status=status.HTTP_200_OK)

    def post(self, request, format=None):
        """
        Expected payload:
        {
            "product_id": <id>,
            "quantity": <int >= 1>
        }
        """
        serializer = AddToCartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = services.add_item(
            request.user,
            serializer.validated_data["product_id"],
            serializer.validated_data["quantity"],
        )
        return Response(serialize_cart(cart), status=status.HTTP_200_OK)


class CartItemDetailAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def patch(self, request, pk, format=None):
        """Set the quantity of one line item; 0 removes it."""
        serializer = UpdateCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = services.set_item_quantity(request.user, pk, serializer.validated_data["quantity"])
        return Response(serialize_cart(cart), status=status.HTTP_200_OK)

    put = patch

    def delete(self, request, pk, format=None):
        cart = services.remove_item(request.user, pk)
        return Response(serialize_cart(cart), status=status.HTTP_200_OK)
