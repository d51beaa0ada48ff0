"""
Cart mutations.

Every check-then-write runs inside one transaction with the product row
locked, so two requests for the same product cannot both pass the inventory
check against the same stock.
"""
import logging
from decimal import Decimal

from django.db import transaction

from product.models import Product
from storefront.exceptions import NotFound, InsufficientInventory
from .models import Cart, CartItem

logger = logging.getLogger(__name__)


def get_cart(user):
    """Return the user's cart with items and products loaded, or None."""
    return (
        Cart.objects.filter(user=user)
        .prefetch_related("items__product")
        .first()
    )


def cart_totals(cart):
    """Recompute (total, item_count) from the current line items."""
    if cart is None:
        return Decimal("0.00"), 0
    total = Decimal("0.00")
    item_count = 0
    for item in cart.items.all():
        total += item.product.price * item.quantity
        item_count += item.quantity
    return total, item_count


def _get_own_item(user, item_id):
    try:
        return CartItem.objects.select_related("product").get(pk=item_id, cart__user=user)
    except CartItem.DoesNotExist:
        raise NotFound("Cart item not found")


@transaction.atomic
def add_item(user, product_id, quantity):
    try:
        product = Product.objects.select_for_update().get(pk=product_id, published=True)
    except Product.DoesNotExist:
        raise NotFound("Product not found")

    cart, _ = Cart.objects.get_or_create(user=user)
    item = CartItem.objects.filter(cart=cart, product=product).first()
    existing = item.quantity if item else 0

    if product.inventory < existing + quantity:
        raise InsufficientInventory(f"Insufficient inventory for {product.name}")

    if item:
        item.quantity = existing + quantity
        item.save(update_fields=["quantity"])
    else:
        CartItem.objects.create(cart=cart, product=product, quantity=quantity)

    logger.debug("user=%s added product=%s qty=%s", user.pk, product.pk, quantity)
    return get_cart(user)


@transaction.atomic
def set_item_quantity(user, item_id, quantity):
    item = _get_own_item(user, item_id)

    if quantity == 0:
        item.delete()
        return get_cart(user)

    product = Product.objects.select_for_update().get(pk=item.product_id)
    if product.inventory < quantity:
        raise InsufficientInventory(f"Insufficient inventory for {product.name}")

    item.quantity = quantity
    item.save(update_fields=["quantity"])
    return get_cart(user)


@transaction.atomic
def remove_item(user, item_id):
    item = _get_own_item(user, item_id)
    item.delete()
    return get_cart(user)
