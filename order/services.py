import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import F, Value
from django.db.models.functions import Greatest

from cart.models import Cart, CartItem
from product.models import Product
from storefront.exceptions import EmptyCart, InsufficientInventory
from . import payments
from .models import Order, OrderItem, Payment
from .pricing import compute_totals, to_minor_units

logger = logging.getLogger(__name__)


def create_order(user, shipping_address, billing_address):
    """
    Turn the user's cart into a PENDING order with a PENDING payment.

    Returns (order, authorization). The order, its items and the payment row
    are written in one transaction; a failed authorization or any later error
    leaves nothing behind. The cart itself is left alone until the processor
    confirms the payment.
    """
    with transaction.atomic():
        cart = Cart.objects.filter(user=user).first()
        items = list(cart.items.select_related("product").order_by("id")) if cart else []
        if not items:
            raise EmptyCart("Cart is empty")

        # lock the rows we are about to validate against
        products = Product.objects.select_for_update().in_bulk([i.product_id for i in items])

        subtotal = Decimal("0.00")
        for item in items:
            product = products[item.product_id]
            if product.inventory < item.quantity:
                raise InsufficientInventory(f"Insufficient inventory for {product.name}")
            subtotal += product.price * item.quantity

        totals = compute_totals(subtotal)

        authorization = payments.create_authorization(
            to_minor_units(totals.total),
            notes={"user_id": user.pk, "cart_id": cart.pk},
            receipt=f"cart_{cart.pk}",
        )

        order = Order.objects.create(
            user=user,
            status=Order.Status.PENDING,
            subtotal=totals.subtotal,
            tax=totals.tax,
            shipping=totals.shipping,
            total=totals.total,
            shipping_address=shipping_address,
            billing_address=billing_address,
        )
        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                product_id=item.product_id,
                quantity=item.quantity,
                price=products[item.product_id].price,
            )
            for item in items
        ])
        Payment.objects.create(
            order=order,
            user=user,
            provider_reference=authorization.reference,
            amount=totals.total,
            currency=authorization.currency,
        )

    logger.info("Order %s created for user %s, total %s", order.pk, user.pk, order.total)
    return order, authorization


def confirm_payment(reference):
    """
    PENDING -> COMPLETED. Moves the order to PROCESSING, takes the ordered
    quantities out of stock and empties the buyer's cart.

    Redeliveries find the payment already terminal and change nothing.
    """
    with transaction.atomic():
        payment = (
            Payment.objects.select_for_update()
            .select_related("order")
            .filter(provider_reference=reference)
            .first()
        )
        if payment is None:
            logger.warning("Success notification for unknown payment %s", reference)
            return None
        if payment.is_terminal:
            logger.info("Payment %s already %s, ignoring success notification", reference, payment.status)
            return payment

        payment.status = Payment.Status.COMPLETED
        payment.save(update_fields=["status", "updated_at"])

        order = payment.order
        order.status = Order.Status.PROCESSING
        order.save(update_fields=["status", "updated_at"])

        for item in order.items.all():
            # floor at zero
            Product.objects.filter(pk=item.product_id).update(
                inventory=Greatest(F("inventory") - item.quantity, Value(0))
            )

        CartItem.objects.filter(cart__user_id=order.user_id).delete()

    logger.info("Payment %s completed, order %s processing", reference, order.pk)
    return payment


def fail_payment(reference):
    """PENDING -> FAILED. The order and inventory are not touched."""
    with transaction.atomic():
        payment = Payment.objects.select_for_update().filter(provider_reference=reference).first()
        if payment is None:
            logger.warning("Failure notification for unknown payment %s", reference)
            return None
        if payment.is_terminal:
            logger.info("Payment %s already %s, ignoring failure notification", reference, payment.status)
            return payment

        payment.status = Payment.Status.FAILED
        payment.save(update_fields=["status", "updated_at"])

    logger.info("Payment %s failed", reference)
    return payment


SUCCESS_EVENTS = {"payment.captured", "order.paid"}
FAILURE_EVENTS = {"payment.failed"}


def payment_reference(event):
    payload = event.get("payload") or {}
    payment_entity = (payload.get("payment") or {}).get("entity") or {}
    if payment_entity.get("order_id"):
        return payment_entity["order_id"]
    order_entity = (payload.get("order") or {}).get("entity") or {}
    return order_entity.get("id")


def handle_payment_event(event):
    """
    Dispatch one verified processor notification. Unknown event types are
    acknowledged and ignored.
    """
    event_type = event.get("event")
    if event_type not in SUCCESS_EVENTS and event_type not in FAILURE_EVENTS:
        logger.info("Unhandled payment event type: %s", event_type)
        return None

    reference = payment_reference(event)
    if not reference:
        logger.warning("Payment event %s carries no order reference", event_type)
        return None

    if event_type in SUCCESS_EVENTS:
        return confirm_payment(reference)
    return fail_payment(reference)
