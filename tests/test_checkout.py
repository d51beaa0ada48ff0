from decimal import Decimal

import pytest
import razorpay

from cart import services as cart_services
from order import payments
from order.models import Order, OrderItem, Payment
from order.services import create_order
from storefront.exceptions import EmptyCart, InsufficientInventory, PaymentAuthFailed

pytestmark = pytest.mark.django_db

ADDRESS = {"line1": "1 Market St", "city": "Springfield", "postal_code": "12345"}


def test_checkout_creates_pending_order_items_and_payment(user, make_product, processor):
    shirt = make_product(price="20.00", inventory=5)
    mug = make_product(name="Mug", price="10.00", inventory=5)
    cart_services.add_item(user, shirt.id, 2)
    cart_services.add_item(user, mug.id, 1)

    order, authorization = create_order(user, ADDRESS, ADDRESS)

    assert order.status == Order.Status.PENDING
    assert order.subtotal == Decimal("50.00")
    assert order.tax == Decimal("4.00")
    assert order.shipping == Decimal("10.00")
    assert order.total == Decimal("64.00")
    assert sorted((i.product_id, i.quantity, i.price) for i in order.items.all()) == sorted([
        (shirt.id, 2, Decimal("20.00")),
        (mug.id, 1, Decimal("10.00")),
    ])

    payment = Payment.objects.get(order=order)
    assert payment.status == Payment.Status.PENDING
    assert payment.provider_reference == authorization.reference == "order_test1"
    assert authorization.client_secret == "order_test1"

    [request] = processor
    assert request["amount"] == 6400
    assert request["notes"] == {"user_id": str(user.id), "cart_id": str(user.cart.id)}


def test_checkout_leaves_cart_and_inventory_alone(user, make_product, processor):
    shirt = make_product(inventory=5)
    cart_services.add_item(user, shirt.id, 2)

    create_order(user, ADDRESS, ADDRESS)

    shirt.refresh_from_db()
    assert shirt.inventory == 5
    assert user.cart.items.count() == 1


def test_free_shipping_over_one_hundred(user, make_product, processor):
    cart_services.add_item(user, make_product(price="75.00").id, 2)

    order, _ = create_order(user, ADDRESS, ADDRESS)

    assert order.shipping == Decimal("0.00")
    assert order.total == Decimal("162.00")
    assert processor[0]["amount"] == 16200


def test_order_keeps_price_at_order_time(user, make_product, processor):
    shirt = make_product(price="20.00")
    cart_services.add_item(user, shirt.id, 1)
    order, _ = create_order(user, ADDRESS, ADDRESS)

    shirt.price = Decimal("99.00")
    shirt.save()

    order.refresh_from_db()
    assert order.items.get().price == Decimal("20.00")
    assert order.total == Decimal("31.60")


def test_empty_cart_creates_nothing(user, make_product, processor):
    with pytest.raises(EmptyCart):
        create_order(user, ADDRESS, ADDRESS)

    item = cart_services.add_item(user, make_product().id, 1).items.get()
    cart_services.remove_item(user, item.id)
    with pytest.raises(EmptyCart):
        create_order(user, ADDRESS, ADDRESS)

    assert not Order.objects.exists()
    assert not Payment.objects.exists()
    assert processor == []


def test_inventory_is_rechecked_at_checkout(user, make_product, processor):
    shirt = make_product(name="Linen Shirt", inventory=3)
    cart_services.add_item(user, shirt.id, 3)
    shirt.inventory = 2
    shirt.save()

    with pytest.raises(InsufficientInventory) as excinfo:
        create_order(user, ADDRESS, ADDRESS)

    assert "Linen Shirt" in str(excinfo.value.detail)
    assert not Order.objects.exists()
    assert processor == []


def test_rejected_authorization_rolls_back(user, make_product, monkeypatch):
    def reject(data):
        raise razorpay.errors.BadRequestError("amount exceeds maximum amount allowed")

    monkeypatch.setattr(payments.razorpay_client.order, "create", reject)
    cart_services.add_item(user, make_product().id, 1)

    with pytest.raises(PaymentAuthFailed):
        create_order(user, ADDRESS, ADDRESS)

    assert not Order.objects.exists()
    assert not OrderItem.objects.exists()
    assert not Payment.objects.exists()


def test_checkout_api(auth_client, user, make_product, processor):
    cart_services.add_item(user, make_product(price="50.00").id, 1)

    response = auth_client.post(
        "/api/v1/order/checkout/",
        {"shipping_address": ADDRESS, "billing_address": ADDRESS},
        format="json",
    )

    assert response.status_code == 201
    assert response.data["client_secret"] == "order_test1"
    assert response.data["order"]["status"] == "PENDING"
    assert response.data["order"]["total"] == "64.00"
    assert response.data["payment"]["amount"] == 6400
    assert len(response.data["order"]["items"]) == 1


def test_checkout_api_empty_cart(auth_client, processor):
    response = auth_client.post(
        "/api/v1/order/checkout/",
        {"shipping_address": ADDRESS, "billing_address": ADDRESS},
        format="json",
    )

    assert response.status_code == 400
    assert response.data == {"error": "empty_cart", "detail": "Cart is empty"}


def test_checkout_api_payment_rejected(auth_client, user, make_product, monkeypatch):
    def reject(data):
        raise razorpay.errors.BadRequestError("bad request")

    monkeypatch.setattr(payments.razorpay_client.order, "create", reject)
    cart_services.add_item(user, make_product().id, 1)

    response = auth_client.post(
        "/api/v1/order/checkout/",
        {"shipping_address": ADDRESS, "billing_address": ADDRESS},
        format="json",
    )

    assert response.status_code == 402
    assert response.data["error"] == "payment_auth_failed"


def test_checkout_api_requires_addresses(auth_client):
    response = auth_client.post("/api/v1/order/checkout/", {"shipping_address": ADDRESS}, format="json")

    assert response.status_code == 400
    assert response.data["error"] == "invalid_input"
    assert "billing_address" in response.data["details"]


def test_my_orders_lists_only_own_orders(auth_client, user, other_user, make_product, processor):
    cart_services.add_item(user, make_product().id, 1)
    cart_services.add_item(other_user, make_product().id, 1)
    mine, _ = create_order(user, ADDRESS, ADDRESS)
    theirs, _ = create_order(other_user, ADDRESS, ADDRESS)

    listing = auth_client.get("/api/v1/order/my-orders/")
    single = auth_client.get("/api/v1/order/my-orders/", {"order_id": theirs.id})

    assert [o["id"] for o in listing.data] == [mine.id]
    assert listing.data[0]["payment_status"] == "PENDING"
    assert single.status_code == 404
