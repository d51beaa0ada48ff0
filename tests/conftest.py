import hashlib
import hmac
import json
from decimal import Decimal
from itertools import count

import pytest
from django.conf import settings
from rest_framework.test import APIClient

from order import payments
from product.models import Category, Product
from user.models import User

_seq = count(1)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(email="shopper@example.com", name="Shopper", password="s3cret-pass")


@pytest.fixture
def other_user(db):
    return User.objects.create_user(email="other@example.com", name="Other", password="s3cret-pass")


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(email="ops@example.com", name="Ops", password="s3cret-pass", is_staff=True)


@pytest.fixture
def auth_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture
def category(db):
    return Category.objects.create(name="Apparel")


@pytest.fixture
def make_product(category):
    def _make(name="T-Shirt", price="25.00", inventory=10, **kwargs):
        n = next(_seq)
        kwargs.setdefault("sku", f"SKU-{n}")
        kwargs.setdefault("category", category)
        return Product.objects.create(
            name=name, price=Decimal(price), inventory=inventory, **kwargs
        )
    return _make


@pytest.fixture
def processor(monkeypatch):
    """
    Stand-in for the Razorpay orders API. Records every create call and hands
    out sequential order ids.
    """
    calls = []

    def create(data):
        calls.append(data)
        return {"id": f"order_test{len(calls)}", "amount": data["amount"], "currency": data["currency"]}

    monkeypatch.setattr(payments.razorpay_client.order, "create", create)
    return calls


def sign(body):
    return hmac.new(
        settings.RAZORPAY_WEBHOOK_SECRET.encode(), body.encode(), hashlib.sha256
    ).hexdigest()


@pytest.fixture
def send_webhook(api_client):
    def _send(event_type, reference, signature=None):
        body = json.dumps({
            "event": event_type,
            "payload": {"payment": {"entity": {"id": "pay_test", "order_id": reference}}},
        })
        return api_client.post(
            "/api/v1/order/webhooks/payment/",
            data=body,
            content_type="application/json",
            HTTP_X_RAZORPAY_SIGNATURE=signature if signature is not None else sign(body),
        )
    return _send
