import pytest
from django.db import transaction

from cart import services as cart_services
from order import signals
from order.models import Notification, Order
from order.services import create_order

pytestmark = pytest.mark.django_db

ADDRESS = {"line1": "1 Market St"}


@pytest.fixture
def order(user, make_product, processor):
    cart_services.add_item(user, make_product().id, 1)
    order, _ = create_order(user, ADDRESS, ADDRESS)
    return order


@pytest.fixture
def pushed(monkeypatch):
    """Channel layer stand-in that records group sends."""
    sent = []

    class RecordingLayer:
        async def group_send(self, group, message):
            sent.append((group, message))

    monkeypatch.setattr(signals, "get_channel_layer", lambda: RecordingLayer())
    return sent


def test_list_and_mark_notifications_read(auth_client, user, other_user):
    first = Notification.objects.create(user=user, message="one")
    Notification.objects.create(user=user, message="two")
    Notification.objects.create(user=other_user, message="not yours")

    listing = auth_client.get("/api/v1/order/notifications/")
    assert sorted(n["message"] for n in listing.data) == ["one", "two"]

    auth_client.patch("/api/v1/order/notifications/", {"id": first.id}, format="json")
    assert list(Notification.objects.filter(user=user, read=True)) == [first]

    auth_client.patch("/api/v1/order/notifications/", {}, format="json")
    assert not Notification.objects.filter(user=user, read=False).exists()
    assert Notification.objects.filter(user=other_user, read=False).exists()


def test_mark_read_rejects_non_numeric_id(auth_client, user):
    Notification.objects.create(user=user, message="one")

    response = auth_client.patch("/api/v1/order/notifications/", {"id": "abc"}, format="json")

    assert response.status_code == 400
    assert response.data["error"] == "invalid_input"
    assert not Notification.objects.filter(read=True).exists()


def test_status_push_waits_for_commit(order, user, pushed, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=False) as callbacks:
        order.status = Order.Status.SHIPPED
        order.save()

    assert pushed == []
    assert Notification.objects.filter(user=user, order=order).count() == 1

    for callback in callbacks:
        callback()

    assert len(pushed) == 1
    group, message = pushed[0]
    assert group == f"user_{user.id}"
    assert message["type"] == "send_notification"
    assert message["data"]["status"] == "SHIPPED"


def test_rolled_back_status_change_is_not_pushed(order, user, pushed, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        with pytest.raises(RuntimeError):
            with transaction.atomic():
                order.status = Order.Status.SHIPPED
                order.save()
                raise RuntimeError("boom")

    assert pushed == []
    assert not Notification.objects.filter(order=order).exists()
    order.refresh_from_db()
    assert order.status == Order.Status.PENDING
