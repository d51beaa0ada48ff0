import pytest

from cart import services as cart_services
from order.models import Notification, Order
from order.services import create_order

pytestmark = pytest.mark.django_db

ADDRESS = {"line1": "1 Market St"}


@pytest.fixture
def order(user, make_product, processor):
    cart_services.add_item(user, make_product().id, 1)
    order, _ = create_order(user, ADDRESS, ADDRESS)
    return order


def test_status_can_move_between_any_statuses(staff_client, order):
    url = f"/api/v1/admin/orders/{order.id}/status/"

    delivered = staff_client.patch(url, {"status": "DELIVERED", "notes": "left at door"}, format="json")
    back = staff_client.put(url, {"status": "PENDING"}, format="json")

    assert delivered.status_code == 200
    assert delivered.data["notes"] == "left at door"
    assert back.status_code == 200
    order.refresh_from_db()
    assert order.status == Order.Status.PENDING
    assert order.notes == "left at door"


def test_unknown_status_is_invalid_input(staff_client, order):
    response = staff_client.patch(f"/api/v1/admin/orders/{order.id}/status/", {"status": "LOST"}, format="json")

    assert response.status_code == 400
    assert response.data["error"] == "invalid_input"


def test_status_of_missing_order_is_not_found(staff_client):
    response = staff_client.patch("/api/v1/admin/orders/424242/status/", {"status": "SHIPPED"}, format="json")

    assert response.status_code == 404
    assert response.data["error"] == "not_found"


def test_shoppers_cannot_use_admin_endpoints(auth_client, order):
    response = auth_client.patch(f"/api/v1/admin/orders/{order.id}/status/", {"status": "SHIPPED"}, format="json")

    assert response.status_code == 403
    order.refresh_from_db()
    assert order.status == Order.Status.PENDING


def test_list_filters_by_status_and_paginates(staff_client, order, other_user, make_product, processor):
    cart_services.add_item(other_user, make_product().id, 1)
    shipped, _ = create_order(other_user, ADDRESS, ADDRESS)
    shipped.status = Order.Status.SHIPPED
    shipped.save()

    everything = staff_client.get("/api/v1/admin/orders/", {"status": "all", "limit": 1})
    only_shipped = staff_client.get("/api/v1/admin/orders/", {"status": "shipped"})

    assert everything.data["count"] == 2
    assert len(everything.data["results"]) == 1
    assert [o["id"] for o in only_shipped.data["results"]] == [shipped.id]


def test_detail_includes_payment(staff_client, order):
    response = staff_client.get(f"/api/v1/admin/orders/{order.id}/")

    assert response.status_code == 200
    assert response.data["payment"]["status"] == "PENDING"
    assert response.data["user"]["email"] == "shopper@example.com"


def test_status_change_notifies_the_customer(staff_client, order, user):
    staff_client.patch(f"/api/v1/admin/orders/{order.id}/status/", {"status": "SHIPPED"}, format="json")
    # same status again is not a change
    staff_client.patch(f"/api/v1/admin/orders/{order.id}/status/", {"status": "SHIPPED"}, format="json")

    notes = Notification.objects.filter(user=user)
    assert notes.count() == 1
    assert notes.get().message == f"Your order #{order.id} is now Shipped"
