from django.urls import path
from .views import (
    user_orders,
    checkout,
    payment_webhook,
    notifications_view,
)

urlpatterns = [
    path("my-orders/", user_orders, name="user-orders"),
    path("checkout/", checkout, name="checkout"),
    path("webhooks/payment/", payment_webhook, name="payment-webhook"),
    path("notifications/", notifications_view, name="notifications"),
]
