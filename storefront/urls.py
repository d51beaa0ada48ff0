"""
URL configuration for the storefront project.

Every API lives under /api/v1/; the OpenAPI schema and its viewers are served
next to it.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/user/", include("user.urls")),
    path("api/v1/", include("product.urls")),
    path("api/v1/cart/", include("cart.urls")),
    path("api/v1/order/", include("order.urls")),
    path("api/v1/admin/", include("admin_orders.urls")),
    path("api/v1/schema/", SpectacularAPIView.as_view(), name="schema"),  # OpenAPI JSON/YAML
    path("api/v1/schema/swagger-ui/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/v1/schema/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]
