import logging

from django.db.models import Count, ProtectedError
from rest_framework import viewsets, permissions
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.pagination import PageNumberPagination
from django_filters.rest_framework import DjangoFilterBackend

from storefront.exceptions import InvalidInput
from .filters import ProductFilter
from .models import Product, Category
from .serializers import ProductSerializer, CategorySerializer, CategoryDetailSerializer

logger = logging.getLogger(__name__)


class CatalogPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100


class ReadOnlyOrAdmin(permissions.BasePermission):
    """Anyone may read the catalog; only operators may change it."""

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_staff)


class CategoryViewSet(viewsets.ModelViewSet):
    permission_classes = [ReadOnlyOrAdmin]
    queryset = Category.objects.annotate(product_count=Count("products")).order_by("name")

    def get_serializer_class(self):
        if self.action == "retrieve":
            return CategoryDetailSerializer
        return CategorySerializer

    def perform_destroy(self, instance):
        if instance.products.exists():
            raise InvalidInput("Cannot delete category with existing products")
        logger.info("Category %s deleted", instance.pk)
        instance.delete()


class ProductViewSet(viewsets.ModelViewSet):
    permission_classes = [ReadOnlyOrAdmin]
    serializer_class = ProductSerializer
    pagination_class = CatalogPagination
    filter_backends = [DjangoFilterBackend, OrderingFilter, SearchFilter]
    filterset_class = ProductFilter
    ordering_fields = ["created_at", "price", "name"]
    search_fields = ["name", "description"]

    def get_queryset(self):
        qs = Product.objects.all().select_related("category").order_by("-created_at")
        if not self.request.user.is_staff:
            qs = qs.filter(published=True)
        return qs

    def perform_destroy(self, instance):
        pk = instance.pk
        try:
            instance.delete()
        except ProtectedError:
            raise InvalidInput("Cannot delete a product that appears on orders")
        logger.info("Product %s deleted", pk)
