# product/admin.py
from django.contrib import admin
from .models import Product, Category


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "slug")
    search_fields = ("name",)
    readonly_fields = ("slug",)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "sku", "category", "price", "inventory", "published", "featured", "created_at")
    list_filter = ("category", "published", "featured")
    search_fields = ("name", "sku", "category__name")
    readonly_fields = ("slug",)
