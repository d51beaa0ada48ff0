from rest_framework import serializers
from .models import Product, Category


class CategorySerializer(serializers.ModelSerializer):
    product_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ("id", "name", "slug", "description", "image", "product_count")
        read_only_fields = ("slug",)

    def get_product_count(self, obj):
        # list/retrieve querysets annotate it; freshly written rows do not
        count = getattr(obj, "product_count", None)
        return obj.products.count() if count is None else count


class CategoryBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ("id", "name", "slug")


class ProductMiniSerializer(serializers.ModelSerializer):
    # minimal product shape for carts, orders and category pages
    class Meta:
        model = Product
        fields = ("id", "name", "slug", "price", "images", "inventory")


class CategoryDetailSerializer(CategorySerializer):
    products = serializers.SerializerMethodField()

    class Meta(CategorySerializer.Meta):
        fields = CategorySerializer.Meta.fields + ("products",)

    def get_products(self, obj):
        qs = obj.products.filter(published=True)
        return ProductMiniSerializer(qs, many=True).data


class ProductSerializer(serializers.ModelSerializer):
    category = CategoryBriefSerializer(read_only=True)
    category_id = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), write_only=True, source="category"
    )
    images = serializers.ListField(child=serializers.URLField(), required=False)

    class Meta:
        model = Product
        fields = (
            "id", "name", "slug", "description", "price", "compare_price", "has_discount",
            "sku", "inventory", "images", "featured", "published",
            "category", "category_id", "created_at", "updated_at",
        )
        read_only_fields = ("slug", "has_discount", "created_at", "updated_at")

    def validate_compare_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Compare price cannot be negative")
        return value
