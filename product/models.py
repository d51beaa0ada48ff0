from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal

from .utils import generate_slug, generate_unique_slug


class SluggedModel(models.Model):
    """
    Keeps `slug` unique across the table. The slug is derived from `name` on
    first save and re-derived whenever the name changes.
    """

    class Meta:
        abstract = True

    def _name_changed(self):
        if not self.pk:
            return False
        old_name = type(self).objects.filter(pk=self.pk).values_list("name", flat=True).first()
        return old_name is not None and old_name != self.name

    def save(self, *args, **kwargs):
        if not self.slug or self._name_changed():
            others = type(self).objects.exclude(pk=self.pk).values_list("slug", flat=True)
            self.slug = generate_unique_slug(generate_slug(self.name), others)
            update_fields = kwargs.get("update_fields")
            if update_fields is not None and "slug" not in update_fields:
                kwargs["update_fields"] = [*update_fields, "slug"]
        super().save(*args, **kwargs)


class Category(SluggedModel):
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True, blank=True)
    description = models.TextField(blank=True)
    image = models.URLField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "categories"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Product(SluggedModel):
    category = models.ForeignKey(
        Category, on_delete=models.PROTECT, related_name="products"
    )
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))]
    )
    compare_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    sku = models.CharField(max_length=64, unique=True)
    # decremented only by payment confirmation; admins may edit it directly
    inventory = models.PositiveIntegerField(default=0)
    images = models.JSONField(default=list, blank=True)
    featured = models.BooleanField(default=False)
    published = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.name

    @property
    def has_discount(self):
        return bool(self.compare_price and self.compare_price > self.price)
