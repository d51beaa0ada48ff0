from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from product.models import Product

User = settings.AUTH_USER_MODEL


class Cart(models.Model):
    # one cart per user, created on the first add
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="cart")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Cart of {self.user_id}"


class CartItem(models.Model):
    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="cart_items")
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    added_at = models.DateTimeField(default=timezone.now)

    class Meta:
        unique_together = ("cart", "product")
        ordering = ("-added_at",)

    def __str__(self):
        return f"{self.cart_id} - {self.product_id} x{self.quantity}"

    @property
    def line_total(self):
        return self.product.price * self.quantity
