from django.contrib import admin
from .models import Order, OrderItem, Payment, Notification


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("product", "quantity", "price")
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "status", "total", "created_at")
    list_filter = ("status",)
    search_fields = ("user__email", "user__name")
    readonly_fields = ("subtotal", "tax", "shipping", "total")
    inlines = [OrderItemInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "provider_reference", "amount", "currency", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("provider_reference",)


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "order", "read", "created_at")
