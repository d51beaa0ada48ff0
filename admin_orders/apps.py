from django.apps import AppConfig


class AdminOrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "admin_orders"
