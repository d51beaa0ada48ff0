import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models.signals import pre_save, post_save
from django.dispatch import receiver

from .models import Order, Notification

logger = logging.getLogger(__name__)


def user_group(user_id):
    return f"user_{user_id}"


@receiver(pre_save, sender=Order)
def order_pre_save(sender, instance, **kwargs):
    if instance.pk:
        instance._old_status = (
            Order.objects.filter(pk=instance.pk).values_list("status", flat=True).first()
        )
    else:
        instance._old_status = None


@receiver(post_save, sender=Order)
def order_post_save(sender, instance, created, **kwargs):
    if created:
        return

    old_status = getattr(instance, "_old_status", None)
    new_status = instance.status
    if old_status == new_status:
        return

    message = f"Your order #{instance.id} is now {instance.get_status_display()}"
    notification = Notification.objects.create(user_id=instance.user_id, order=instance, message=message)

    payload = {
        "type": "send_notification",  # handler method name in consumer
        "data": {
            "id": notification.id,
            "order_id": instance.id,
            "status": new_status,
            "message": message,
        },
    }
    user_id = instance.user_id

    def push():
        channel_layer = get_channel_layer()
        if channel_layer is None:
            return
        async_to_sync(channel_layer.group_send)(user_group(user_id), payload)
        logger.debug("Order %s status notification sent to user %s", instance.id, instance.user_id)

    # only tell the customer once the status change is committed
    transaction.on_commit(push)
