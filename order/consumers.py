from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .signals import user_group


class OrderNotificationConsumer(AsyncJsonWebsocketConsumer):
    """Pushes order status changes to the signed-in user's sockets."""

    async def connect(self):
        user = self.scope.get("user")
        if user is None or user.is_anonymous:
            await self.close()
            return
        # every socket of a user joins the same group
        self.group_name = user_group(user.id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

    async def disconnect(self, code):
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def send_notification(self, event):
        await self.send_json(event["data"])
